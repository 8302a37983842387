"""Version-to-version migration steps for persisted diagrams.

Each step takes an envelope at version N and returns one at N+1. A step
only has to re-run the structural normalizer: normalization is idempotent
and covers every guarantee earlier generations made, so a chain of any
length is equivalent to normalizing once and stamping the final version.
To add a generation, append one ``(from_version, step)`` pair.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.models import Envelope
from erdiagram.schema.normalizer import normalize_diagram

logger = logging.getLogger(__name__)

MigrationStep = Callable[[Envelope, Generators], Envelope]


def migrate_v0_to_v1(envelope: Envelope, generators: Generators) -> Envelope:
    """v0 is the bare legacy diagram; v1 wraps it and always carries memos."""
    return Envelope(schema_version=1, diagram=normalize_diagram(envelope.diagram, generators))


def migrate_v1_to_v2(envelope: Envelope, generators: Generators) -> Envelope:
    """v2 adds per-relation rendering hints with clamped numeric ranges."""
    return Envelope(schema_version=2, diagram=normalize_diagram(envelope.diagram, generators))


MIGRATIONS: List[Tuple[int, MigrationStep]] = [
    (0, migrate_v0_to_v1),
    (1, migrate_v1_to_v2),
]

CURRENT_SCHEMA_VERSION = MIGRATIONS[-1][0] + 1

_STEPS: Dict[int, MigrationStep] = dict(MIGRATIONS)


def run_migrations(
    envelope: Envelope,
    target_version: int = CURRENT_SCHEMA_VERSION,
    generators: Optional[Generators] = None,
) -> Optional[Envelope]:
    """Apply steps until ``envelope`` reaches ``target_version``.

    Args:
        envelope: Envelope at any version up to ``target_version``
        target_version: Version to stop at
        generators: Id factory and clock passed to every step

    Returns:
        The migrated envelope, or None if no step exists for a version
        along the way
    """
    generators = resolve_generators(generators)
    current = envelope
    while current.schema_version < target_version:
        step = _STEPS.get(current.schema_version)
        if step is None:
            logger.debug(f"No migration step from schema version {current.schema_version}")
            return None
        logger.debug(
            f"Migrating diagram from schema version {current.schema_version} "
            f"to {current.schema_version + 1}"
        )
        current = step(current, generators)
    return current
