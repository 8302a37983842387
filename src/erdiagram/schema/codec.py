"""Envelope codec and version gate for persisted diagrams.

Writes always produce ``{"schemaVersion": CURRENT, "diagram": ...}``.
Reads accept envelopes inside the supported window, legacy bare diagrams
(treated as version 0) and, as a forward-compatibility escape hatch,
too-new envelopes whose payload still looks like a diagram.
"""

import json
import logging
import math
from enum import Enum
from typing import Any, Optional, Tuple

from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.models import ERBaseModel, ERDiagram, Envelope
from erdiagram.schema.migrations import CURRENT_SCHEMA_VERSION, run_migrations
from erdiagram.schema.normalizer import looks_like_diagram, normalize_diagram

logger = logging.getLogger(__name__)

# Number of older generations still readable
SUPPORTED_GENERATIONS = 2
MIN_SUPPORTED_SCHEMA_VERSION = max(0, CURRENT_SCHEMA_VERSION - SUPPORTED_GENERATIONS)
LEGACY_SCHEMA_VERSION = 0


class VersionError(ValueError):
    """Raised when an envelope's schema version is outside the supported window."""

    TOO_NEW = "too_new"
    TOO_OLD = "too_old"

    def __init__(self, message: str, version: float, kind: str):
        super().__init__(message)
        self.version = version
        self.kind = kind


class SchemaTooNewError(VersionError):
    """The data was written by a newer release; upgrade the application."""

    def __init__(self, version: float):
        super().__init__(
            f"Diagram schema version {version} is too new (this release reads up to "
            f"{CURRENT_SCHEMA_VERSION}). Update the application to open it.",
            version,
            VersionError.TOO_NEW,
        )


class SchemaTooOldError(VersionError):
    """The data predates the supported window; migrate it through an older release."""

    def __init__(self, version: float):
        super().__init__(
            f"Diagram schema version {version} is too old (this release reads "
            f"{MIN_SUPPORTED_SCHEMA_VERSION} to {CURRENT_SCHEMA_VERSION}). Open and save "
            f"it with an intermediate release first.",
            version,
            VersionError.TOO_OLD,
        )


class PayloadKind(str, Enum):
    """How a decoded value was classified."""

    ENVELOPE = "envelope"
    LEGACY = "legacy"
    INVALID = "invalid"


def _is_version(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        # Arbitrarily large ints are still comparable against the window
        return True
    return isinstance(value, float) and math.isfinite(value)


def _load(value: Any) -> Any:
    """Turn raw input into plain JSON-like data, or None if it cannot be read."""
    if isinstance(value, ERBaseModel):
        return value.to_dict()
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            logger.debug("Input is not valid JSON")
            return None
    return value


def classify(value: Any) -> Tuple[PayloadKind, Optional[float], Any]:
    """Classify input as envelope, legacy diagram or neither.

    Args:
        value: Mapping, JSON text/bytes, model instance or anything else

    Returns:
        Tuple of (kind, schema version, diagram payload). Version and
        payload are None for INVALID input.
    """
    data = _load(value)
    if isinstance(data, dict):
        if _is_version(data.get("schemaVersion")) and "diagram" in data:
            return PayloadKind.ENVELOPE, data["schemaVersion"], data["diagram"]
        if looks_like_diagram(data):
            return PayloadKind.LEGACY, LEGACY_SCHEMA_VERSION, data
    return PayloadKind.INVALID, None, None


def encode(diagram: Any, generators: Optional[Generators] = None) -> Envelope:
    """Normalize ``diagram`` and wrap it at the current schema version."""
    return Envelope(
        schema_version=CURRENT_SCHEMA_VERSION,
        diagram=normalize_diagram(diagram, generators),
    )


def encode_json(
    diagram: Any, generators: Optional[Generators] = None, indent: Optional[int] = 2
) -> str:
    """Encode ``diagram`` and serialize the envelope to JSON text."""
    return json.dumps(encode(diagram, generators).to_dict(), ensure_ascii=False, indent=indent)


def decode(value: Any, generators: Optional[Generators] = None) -> Optional[ERDiagram]:
    """Decode, gate and migrate persisted diagram data.

    Args:
        value: Envelope or legacy diagram as a mapping, JSON text or bytes
        generators: Id factory and clock for fields the normalizer must fill in

    Returns:
        The normalized diagram at the current schema version, or None if
        ``value`` is not diagram data at all

    Raises:
        SchemaTooNewError: Version above the window and payload not diagram-shaped
        SchemaTooOldError: Version below the window, whatever the payload
    """
    generators = resolve_generators(generators)
    kind, version, payload = classify(value)

    if kind is PayloadKind.INVALID:
        return None

    if version > CURRENT_SCHEMA_VERSION:
        if not looks_like_diagram(payload):
            raise SchemaTooNewError(version)
        logger.warning(
            f"Reading diagram with newer schema version {version} "
            f"(current {CURRENT_SCHEMA_VERSION}); unknown fields are dropped"
        )
        return normalize_diagram(payload, generators)

    if version < MIN_SUPPORTED_SCHEMA_VERSION:
        raise SchemaTooOldError(version)

    if not looks_like_diagram(payload) or version != int(version):
        logger.debug(f"Envelope payload at version {version} is not a diagram")
        return None

    logger.debug(f"Decoding {kind.value} diagram at schema version {version}")
    migrated = run_migrations(
        Envelope(schema_version=int(version), diagram=payload),
        CURRENT_SCHEMA_VERSION,
        generators,
    )
    if migrated is None:
        return None
    return normalize_diagram(migrated.diagram, generators)
