"""Injectable id and clock capabilities.

The DSL builder and the structural normalizer never reach for a global
uuid or clock directly. They take a :class:`Generators` instance so tests
can supply deterministic stand-ins.
"""

from typing import Callable, Optional

from erdiagram.models.base import new_uuid, utc_now_iso

IdFactory = Callable[[], str]
Clock = Callable[[], str]


class Generators:
    """Bundle of the two non-deterministic capabilities used by the core."""

    def __init__(self, new_id: Optional[IdFactory] = None, now: Optional[Clock] = None):
        """Initialize generators.

        Args:
            new_id: Returns a fresh unique id. Defaults to uuid4 strings.
            now: Returns the current time as an ISO-8601 string. Defaults to UTC now.
        """
        self.new_id: IdFactory = new_id or new_uuid
        self.now: Clock = now or utc_now_iso


def resolve_generators(generators: Optional[Generators]) -> Generators:
    """Return ``generators`` or the default uuid/UTC pair."""
    return generators if generators is not None else Generators()
