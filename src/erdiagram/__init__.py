"""erdiagram - text DSL and versioned persistence for ER diagrams."""

from erdiagram.core.generators import Generators
from erdiagram.dsl import DSLSyntaxError, parse_dsl, serialize_dsl
from erdiagram.models import ERDiagram, Envelope
from erdiagram.schema import (
    CURRENT_SCHEMA_VERSION,
    SchemaTooNewError,
    SchemaTooOldError,
    VersionError,
    decode,
    encode,
    normalize_diagram,
)

try:
    from importlib.metadata import version

    __version__ = version("erdiagram")
except Exception:
    # Package metadata is not available (e.g. running from a source checkout)
    __version__ = "0.1.0"

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DSLSyntaxError",
    "ERDiagram",
    "Envelope",
    "Generators",
    "SchemaTooNewError",
    "SchemaTooOldError",
    "VersionError",
    "decode",
    "encode",
    "normalize_diagram",
    "parse_dsl",
    "serialize_dsl",
]
