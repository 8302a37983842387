"""Versioned persistence format for diagrams."""

from erdiagram.schema.codec import (
    MIN_SUPPORTED_SCHEMA_VERSION,
    PayloadKind,
    SchemaTooNewError,
    SchemaTooOldError,
    VersionError,
    classify,
    decode,
    encode,
    encode_json,
)
from erdiagram.schema.migrations import CURRENT_SCHEMA_VERSION, MIGRATIONS, run_migrations
from erdiagram.schema.normalizer import looks_like_diagram, normalize_diagram

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "MIN_SUPPORTED_SCHEMA_VERSION",
    "MIGRATIONS",
    "PayloadKind",
    "SchemaTooNewError",
    "SchemaTooOldError",
    "VersionError",
    "classify",
    "decode",
    "encode",
    "encode_json",
    "looks_like_diagram",
    "normalize_diagram",
    "run_migrations",
]
