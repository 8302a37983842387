"""CLI command modules."""

from . import dsl, schema

__all__ = [
    "dsl",
    "schema",
]
