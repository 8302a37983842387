"""Shared capabilities for the erdiagram pipelines."""

from erdiagram.core.generators import Generators, resolve_generators

__all__ = ["Generators", "resolve_generators"]
