"""Utility modules for erdiagram."""

from erdiagram.utils.type_utils import normalize_type, coerce_type, TYPE_MAPPING

__all__ = ["normalize_type", "coerce_type", "TYPE_MAPPING"]
