"""Type utilities for normalizing column type tokens."""

from typing import Any

from erdiagram.models.table import COLUMN_TYPES, DEFAULT_COLUMN_TYPE

# Map lowercase type tokens to canonical column types
TYPE_MAPPING = {column_type.lower(): column_type for column_type in COLUMN_TYPES}

# Common aliases
TYPE_MAPPING.update(
    {
        "yesno": "Yes/No",
        "latlng": "LatLong",
        "uniqueid": "UniqueID",
    }
)


def normalize_type(type_str: str) -> str:
    """
    Normalize a type token to its canonical column type.

    Args:
        type_str: The type token (case-insensitive, supports aliases)

    Returns:
        The canonical column type, e.g. ``Text`` or ``Yes/No``

    Raises:
        ValueError: If the type token is not recognized
    """
    if not type_str:
        raise ValueError("Type cannot be empty")

    normalized = TYPE_MAPPING.get(type_str.lower())
    if not normalized:
        valid_types = sorted(COLUMN_TYPES)
        raise ValueError(
            f"Invalid type: '{type_str}'. "
            f"Valid types: {', '.join(valid_types)}"
        )
    return normalized


def coerce_type(value: Any, default: str = DEFAULT_COLUMN_TYPE) -> str:
    """
    Coerce an arbitrary stored value to a column type without raising.

    Args:
        value: Candidate value read from persisted data
        default: Type to fall back to when ``value`` is not recognized

    Returns:
        The canonical column type, or ``default``
    """
    if not isinstance(value, str):
        return default
    return TYPE_MAPPING.get(value.lower(), default)
