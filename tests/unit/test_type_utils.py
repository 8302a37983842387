"""Tests for column type normalization."""

import pytest

from erdiagram.models import COLUMN_TYPES
from erdiagram.utils.type_utils import coerce_type, normalize_type


class TestTypeUtils:
    """Test normalize_type and coerce_type."""

    def test_canonical_names(self):
        """Every canonical type maps to itself."""
        for column_type in COLUMN_TYPES:
            assert normalize_type(column_type) == column_type

    def test_case_insensitive(self):
        """Type tokens are case-insensitive."""
        assert normalize_type("text") == "Text"
        assert normalize_type("DATETIME") == "DateTime"
        assert normalize_type("yes/no") == "Yes/No"
        assert normalize_type("enumlist") == "EnumList"

    def test_aliases(self):
        """Common aliases map onto canonical types."""
        assert normalize_type("yesno") == "Yes/No"
        assert normalize_type("YesNo") == "Yes/No"
        assert normalize_type("uniqueid") == "UniqueID"

    def test_unknown_type(self):
        """Unknown tokens raise with the list of valid types."""
        with pytest.raises(ValueError) as exc_info:
            normalize_type("varchar")
        assert "Invalid type: 'varchar'" in str(exc_info.value)
        assert "Text" in str(exc_info.value)

    def test_empty_type(self):
        """Empty tokens are rejected."""
        with pytest.raises(ValueError):
            normalize_type("")

    def test_coerce_falls_back(self):
        """coerce_type never raises."""
        assert coerce_type("number") == "Number"
        assert coerce_type("bogus") == "Text"
        assert coerce_type(None) == "Text"
        assert coerce_type(42) == "Text"
        assert coerce_type("bogus", default="Name") == "Name"
