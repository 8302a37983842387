"""Tests for erdiagram data models."""

import pytest
from pydantic import ValidationError

from erdiagram.models import (
    Column,
    ColumnConstraints,
    ERDiagram,
    Envelope,
    Memo,
    Relation,
    Table,
    EXPORT_TARGETS,
)


class TestModels:
    """Test data models."""

    def test_column_defaults(self):
        """Test creating a column with only a name."""
        column = Column(name="title")

        assert column.type == "Text"
        assert not column.is_key
        assert not column.is_label
        assert not column.is_virtual
        assert column.order == 0
        assert column.constraints == ColumnConstraints()
        assert column.id

    def test_column_rejects_unknown_type(self):
        """Test that the column type is a closed enumeration."""
        with pytest.raises(ValidationError):
            Column(name="x", type="VARCHAR")

    def test_wire_form_is_camel_case(self):
        """Test that to_dict uses the persisted camelCase names."""
        column = Column(
            id="c1",
            name="org_id",
            type="Ref",
            is_key=False,
            constraints=ColumnConstraints(required=True, ref_table_id="t1"),
        )

        data = column.to_dict()
        assert data["isKey"] is False
        assert data["isLabel"] is False
        assert data["constraints"] == {"required": True, "refTableId": "t1"}
        assert "description" not in data

    def test_populate_by_alias(self):
        """Test that models accept camelCase input."""
        column = Column.model_validate({"name": "x", "isKey": True, "isVirtual": True})

        assert column.is_key
        assert column.is_virtual

    def test_table_defaults(self):
        """Test creating a table with defaults."""
        table = Table(name="users")

        assert table.columns == []
        assert table.position.x == 0 and table.position.y == 0
        assert table.export_targets == list(EXPORT_TARGETS)
        assert table.created_at
        assert table.updated_at

    def test_table_column_lookup(self):
        """Test finding columns by id and by name."""
        table = Table(
            name="users",
            columns=[Column(id="c1", name="id"), Column(id="c2", name="name")],
        )

        assert table.get_column("c2").name == "name"
        assert table.find_column("id").id == "c1"
        assert table.get_column("missing") is None
        assert table.find_column("missing") is None

    def test_relation_defaults(self):
        """Test relation rendering defaults."""
        relation = Relation()

        assert relation.type == "one-to-many"
        assert relation.edge_follower_icon_name == "arrow-right"
        assert relation.edge_follower_icon_size == 14
        assert relation.edge_follower_icon_speed == 90
        assert relation.edge_line_style is None
        assert relation.edge_visibility is None

    def test_relation_icon_size_bounds(self):
        """Test that the model itself refuses out-of-range icon sizes."""
        with pytest.raises(ValidationError):
            Relation(edge_follower_icon_size=100)

    def test_memo_defaults(self):
        """Test creating a memo."""
        memo = Memo(text="hello")

        assert memo.text == "hello"
        assert memo.width is None
        assert "width" not in memo.to_dict()

    def test_diagram_lookup(self):
        """Test finding tables on a diagram."""
        diagram = ERDiagram(tables=[Table(id="t1", name="orgs")])

        assert diagram.get_table("t1").name == "orgs"
        assert diagram.find_table("orgs").id == "t1"
        assert diagram.find_table("users") is None

    def test_envelope_to_dict(self):
        """Test that an envelope serializes its diagram in wire form."""
        envelope = Envelope(schema_version=2, diagram=ERDiagram())

        assert envelope.to_dict() == {
            "schemaVersion": 2,
            "diagram": {"tables": [], "relations": [], "memos": []},
        }

    def test_extra_fields_forbidden(self):
        """Test that models reject unknown fields."""
        with pytest.raises(ValidationError):
            Table(name="users", bogus=True)
