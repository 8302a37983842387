"""Diagram and envelope models for erdiagram."""

from typing import Any, Dict, List, Optional
from pydantic import Field
from .base import ERBaseModel
from .table import Table
from .relation import Relation
from .memo import Memo


class ERDiagram(ERBaseModel):
    """The full diagram value shared by the DSL and schema pipelines."""

    tables: List[Table] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)
    memos: List[Memo] = Field(default_factory=list)

    def get_table(self, table_id: str) -> Optional[Table]:
        """Return the table with the given id, if present."""
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    def find_table(self, name: str) -> Optional[Table]:
        """Return the first table with the given name, if present."""
        for table in self.tables:
            if table.name == name:
                return table
        return None


class Envelope(ERBaseModel):
    """Versioned wrapper used for persistence.

    ``diagram`` stays untyped until the codec has validated and migrated it.
    """

    schema_version: int = Field(description="Schema generation of the payload")
    diagram: Any = Field(default=None, description="Diagram payload")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if isinstance(self.diagram, ERDiagram):
            data["diagram"] = self.diagram.to_dict()
        return data
