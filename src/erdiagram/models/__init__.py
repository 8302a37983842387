"""Core data models for erdiagram."""

from .base import ERBaseModel, ERTimestampedModel
from .table import (
    Table,
    Column,
    ColumnConstraints,
    ColumnType,
    Position,
    ExportTarget,
    COLUMN_TYPES,
    EXPORT_TARGETS,
)
from .relation import Relation, RelationType, EdgeLineStyle, EdgeVisibility
from .memo import Memo
from .diagram import ERDiagram, Envelope

__all__ = [
    "ERBaseModel",
    "ERTimestampedModel",
    "Table",
    "Column",
    "ColumnConstraints",
    "ColumnType",
    "Position",
    "ExportTarget",
    "COLUMN_TYPES",
    "EXPORT_TARGETS",
    "Relation",
    "RelationType",
    "EdgeLineStyle",
    "EdgeVisibility",
    "Memo",
    "ERDiagram",
    "Envelope",
]
