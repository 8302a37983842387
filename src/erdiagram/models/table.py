"""Table and Column models for erdiagram."""

from typing import Any, Dict, List, Literal, Optional, get_args
from pydantic import Field
from .base import ERBaseModel, ERTimestampedModel, new_uuid


# Column types understood by the editor
ColumnType = Literal[
    "Address",
    "App",
    "ChangeCounter",
    "ChangeLocation",
    "ChangeTimestamp",
    "Color",
    "Date",
    "DateTime",
    "Decimal",
    "Drawing",
    "Duration",
    "Email",
    "Enum",
    "EnumList",
    "File",
    "Image",
    "LatLong",
    "LongText",
    "Name",
    "Number",
    "Percent",
    "Phone",
    "Price",
    "Progress",
    "Ref",
    "Show",
    "Signature",
    "Text",
    "Thumbnail",
    "Time",
    "Url",
    "Video",
    "XY",
    "Yes/No",
    # Legacy type, kept so old diagrams still load
    "UniqueID",
]

COLUMN_TYPES = get_args(ColumnType)
DEFAULT_COLUMN_TYPE = "Text"
REF_COLUMN_TYPE = "Ref"

# Export destinations a table can opt into
ExportTarget = Literal["excel", "json", "package"]

EXPORT_TARGETS = get_args(ExportTarget)


class ColumnConstraints(ERBaseModel):
    """Optional constraint bag attached to a column."""

    required: Optional[bool] = None
    unique: Optional[bool] = None
    default_value: Optional[str] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    enum_values: Optional[List[str]] = None
    ref_table_id: Optional[str] = Field(
        default=None, description="Referenced table id (Ref columns only)"
    )
    ref_column_id: Optional[str] = Field(
        default=None, description="Referenced column id (Ref columns only)"
    )


class Column(ERBaseModel):
    """Represents a column in a table."""

    id: str = Field(default_factory=new_uuid, description="Unique within its table")
    name: str = Field(description="Column name")
    type: ColumnType = Field(default=DEFAULT_COLUMN_TYPE, description="Column type")
    is_key: bool = Field(default=False, description="Whether this is the key column")
    is_label: bool = Field(
        default=False, description="Whether this column labels a row"
    )
    is_virtual: bool = Field(
        default=False, description="Computed column with no physical storage"
    )
    description: Optional[str] = None
    app_sheet: Optional[Dict[str, Any]] = Field(
        default=None, description="Free-form note parameters"
    )
    dummy_values: Optional[List[str]] = Field(
        default=None, description="Preferred values for sample data"
    )
    constraints: ColumnConstraints = Field(default_factory=ColumnConstraints)
    order: int = Field(default=0, description="Position among sibling columns")

    @property
    def is_ref(self) -> bool:
        return self.type == REF_COLUMN_TYPE


class Position(ERBaseModel):
    """Canvas coordinates of a node."""

    x: float = 0
    y: float = 0


class Table(ERTimestampedModel):
    """Represents a table in the diagram."""

    name: str = Field(description="Table name")
    description: Optional[str] = None
    columns: List[Column] = Field(default_factory=list, description="Table columns")
    position: Position = Field(default_factory=Position)
    color: Optional[str] = None
    export_targets: List[ExportTarget] = Field(
        default_factory=lambda: list(EXPORT_TARGETS),
        description="Export destinations (empty means none)",
    )
    sync_group_id: Optional[str] = None

    def get_column(self, column_id: str) -> Optional[Column]:
        """Return the column with the given id, if present."""
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def find_column(self, name: str) -> Optional[Column]:
        """Return the first column with the given name, if present."""
        for column in self.columns:
            if column.name == name:
                return column
        return None
