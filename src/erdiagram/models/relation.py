"""Relation model for erdiagram."""

from typing import Literal, Optional, get_args
from pydantic import Field
from .base import ERBaseModel, new_uuid


RelationType = Literal["one-to-one", "one-to-many", "many-to-many"]
EdgeLineStyle = Literal["solid", "dashed", "dotted"]
EdgeVisibility = Literal["rootOnly"]

RELATION_TYPES = get_args(RelationType)
EDGE_LINE_STYLES = get_args(EdgeLineStyle)
EDGE_VISIBILITIES = get_args(EdgeVisibility)

DEFAULT_RELATION_TYPE = "one-to-many"

# Follower icon rendering hints and their bounds
DEFAULT_ICON_NAME = "arrow-right"
DEFAULT_ICON_SIZE = 14
MIN_ICON_SIZE = 8
MAX_ICON_SIZE = 48
DEFAULT_ICON_SPEED = 90.0
MIN_ICON_SPEED = 10.0
MAX_ICON_SPEED = 1000.0


class Relation(ERBaseModel):
    """A parent/child edge between two table columns.

    The source is the parent ("1" side, the referenced key) and the target
    is the child ("N" side, the column holding the reference). Endpoints
    are plain ids and may dangle.
    """

    id: str = Field(default_factory=new_uuid, description="Unique identifier")
    source_table_id: str = Field(default="", description="Parent table id")
    source_column_id: str = Field(default="", description="Parent key column id")
    target_table_id: str = Field(default="", description="Child table id")
    target_column_id: str = Field(default="", description="Child reference column id")
    type: RelationType = Field(default=DEFAULT_RELATION_TYPE, description="Cardinality")
    label: Optional[str] = None
    edge_animation_enabled: Optional[bool] = Field(
        default=None, description="Per-edge override of the animation setting"
    )
    edge_follower_icon_enabled: Optional[bool] = Field(
        default=None, description="Per-edge override of the follower icon setting"
    )
    edge_follower_icon_name: str = DEFAULT_ICON_NAME
    edge_follower_icon_size: int = Field(
        default=DEFAULT_ICON_SIZE, ge=MIN_ICON_SIZE, le=MAX_ICON_SIZE
    )
    edge_follower_icon_speed: float = Field(
        default=DEFAULT_ICON_SPEED, ge=MIN_ICON_SPEED, le=MAX_ICON_SPEED
    )
    edge_line_style: Optional[EdgeLineStyle] = None
    edge_visibility: Optional[EdgeVisibility] = None
