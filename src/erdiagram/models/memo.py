"""Memo model for erdiagram."""

from typing import Optional
from pydantic import Field
from .base import ERTimestampedModel
from .table import Position


class Memo(ERTimestampedModel):
    """A free-text sticky note placed on the canvas."""

    text: str = Field(default="", description="Memo body, may contain line breaks")
    position: Position = Field(default_factory=Position)
    width: Optional[float] = None
    height: Optional[float] = None
