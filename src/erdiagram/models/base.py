"""Base models for erdiagram."""

from datetime import datetime, timezone
from typing import Any, Dict
import uuid
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


def new_uuid() -> str:
    """Return a fresh random identifier."""
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class ERBaseModel(BaseModel):
    """Base model for every diagram value.

    Attributes are snake_case in Python and camelCase on the wire, so the
    persisted JSON keeps the field names the editor has always written.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire form, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ERTimestampedModel(ERBaseModel):
    """Base model for entities that carry an id and creation/update stamps."""

    id: str = Field(default_factory=new_uuid, description="Unique identifier")
    created_at: str = Field(
        default_factory=utc_now_iso, description="Creation timestamp (ISO-8601)"
    )
    updated_at: str = Field(
        default_factory=utc_now_iso, description="Last update timestamp (ISO-8601)"
    )
