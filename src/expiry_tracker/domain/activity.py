from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from expiry_tracker.domain.timestamps import as_utc
from expiry_tracker.domain.wire_model import WireModel


class ActivityType(str, Enum):
    """Kinds of user actions recorded in the activity log."""

    ADD = "add"
    EDIT = "edit"
    RENEW = "renew"
    DELETE = "delete"
    CATEGORY = "category"
    IMPORT = "import"
    CLEAR = "clear"


class ActivityEntry(WireModel):
    """A single entry in the recent activity log."""

    id: str = Field(description="Unique activity identifier.")
    type: ActivityType = Field(description="Kind of action performed.")
    description: str = Field(description="Human readable summary.")
    timestamp: datetime = Field(description="When the action happened.")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)
