from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from pydantic import Field, NonNegativeFloat, field_validator, model_validator

from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.timestamps import as_utc
from expiry_tracker.domain.wire_model import WireModel

# Legacy renewals stamp lastRenewed and the history entry with separate clock reads.
RENEWAL_STAMP_TOLERANCE = timedelta(seconds=1)


def _coerce_identifier(value: Any) -> Any:
    """Accept legacy numeric identifiers by normalizing them to text."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(int(value))
    return value


class RenewalEvent(WireModel):
    """Append-only record of a single renewal."""

    date: datetime = Field(description="When the renewal happened.")
    cost: NonNegativeFloat = Field(default=0.0, description="Cost paid for the renewal.")

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("cost", mode="before")
    @classmethod
    def _default_missing_cost(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class KnowledgeItem(WireModel):
    """A tracked credential, license, or skill with an expiry date."""

    id: str = Field(min_length=1, description="Unique item identifier.")
    name: str = Field(min_length=1, description="Display name of the item.")
    description: str = Field(default="", description="Optional free-text description.")
    category: str = Field(description="Identifier of the owning category.")
    priority: Priority = Field(default=Priority.MEDIUM, description="Item priority.")
    expiry_date: date = Field(description="Calendar date the item expires.")
    cost: NonNegativeFloat = Field(default=0.0, description="Base cost of the item.")
    tags: List[str] = Field(default_factory=list, description="Ordered free-form tags.")
    notes: str = Field(default="", description="Optional notes.")
    created_at: datetime = Field(description="Creation timestamp, immutable.")
    last_renewed: Optional[datetime] = Field(
        default=None, description="Timestamp of the most recent renewal."
    )
    renewal_history: List[RenewalEvent] = Field(
        default_factory=list, description="Renewal events, oldest first."
    )

    @field_validator("id", "category", mode="before")
    @classmethod
    def _normalize_identifiers(cls, value: Any) -> Any:
        return _coerce_identifier(value)

    @field_validator("description", "notes", mode="before")
    @classmethod
    def _blank_when_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("cost", mode="before")
    @classmethod
    def _zero_when_missing(cls, value: Any) -> Any:
        return 0.0 if value is None or value == "" else value

    @field_validator("tags", mode="before")
    @classmethod
    def _empty_tags_when_missing(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("last_renewed")
    @classmethod
    def _normalize_last_renewed(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return as_utc(value)

    @model_validator(mode="after")
    def _check_last_renewed(self) -> "KnowledgeItem":
        """Require last_renewed to be absent or the latest renewal date."""

        if self.last_renewed is None:
            return self
        if not self.renewal_history:
            raise ValueError("last_renewed is set but renewal_history is empty.")
        latest = self.renewal_history[-1].date
        if abs(self.last_renewed - latest) > RENEWAL_STAMP_TOLERANCE:
            raise ValueError("last_renewed must match the latest renewal date.")
        return self

    @property
    def renewal_count(self) -> int:
        """Number of renewals recorded for this item."""

        return len(self.renewal_history)


class KnowledgeItemInput(WireModel):
    """User-editable fields for creating or editing a knowledge item."""

    name: str = Field(description="Display name of the item.")
    description: str = Field(default="", description="Optional free-text description.")
    category: str = Field(description="Identifier of the owning category.")
    priority: Priority = Field(default=Priority.MEDIUM, description="Item priority.")
    expiry_date: date = Field(description="Calendar date the item expires.")
    cost: NonNegativeFloat = Field(default=0.0, description="Base cost of the item.")
    tags: List[str] = Field(default_factory=list, description="Ordered free-form tags.")
    notes: str = Field(default="", description="Optional notes.")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        return _coerce_identifier(value)

    @field_validator("description", "notes", mode="before")
    @classmethod
    def _blank_when_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        """Accept a comma-separated string as well as a list."""

        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value
