from typing import Any, List

from pydantic import Field, field_validator

from expiry_tracker.domain.wire_model import WireModel

DEFAULT_CATEGORY_COLOR = "#2563eb"
UNKNOWN_CATEGORY_NAME = "Unknown"


class Category(WireModel):
    """
    A user-defined grouping of knowledge items.

    Args:
        id: Unique category identifier.
        name: Display name.
        description: Optional description.
        color: Display color, opaque to the engine.
    """

    id: str = Field(min_length=1, description="Unique category identifier.")
    name: str = Field(description="Display name of the category.")
    description: str = Field(default="", description="Optional description.")
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, description="Display color.")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _blank_when_missing(cls, value: Any) -> Any:
        return "" if value is None else value


class CategoryInput(WireModel):
    """User-editable fields for creating or editing a category."""

    name: str = Field(description="Display name of the category.")
    description: str = Field(default="", description="Optional description.")
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, description="Display color.")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value


def default_categories() -> List[Category]:
    """Return the categories seeded on first start and after a full clear."""

    return [
        Category(
            id="certifications",
            name="Certifications",
            description="Professional certifications and licenses",
            color="#2563eb",
        ),
        Category(
            id="training",
            name="Training",
            description="Training courses and workshops",
            color="#10b981",
        ),
        Category(
            id="licenses",
            name="Licenses",
            description="Professional licenses and permits",
            color="#f59e0b",
        ),
        Category(
            id="skills",
            name="Skills",
            description="Technical and soft skills",
            color="#ef4444",
        ),
    ]
