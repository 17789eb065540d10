from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from expiry_tracker.domain.activity import ActivityEntry
from expiry_tracker.domain.category import Category, default_categories
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.settings import TrackerSettings


class TrackerState(BaseModel):
    """
    Explicit container for everything the engine owns during a session.

    Engine operations never mutate a container in place; they return an
    updated copy.
    """

    items: List[KnowledgeItem] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=default_categories)
    settings: TrackerSettings = Field(default_factory=TrackerSettings)
    activities: List[ActivityEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def find_item(self, item_id: str) -> Optional[KnowledgeItem]:
        """Return the item with the given id, if present."""

        return next((item for item in self.items if item.id == item_id), None)

    def find_category(self, category_id: str) -> Optional[Category]:
        """Return the category with the given id, if present."""

        return next(
            (category for category in self.categories if category.id == category_id),
            None,
        )
