from abc import ABC, abstractmethod
from typing import Sequence

from expiry_tracker.domain.category import Category
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.engine.analytics import TrackerSummary


class Renderer(ABC):
    """Outward interface for displaying recomputed tracker views."""

    @abstractmethod
    def render(
        self,
        items: Sequence[KnowledgeItem],
        categories: Sequence[Category],
        summary: TrackerSummary,
    ) -> None:
        """Display the current items and derived summary.

        Args:
            items: Items to show.
            categories: Categories used to label items.
            summary: Derived dashboard, chart, and analytics data.
        """
