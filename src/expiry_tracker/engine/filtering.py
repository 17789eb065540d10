"""Filtering, sorting, and pagination of knowledge items."""

from datetime import date, datetime
from math import ceil
from typing import Callable, Dict, List, Optional, Sequence

from expiry_tracker.domain.filter_state import ALL, FilterState
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.settings import SortKey
from expiry_tracker.engine.status_classifier import (
    DEFAULT_STATUS_THRESHOLD_DAYS,
    classify,
)

PRIORITY_RANK: Dict[Priority, int] = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


def matches_search(item: KnowledgeItem, search: str) -> bool:
    """Return True when the search text occurs in the name or description."""

    if not search:
        return True
    needle = search.lower()
    return needle in item.name.lower() or needle in item.description.lower()


def filter_items(
    items: Sequence[KnowledgeItem],
    item_filter: FilterState,
    today: date,
    reminder_threshold: int = DEFAULT_STATUS_THRESHOLD_DAYS,
    now: Optional[datetime] = None,
) -> List[KnowledgeItem]:
    """Apply search, category, and status predicates.

    The result preserves the relative order of ``items``.

    Args:
        items: Items to filter.
        item_filter: Active filter state.
        today: Reference date used for status matching.
        reminder_threshold: Expiring-soon threshold for status matching.
        now: Current instant used to age renewals.

    Returns:
        The matching items.
    """

    return [
        item
        for item in items
        if matches_search(item, item_filter.search)
        and (item_filter.category == ALL or item.category == item_filter.category)
        and (
            item_filter.status == ALL
            or classify(item, today, reminder_threshold, now=now) == item_filter.status
        )
    ]


def paginate(
    items: Sequence[KnowledgeItem], page: int, page_size: int
) -> List[KnowledgeItem]:
    """Return a 1-indexed page slice; out-of-range pages are empty."""

    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def total_pages(item_count: int, page_size: int) -> int:
    """Return the number of pages needed for ``item_count`` items."""

    if page_size <= 0:
        return 0
    return ceil(item_count / page_size)


def sort_items(
    items: Sequence[KnowledgeItem], key: SortKey
) -> List[KnowledgeItem]:
    """Return a sorted copy of ``items``; ties keep their original order."""

    sort_keys: Dict[SortKey, Callable[[KnowledgeItem], object]] = {
        SortKey.EXPIRY_DATE: lambda item: item.expiry_date,
        SortKey.NAME: lambda item: item.name.lower(),
        SortKey.PRIORITY: lambda item: PRIORITY_RANK[item.priority],
    }
    if key == SortKey.CREATED_DATE:
        return sorted(items, key=lambda item: item.created_at, reverse=True)
    return sorted(items, key=sort_keys[key])
