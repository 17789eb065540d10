"""Tests for filtering, sorting, and pagination."""

from datetime import timedelta

from expiry_tracker.domain.filter_state import FilterState
from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.settings import SortKey
from expiry_tracker.domain.status import Status
from expiry_tracker.engine.filtering import (
    filter_items,
    paginate,
    sort_items,
    total_pages,
)


def _sample(make_item):
    return [
        make_item(days=5, name="AWS Cert", description="Cloud"),
        make_item(days=90, name="First Aid", category="training"),
        make_item(days=-3, name="Driving License", category="licenses"),
        make_item(days=200, name="Python", description="aws lambda tooling"),
    ]


def test_empty_filter_matches_everything(make_item, today) -> None:
    """Default filter returns every item in order."""
    items = _sample(make_item)

    assert filter_items(items, FilterState(), today) == items


def test_search_matches_name_or_description(make_item, today) -> None:
    """Search is a case-insensitive substring over name or description."""
    items = _sample(make_item)

    result = filter_items(items, FilterState(search="AWS"), today)

    assert [item.name for item in result] == ["AWS Cert", "Python"]


def test_category_and_status_are_anded(make_item, today) -> None:
    """All predicates must hold."""
    items = _sample(make_item)

    by_category = filter_items(items, FilterState(category="licenses"), today)
    by_status = filter_items(items, FilterState(status=Status.EXPIRING_SOON), today)
    combined = filter_items(
        items, FilterState(category="training", status=Status.EXPIRED), today
    )

    assert [item.name for item in by_category] == ["Driving License"]
    assert [item.name for item in by_status] == ["AWS Cert"]
    assert combined == []


def test_filter_is_idempotent_and_order_preserving(make_item, today) -> None:
    """Reapplying a filter changes nothing and keeps relative order."""
    items = _sample(make_item)
    item_filter = FilterState(status=Status.ACTIVE)

    once = filter_items(items, item_filter, today)
    twice = filter_items(once, item_filter, today)

    assert once == twice
    positions = [items.index(item) for item in once]
    assert positions == sorted(positions)


def test_paginate_slices_one_indexed_pages(make_item) -> None:
    """Pages are 1-indexed and past-the-end pages are empty."""
    items = [make_item() for _ in range(5)]

    assert paginate(items, 1, 2) == items[0:2]
    assert paginate(items, 3, 2) == items[4:5]
    assert paginate(items, 4, 2) == []
    assert paginate(items, 0, 2) == []
    assert paginate(items, -1, 2) == []
    assert total_pages(5, 2) == 3
    assert total_pages(0, 25) == 0


def test_sort_items_orders_without_mutating(make_item, now) -> None:
    """Sorting returns a new list; ties keep original order."""
    first = make_item(days=50, name="beta", priority=Priority.LOW)
    second = make_item(days=10, name="Alpha", priority=Priority.CRITICAL)
    third = make_item(
        days=10, name="gamma", priority=Priority.LOW, created_at=now - timedelta(days=1)
    )
    items = [first, second, third]

    assert sort_items(items, SortKey.EXPIRY_DATE) == [second, third, first]
    assert sort_items(items, SortKey.NAME) == [second, first, third]
    assert sort_items(items, SortKey.PRIORITY) == [second, first, third]
    assert sort_items(items, SortKey.CREATED_DATE)[0] == third
    assert items == [first, second, third]
