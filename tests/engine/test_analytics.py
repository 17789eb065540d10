"""Tests for dashboard counters, chart datasets, and renewal analytics."""

from datetime import timedelta

from expiry_tracker.domain.category import Category
from expiry_tracker.domain.knowledge_item import RenewalEvent
from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.tracker_state import TrackerState
from expiry_tracker.engine.analytics import (
    EMPTY_MARKER,
    ChartKind,
    average_lifespan,
    build_summary,
    category_histogram,
    category_label,
    dashboard_counts,
    expiry_timeline,
    most_active_category,
    priority_histogram,
    renewal_analytics,
    round_half_up,
    status_histogram,
    timeline_chart,
    total_cost,
)


def _renewed(make_item, now, renewals, days_ago=0, **overrides):
    renewed_at = now - timedelta(days=days_ago)
    history = [RenewalEvent(date=renewed_at, cost=overrides.get("cost", 0))] * renewals
    return make_item(
        renewal_history=history,
        last_renewed=renewed_at if renewals else None,
        **overrides,
    )


def test_dashboard_counts_past_and_future(make_item, today) -> None:
    """One expired and one far-future item."""
    items = [make_item(days=-5), make_item(days=40)]

    counts = dashboard_counts(items, today)

    assert counts.total == 2
    assert counts.expired == 1
    assert counts.expiring_soon == 0
    assert counts.up_to_date == 1


def test_up_to_date_includes_renewed_items(make_item, today, now) -> None:
    """Active and renewed items both count as up to date."""
    items = [make_item(days=90), make_item(days=90, last_renewed=now), make_item(days=3)]

    counts = dashboard_counts(items, today)

    assert counts.up_to_date == 2
    assert counts.expiring_soon == 1


def test_status_histogram_lists_every_status(make_item, today, now) -> None:
    """Counts are reported for all four statuses in a fixed order."""
    items = [make_item(days=90), make_item(days=90, last_renewed=now), make_item(days=-1)]

    series = status_histogram(items, today)

    assert series.kind == ChartKind.STATUS
    assert series.as_pairs() == [
        ("active", 1),
        ("expiring-soon", 0),
        ("expired", 1),
        ("renewed", 1),
    ]


def test_expiry_timeline_counts_exact_days(make_item, today) -> None:
    """Counts items per exact expiry day over the 90-day window."""
    items = [make_item(days=0), make_item(days=3), make_item(days=3), make_item(days=95)]

    timeline = expiry_timeline(items, today)
    chart = timeline_chart(timeline)

    assert len(timeline) == 90
    assert timeline[0].day == today
    assert timeline[0].count == 1
    assert timeline[3].count == 2
    assert sum(point.count for point in timeline) == 3
    assert len(chart.values) == 30
    assert chart.labels[0] == today.isoformat()


def test_category_histogram_uses_names_in_stored_order(make_item) -> None:
    """Counts by category name; dangling references are not counted."""
    categories = [
        Category(id="b", name="Beta"),
        Category(id="a", name="Alpha"),
    ]
    items = [make_item(category="a"), make_item(category="a"), make_item(category="zzz")]

    series = category_histogram(items, categories)

    assert series.as_pairs() == [("Beta", 0), ("Alpha", 2)]
    assert category_label(categories, "zzz") == "Unknown"


def test_priority_histogram(make_item) -> None:
    """Counts per priority in low-to-critical order."""
    items = [
        make_item(priority=Priority.HIGH),
        make_item(priority=Priority.HIGH),
        make_item(priority=Priority.CRITICAL),
    ]

    series = priority_histogram(items)

    assert series.values == [0, 0, 2, 1]


def test_total_cost_includes_renewals(make_item, now) -> None:
    """Base costs plus every renewal cost; empty collections cost nothing."""
    items = [
        _renewed(make_item, now, renewals=2, cost=50),
        make_item(cost=25.5),
    ]

    assert total_cost([]) == 0
    assert total_cost(items) == 50 + 2 * 50 + 25.5


def test_average_lifespan_floors_then_rounds_half_up(make_item, now) -> None:
    """Whole days per item, mean rounded half up; unrenewed items skipped."""
    first = make_item(
        created_at=now - timedelta(days=1, hours=12),
        renewal_history=[RenewalEvent(date=now)],
        last_renewed=now,
    )
    second = make_item(
        created_at=now - timedelta(days=2),
        renewal_history=[RenewalEvent(date=now)],
        last_renewed=now,
    )

    assert average_lifespan([make_item()]) == 0
    assert average_lifespan([first, second]) == 2
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2


def test_renewal_analytics(make_item, now) -> None:
    """Aggregates renewal totals, rate, and the most active category."""
    categories = [
        Category(id="certifications", name="Certifications"),
        Category(id="training", name="Training"),
    ]
    items = [
        _renewed(make_item, now, renewals=1, category="certifications"),
        _renewed(make_item, now, renewals=2, category="training"),
    ]

    analytics = renewal_analytics(items, categories)

    assert analytics.total_renewals == 3
    assert analytics.renewal_rate == 150
    assert analytics.most_active_category == "Training"


def test_most_active_category_ties_and_empty(make_item) -> None:
    """Ties go to the first category; no items gives the empty marker."""
    categories = [Category(id="a", name="Alpha"), Category(id="b", name="Beta")]

    assert most_active_category([], categories) == EMPTY_MARKER
    assert most_active_category([make_item(category="b")], categories) == "Alpha"
    assert most_active_category([make_item()], []) == EMPTY_MARKER


def test_empty_collection_analytics() -> None:
    """Every analytic has a defined value for an empty collection."""
    analytics = renewal_analytics([], [])

    assert analytics.total_renewals == 0
    assert analytics.total_cost == 0
    assert analytics.avg_lifespan == 0
    assert analytics.renewal_rate == 0
    assert analytics.most_active_category == EMPTY_MARKER


def test_build_summary_combines_views(make_item, today) -> None:
    """The summary carries counters, charts, and analytics together."""
    state = TrackerState(items=[make_item(days=2), make_item(days=-2)])

    summary = build_summary(state, today, timeline_days=10, timeline_visible_days=5)

    assert summary.today == today
    assert summary.counts.total == 2
    assert len(summary.timeline) == 10
    assert len(summary.timeline_chart.values) == 5
    assert summary.category_chart.labels[0] == "Certifications"
    assert summary.renewals.most_active_category == "Certifications"
