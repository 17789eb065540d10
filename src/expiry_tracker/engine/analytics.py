"""Aggregations and chart datasets derived from the item collection."""

from collections import Counter
from datetime import date, datetime, timedelta
from enum import Enum
from math import floor
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from expiry_tracker.domain.category import Category, UNKNOWN_CATEGORY_NAME
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.status import Status
from expiry_tracker.domain.tracker_state import TrackerState
from expiry_tracker.engine.status_classifier import (
    DEFAULT_RENEWED_WINDOW_DAYS,
    DEFAULT_STATUS_THRESHOLD_DAYS,
    classify,
)

EMPTY_MARKER = "-"
DEFAULT_TIMELINE_DAYS = 90
DEFAULT_TIMELINE_VISIBLE_DAYS = 30
STATUS_ORDER = (Status.ACTIVE, Status.EXPIRING_SOON, Status.EXPIRED, Status.RENEWED)
PRIORITY_ORDER = (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL)


class ChartKind(str, Enum):
    """Tags identifying which chart a dataset feeds."""

    STATUS = "status"
    TIMELINE = "timeline"
    CATEGORY = "category"
    PRIORITY = "priority"


class ChartSeries(BaseModel):
    """A labelled dataset any rendering collaborator can consume."""

    kind: ChartKind = Field(description="Chart the dataset belongs to.")
    labels: List[str] = Field(default_factory=list, description="Point labels.")
    values: List[int] = Field(default_factory=list, description="Point values.")

    def as_pairs(self) -> List[tuple[str, int]]:
        """Return (label, value) pairs in order."""

        return list(zip(self.labels, self.values))


class DashboardCounts(BaseModel):
    """Headline counters shown on the dashboard."""

    total: int = Field(description="Number of tracked items.")
    expiring_soon: int = Field(description="Items classified expiring-soon.")
    expired: int = Field(description="Items classified expired.")
    up_to_date: int = Field(
        description="Everything else, active and renewed items together."
    )


class TimelinePoint(BaseModel):
    """Number of items expiring on a single day."""

    day: date = Field(description="Calendar day.")
    count: int = Field(description="Items whose expiry date is this day.")


class RenewalAnalytics(BaseModel):
    """Renewal and cost analytics over the whole collection."""

    total_renewals: int = Field(description="Renewal events across all items.")
    total_cost: float = Field(description="Base costs plus every renewal cost.")
    avg_lifespan: int = Field(
        description="Mean days from creation to last renewal for renewed items."
    )
    renewal_rate: int = Field(description="Renewals per item, as a percentage.")
    most_active_category: str = Field(
        description="Category name with the most renewals, or '-'."
    )


class TrackerSummary(BaseModel):
    """Every derived view recomputed after a mutation."""

    today: date
    now: Optional[datetime] = None
    counts: DashboardCounts
    status_chart: ChartSeries
    timeline: List[TimelinePoint]
    timeline_chart: ChartSeries
    category_chart: ChartSeries
    priority_chart: ChartSeries
    renewals: RenewalAnalytics


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""

    return int(floor(value + 0.5))


def category_label(categories: Sequence[Category], category_id: str) -> str:
    """Return the category name for an id, or 'Unknown' for dangling ids."""

    for category in categories:
        if category.id == category_id:
            return category.name
    return UNKNOWN_CATEGORY_NAME


def status_counts(
    items: Iterable[KnowledgeItem],
    today: date,
    reminder_threshold: int = DEFAULT_STATUS_THRESHOLD_DAYS,
    renewed_window: int = DEFAULT_RENEWED_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> Dict[Status, int]:
    """Count items per status; every status is present in the result."""

    counter = Counter(
        classify(item, today, reminder_threshold, renewed_window, now)
        for item in items
    )
    return {status: counter.get(status, 0) for status in STATUS_ORDER}


def dashboard_counts(
    items: Sequence[KnowledgeItem],
    today: date,
    reminder_threshold: int = DEFAULT_STATUS_THRESHOLD_DAYS,
) -> DashboardCounts:
    """Compute the dashboard counters."""

    counts = status_counts(items, today, reminder_threshold)
    total = len(items)
    expiring_soon = counts[Status.EXPIRING_SOON]
    expired = counts[Status.EXPIRED]
    return DashboardCounts(
        total=total,
        expiring_soon=expiring_soon,
        expired=expired,
        up_to_date=total - expiring_soon - expired,
    )


def status_histogram(
    items: Sequence[KnowledgeItem],
    today: date,
    reminder_threshold: int = DEFAULT_STATUS_THRESHOLD_DAYS,
    renewed_window: int = DEFAULT_RENEWED_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> ChartSeries:
    """Build the status chart dataset."""

    counts = status_counts(items, today, reminder_threshold, renewed_window, now)
    return ChartSeries(
        kind=ChartKind.STATUS,
        labels=[status.value for status in STATUS_ORDER],
        values=[counts[status] for status in STATUS_ORDER],
    )


def expiry_timeline(
    items: Sequence[KnowledgeItem],
    today: date,
    days: int = DEFAULT_TIMELINE_DAYS,
) -> List[TimelinePoint]:
    """Count items expiring on each of the next ``days`` days, today first.

    Matching is exact date equality, not a range.
    """

    expiries = Counter(item.expiry_date for item in items)
    points = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        points.append(TimelinePoint(day=day, count=expiries.get(day, 0)))
    return points


def timeline_chart(
    timeline: Sequence[TimelinePoint],
    visible_days: int = DEFAULT_TIMELINE_VISIBLE_DAYS,
) -> ChartSeries:
    """Build the timeline chart dataset from the first ``visible_days`` points."""

    window = list(timeline[:visible_days])
    return ChartSeries(
        kind=ChartKind.TIMELINE,
        labels=[point.day.isoformat() for point in window],
        values=[point.count for point in window],
    )


def category_histogram(
    items: Sequence[KnowledgeItem], categories: Sequence[Category]
) -> ChartSeries:
    """Count items per category name, in stored category order.

    Items referencing unknown categories are not counted.
    """

    counts: Dict[str, int] = {}
    per_id = category_item_counts(items, categories)
    for category in categories:
        counts[category.name] = per_id[category.id]
    return ChartSeries(
        kind=ChartKind.CATEGORY,
        labels=list(counts.keys()),
        values=list(counts.values()),
    )


def category_item_counts(
    items: Sequence[KnowledgeItem], categories: Sequence[Category]
) -> Dict[str, int]:
    """Return the number of items per category id."""

    counter = Counter(item.category for item in items)
    return {category.id: counter.get(category.id, 0) for category in categories}


def priority_histogram(items: Sequence[KnowledgeItem]) -> ChartSeries:
    """Build the priority chart dataset."""

    counter = Counter(item.priority for item in items)
    return ChartSeries(
        kind=ChartKind.PRIORITY,
        labels=[priority.value for priority in PRIORITY_ORDER],
        values=[counter.get(priority, 0) for priority in PRIORITY_ORDER],
    )


def total_cost(items: Iterable[KnowledgeItem]) -> float:
    """Sum of base costs plus every renewal cost."""

    return sum(
        item.cost + sum(event.cost for event in item.renewal_history)
        for item in items
    )


def average_lifespan(items: Iterable[KnowledgeItem]) -> int:
    """Mean whole days from creation to last renewal over renewed items."""

    lifespans = []
    for item in items:
        if not item.renewal_history:
            continue
        last = item.last_renewed or item.created_at
        lifespans.append((last - item.created_at) // timedelta(days=1))
    if not lifespans:
        return 0
    return round_half_up(sum(lifespans) / len(lifespans))


def most_active_category(
    items: Sequence[KnowledgeItem], categories: Sequence[Category]
) -> str:
    """Return the category name with the most renewals.

    Ties go to the first category encountered. Returns '-' when there is
    nothing to rank.
    """

    if not items:
        return EMPTY_MARKER
    activity: Dict[str, int] = {}
    for category in categories:
        activity[category.name] = sum(
            item.renewal_count for item in items if item.category == category.id
        )
    best_name = EMPTY_MARKER
    best_count = -1
    for name, count in activity.items():
        if count > best_count:
            best_name, best_count = name, count
    return best_name


def renewal_analytics(
    items: Sequence[KnowledgeItem], categories: Sequence[Category]
) -> RenewalAnalytics:
    """Compute renewal and cost analytics."""

    total_renewals = sum(item.renewal_count for item in items)
    rate = round_half_up(100 * total_renewals / len(items)) if items else 0
    return RenewalAnalytics(
        total_renewals=total_renewals,
        total_cost=total_cost(items),
        avg_lifespan=average_lifespan(items),
        renewal_rate=rate,
        most_active_category=most_active_category(items, categories),
    )


def build_summary(
    state: TrackerState,
    today: date,
    reminder_threshold: int = DEFAULT_STATUS_THRESHOLD_DAYS,
    renewed_window: int = DEFAULT_RENEWED_WINDOW_DAYS,
    timeline_days: int = DEFAULT_TIMELINE_DAYS,
    timeline_visible_days: int = DEFAULT_TIMELINE_VISIBLE_DAYS,
    now: Optional[datetime] = None,
) -> TrackerSummary:
    """Recompute every derived view from a state snapshot.

    Args:
        state: The state container to summarize.
        today: Reference date.
        reminder_threshold: Expiring-soon threshold in days.
        renewed_window: Days after renewal that count as renewed.
        timeline_days: Length of the computed expiry timeline.
        timeline_visible_days: Number of timeline days exposed to the chart.
        now: Current instant used to age renewals.

    Returns:
        A TrackerSummary with counters, chart datasets, and analytics.
    """

    items = state.items
    timeline = expiry_timeline(items, today, timeline_days)
    return TrackerSummary(
        today=today,
        now=now,
        counts=dashboard_counts(items, today, reminder_threshold),
        status_chart=status_histogram(
            items, today, reminder_threshold, renewed_window, now
        ),
        timeline=timeline,
        timeline_chart=timeline_chart(timeline, timeline_visible_days),
        category_chart=category_histogram(items, state.categories),
        priority_chart=priority_histogram(items),
        renewals=renewal_analytics(items, state.categories),
    )
