"""Tests for lifecycle status classification."""

from datetime import datetime, timedelta, timezone

from expiry_tracker.domain.status import Status
from expiry_tracker.engine.mutations import renew_item
from expiry_tracker.domain.tracker_state import TrackerState
from expiry_tracker.engine.status_classifier import classify, days_since, days_until_expiry


def test_past_expiry_is_expired(make_item, today) -> None:
    """Items past their expiry date are expired."""
    assert classify(make_item(days=-1), today) == Status.EXPIRED


def test_expiring_today_is_expiring_soon(make_item, today) -> None:
    """An item expiring today is expiring-soon, not expired."""
    assert classify(make_item(days=0), today) == Status.EXPIRING_SOON


def test_threshold_boundary(make_item, today) -> None:
    """Exactly 30 days is expiring-soon; 31 days is active."""
    assert classify(make_item(days=30), today) == Status.EXPIRING_SOON
    assert classify(make_item(days=31), today) == Status.ACTIVE


def test_custom_threshold(make_item, today) -> None:
    """The threshold parameter moves the expiring-soon boundary."""
    item = make_item(days=20)

    assert classify(item, today, reminder_threshold=10) == Status.ACTIVE
    assert classify(item, today, reminder_threshold=20) == Status.EXPIRING_SOON


def test_recent_renewal_is_renewed(make_item, today, now) -> None:
    """Items renewed within 30 days and far from expiry are renewed."""
    recent = make_item(days=120, last_renewed=now - timedelta(days=30))
    stale = make_item(days=120, last_renewed=now - timedelta(days=31))

    assert classify(recent, today) == Status.RENEWED
    assert classify(stale, today) == Status.ACTIVE


def test_expiry_dominates_renewal(make_item, today, now) -> None:
    """A renewed item close to expiry stays expiring-soon."""
    item = make_item(days=10, last_renewed=now)

    assert classify(item, today) == Status.EXPIRING_SOON


def test_renewed_item_checked_later_stays_expiring_soon(make_item, today, now) -> None:
    """AWS Cert scenario: renew, then check five days later."""
    item = make_item(days=10, name="AWS Cert", cost=100)
    state = TrackerState(items=[item])
    assert classify(item, today) == Status.EXPIRING_SOON

    state, renewed = renew_item(state, item.id, now)

    assert renewed.last_renewed == now
    assert classify(renewed, today + timedelta(days=5)) == Status.EXPIRING_SOON


def test_classify_is_total(make_item, today, now) -> None:
    """Every item maps to exactly one of the four statuses."""
    for offset in range(-40, 80, 7):
        for renewed in (None, now, now - timedelta(days=45)):
            status = classify(make_item(days=offset, last_renewed=renewed), today)
            assert status in set(Status)


def test_day_counts_ignore_time_of_day(today) -> None:
    """Differences are whole calendar days."""
    late = datetime(2026, 10, 17, 23, 59, tzinfo=timezone.utc)

    assert days_until_expiry(today, today) == 0
    assert days_until_expiry(today + timedelta(days=3), today) == 3
    assert days_until_expiry(today - timedelta(days=3), today) == -3
    assert days_since(late, today) == 1


def test_renewal_age_counts_elapsed_days_from_now(make_item, today, now) -> None:
    """With the current instant, renewal age is completed 24-hour periods."""
    renewed_at = now - timedelta(days=30, hours=14)
    item = make_item(days=120, last_renewed=renewed_at)

    assert days_since(renewed_at, now) == 30
    assert days_since(renewed_at, today) == 31
    assert classify(item, today, now=now) == Status.RENEWED
    assert classify(item, today) == Status.ACTIVE
    assert classify(item, today, now=now + timedelta(hours=10)) == Status.ACTIVE
