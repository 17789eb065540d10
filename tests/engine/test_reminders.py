"""Tests for reminder scans."""

from expiry_tracker.domain.status import Status
from expiry_tracker.engine.reminders import collect_reminders, reminder_message


def test_collect_reminders_orders_upcoming_then_expired(make_item, today) -> None:
    """Upcoming expiries come first, expired items after."""
    items = [
        make_item(days=-2, name="gone"),
        make_item(days=5, name="soon"),
        make_item(days=0, name="today"),
        make_item(days=20, name="later"),
    ]

    reminders = collect_reminders(items, today, reminder_days=7)

    assert [reminder.name for reminder in reminders] == ["soon", "today", "gone"]
    assert reminders[-1].status == Status.EXPIRED
    assert reminders[-1].days_until_expiry == -2
    assert reminders[1].status == Status.EXPIRING_SOON


def test_reminder_message(make_item, today) -> None:
    """Summarizes counts, or returns None when nothing is due."""
    reminders = collect_reminders(
        [make_item(days=-1), make_item(days=3), make_item(days=4)], today, 30
    )

    assert reminder_message([]) is None
    assert (
        reminder_message(reminders)
        == "You have 2 items expiring soon and 1 expired items."
    )
