"""Reminder scans driven by the user's reminder window."""

from datetime import date
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.status import Status
from expiry_tracker.engine.status_classifier import days_until_expiry


class Reminder(BaseModel):
    """An item that needs attention, with its remaining days."""

    item_id: str = Field(description="Identifier of the item.")
    name: str = Field(description="Item name.")
    description: str = Field(default="", description="Item description.")
    expiry_date: date = Field(description="Item expiry date.")
    days_until_expiry: int = Field(description="Signed days until expiry.")
    status: Status = Field(description="Either expiring-soon or expired.")


def collect_reminders(
    items: Sequence[KnowledgeItem], today: date, reminder_days: int
) -> List[Reminder]:
    """Return items expiring within ``reminder_days``, then expired items.

    Args:
        items: Items to scan.
        today: Reference date.
        reminder_days: The user-configured reminder window.

    Returns:
        Reminders for upcoming expiries followed by reminders for expired items,
        each group in item order.
    """

    upcoming: List[Reminder] = []
    expired: List[Reminder] = []
    for item in items:
        remaining = days_until_expiry(item.expiry_date, today)
        if remaining < 0:
            expired.append(_reminder(item, remaining, Status.EXPIRED))
        elif remaining <= reminder_days:
            upcoming.append(_reminder(item, remaining, Status.EXPIRING_SOON))
    return [*upcoming, *expired]


def reminder_message(reminders: Sequence[Reminder]) -> Optional[str]:
    """Summarize reminders in one line, or None when there is nothing due."""

    if not reminders:
        return None
    expired = sum(1 for reminder in reminders if reminder.status == Status.EXPIRED)
    upcoming = len(reminders) - expired
    return (
        f"You have {upcoming} items expiring soon and {expired} expired items."
    )


def _reminder(item: KnowledgeItem, remaining: int, status: Status) -> Reminder:
    return Reminder(
        item_id=item.id,
        name=item.name,
        description=item.description,
        expiry_date=item.expiry_date,
        days_until_expiry=remaining,
        status=status,
    )
