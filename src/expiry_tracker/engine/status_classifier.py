"""Date-driven lifecycle classification for knowledge items."""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.status import Status
from expiry_tracker.domain.timestamps import as_utc

DEFAULT_STATUS_THRESHOLD_DAYS = 30
DEFAULT_RENEWED_WINDOW_DAYS = 30


def days_until_expiry(expiry_date: date, today: date) -> int:
    """Return whole calendar days from ``today`` until ``expiry_date``.

    Both values are calendar dates, so the time of day never shifts the
    result. Negative values mean the date has passed.

    Args:
        expiry_date: The expiry date.
        today: The reference date.

    Returns:
        Signed day count.
    """

    return (expiry_date - today).days


def days_since(moment: datetime, reference: Union[date, datetime]) -> int:
    """Return whole days elapsed between ``moment`` and ``reference``.

    A datetime reference counts completed 24-hour periods, so 30.4 days
    is 30. A plain date reference counts calendar days.
    """

    if isinstance(reference, datetime):
        return (as_utc(reference) - as_utc(moment)) // timedelta(days=1)
    return (reference - moment.date()).days


def classify(
    item: KnowledgeItem,
    today: date,
    reminder_threshold: int = DEFAULT_STATUS_THRESHOLD_DAYS,
    renewed_window: int = DEFAULT_RENEWED_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> Status:
    """Classify an item into exactly one lifecycle status.

    Precedence is expired, expiring-soon, renewed, active. An item that
    expires today is expiring-soon, not expired.

    Args:
        item: The item to classify.
        today: The reference date.
        reminder_threshold: Days ahead of expiry that count as expiring-soon.
        renewed_window: Days after a renewal that count as renewed.
        now: Current instant; when given, renewal age is measured in
            elapsed days from it instead of calendar days from ``today``.

    Returns:
        The derived status.
    """

    remaining = days_until_expiry(item.expiry_date, today)
    if remaining < 0:
        return Status.EXPIRED
    if remaining <= reminder_threshold:
        return Status.EXPIRING_SOON
    reference = now if now is not None else today
    if _recently_renewed(item.last_renewed, reference, renewed_window):
        return Status.RENEWED
    return Status.ACTIVE


def _recently_renewed(
    last_renewed: Optional[datetime],
    reference: Union[date, datetime],
    renewed_window: int,
) -> bool:
    if last_renewed is None:
        return False
    return days_since(last_renewed, reference) <= renewed_window
