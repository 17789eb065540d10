from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from expiry_tracker.domain.knowledge_item import KnowledgeItem, RenewalEvent

TODAY = date(2026, 10, 18)
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_item() -> Callable[..., KnowledgeItem]:
    """Factory for items expiring ``days`` after the fixed test date."""

    counter = {"value": 0}

    def _make(days: int = 60, **overrides: Any) -> KnowledgeItem:
        counter["value"] += 1
        fields: dict[str, Any] = {
            "id": f"item-{counter['value']}",
            "name": f"Item {counter['value']}",
            "category": "certifications",
            "expiry_date": TODAY + timedelta(days=days),
            "created_at": NOW - timedelta(days=100),
        }
        fields.update(overrides)
        if fields.get("last_renewed") and "renewal_history" not in overrides:
            fields["renewal_history"] = [RenewalEvent(date=fields["last_renewed"])]
        return KnowledgeItem(**fields)

    return _make
