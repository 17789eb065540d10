from expiry_tracker.domain.activity import ActivityEntry, ActivityType
from expiry_tracker.domain.category import (
    Category,
    CategoryInput,
    UNKNOWN_CATEGORY_NAME,
    default_categories,
)
from expiry_tracker.domain.exceptions import NotFoundError, TrackerError, ValidationError
from expiry_tracker.domain.filter_state import ALL, FilterState
from expiry_tracker.domain.knowledge_item import (
    KnowledgeItem,
    KnowledgeItemInput,
    RenewalEvent,
)
from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.settings import SortKey, TrackerSettings
from expiry_tracker.domain.status import Status
from expiry_tracker.domain.tracker_state import TrackerState

__all__ = [
    "ALL",
    "ActivityEntry",
    "ActivityType",
    "Category",
    "CategoryInput",
    "FilterState",
    "KnowledgeItem",
    "KnowledgeItemInput",
    "NotFoundError",
    "Priority",
    "RenewalEvent",
    "SortKey",
    "Status",
    "TrackerError",
    "TrackerSettings",
    "TrackerState",
    "UNKNOWN_CATEGORY_NAME",
    "ValidationError",
    "default_categories",
]
