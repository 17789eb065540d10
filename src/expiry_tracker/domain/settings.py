from enum import Enum

from pydantic import Field, NonNegativeInt, PositiveInt

from expiry_tracker.domain.wire_model import WireModel


class SortKey(str, Enum):
    """Allowed sort orders for the item list."""

    EXPIRY_DATE = "expiry-date"
    NAME = "name"
    PRIORITY = "priority"
    CREATED_DATE = "created-date"


class TrackerSettings(WireModel):
    """
    User preferences persisted alongside the tracked items.

    Only ``items_per_page`` and ``reminder_days`` affect engine behavior; the
    rest are display and notification preferences carried through storage
    and export files.
    """

    theme: str = Field(default="light", description="Display theme name.")
    items_per_page: PositiveInt = Field(default=25, description="Page size for lists.")
    default_sort: SortKey = Field(
        default=SortKey.EXPIRY_DATE, description="Sort order applied to lists."
    )
    show_expiry_warnings: bool = Field(
        default=True, description="Highlight items close to expiry."
    )
    sound_notifications: bool = Field(default=True, description="Play notification sounds.")
    desktop_notifications: bool = Field(
        default=False, description="Mirror notifications to the desktop."
    )
    notification_time: str = Field(
        default="09:00", description="Preferred time of day for reminders."
    )
    enable_notifications: bool = Field(
        default=True, description="Emit reminder notifications."
    )
    reminder_days: NonNegativeInt = Field(
        default=30, description="Days ahead of expiry that reminders start."
    )
    weekly_digest: bool = Field(default=False, description="Send a weekly digest.")
    auto_backup_days: NonNegativeInt = Field(
        default=7, alias="autoBackup", description="Days between automatic backups."
    )
    enable_analytics: bool = Field(default=True, description="Show analytics views.")
