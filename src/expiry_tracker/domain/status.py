"""Enumerations for derived item lifecycle states."""

from enum import Enum


class Status(str, Enum):
    """Derived lifecycle status of a knowledge item. Never stored."""

    ACTIVE = "active"
    EXPIRING_SOON = "expiring-soon"
    EXPIRED = "expired"
    RENEWED = "renewed"
