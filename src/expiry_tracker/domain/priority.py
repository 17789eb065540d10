from enum import Enum


class Priority(str, Enum):
    """Allowed priority levels for knowledge items."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
