class TrackerError(Exception):
    """Base exception for the knowledge expiry tracker."""

    pass


class ValidationError(TrackerError):
    """Input, reference, or import payload failed validation."""

    pass


class NotFoundError(TrackerError):
    """An operation referenced an identifier that does not exist."""

    pass
