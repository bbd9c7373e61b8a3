"""Errors for the dispatch module."""

from typing import Optional


class DispatchError(Exception):
    """Base class for dispatch failures.

    Attributes:
        operation: Name of the step that failed (e.g. "lookup alert")
    """

    def __init__(self, operation: str, message: str = ""):
        super().__init__(f"{operation}: {message}" if message else operation)
        self.operation = operation


class LookupFailedError(DispatchError):
    """A collaborator lookup failed; the cause is chained as ``__cause__``."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        super().__init__(operation, str(cause) if cause else "")


class OriginalNotificationNotFoundError(DispatchError):
    """A status update has no original delivery to refer to."""

    def __init__(self, alert_id: int, dest: str):
        super().__init__(
            "lookup original notification",
            f"could not find original notification for alert {alert_id} to {dest}",
        )
        self.alert_id = alert_id
        self.dest = dest


class TrackingError(DispatchError):
    """The delivery tracker could not be read."""
