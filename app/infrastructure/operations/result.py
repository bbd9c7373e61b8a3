"""Operation result dataclass.

Uniform result type returned by storage and provider integrations. The
dispatch pipeline converts these into notification send results, so the
transient/permanent split here decides whether a message is retried.
"""

from typing import Optional, Any
from dataclasses import dataclass

from infrastructure.operations.status import OperationStatus

CONFLICT_ERROR_CODE = "CONFLICT"


@dataclass
class OperationResult:
    """Outcome of one storage or provider call.

    ``data`` carries the DynamoDB item or provider response on success.
    ``error_code`` is a machine-readable reason such as ``CONFLICT`` or
    ``RATE_LIMITED``; ``retry_after`` is set in seconds when throttled.
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_transient(self) -> bool:
        """True if the failure may succeed when retried later."""
        return self.status == OperationStatus.TRANSIENT_ERROR

    @property
    def is_conflict(self) -> bool:
        """True if a conditional write lost against an existing item."""
        return self.error_code == CONFLICT_ERROR_CODE

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Build a failure result with an explicit status."""
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Create a transient (retryable) error result.

        Use for network timeouts, rate limiting, cancelled sends and
        provider 5xx responses.
        """
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Create a permanent (non-retryable) error result.

        Use for rejected destinations, gone subscriptions, validation and
        authentication failures.
        """
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
