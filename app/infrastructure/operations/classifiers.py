"""Error classifiers for provider exceptions.

Converts HTTP responses, ``requests`` transport exceptions and AWS SDK errors
into standardized OperationResult objects. Centralizes the temporary vs
permanent decision so every notification provider classifies failures the
same way.

Key Functions:
- classify_http_status(): HTTP status code → OperationResult
- classify_http_error(): requests exceptions → OperationResult
- classify_aws_error(): AWS SDK errors → OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = requests.post(url, data=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

from typing import Optional

import requests
from botocore.exceptions import ClientError

from infrastructure.operations.result import CONFLICT_ERROR_CODE, OperationResult
from infrastructure.operations.status import OperationStatus

DEFAULT_RETRY_AFTER_SECONDS = 60


def _parse_retry_after(value: Optional[str]) -> int:
    if not value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return int(value)
    except (ValueError, TypeError):
        return DEFAULT_RETRY_AFTER_SECONDS


def classify_http_status(
    status_code: int,
    detail: str = "",
    retry_after: Optional[str] = None,
) -> OperationResult:
    """Classify an HTTP status code returned by a provider backend.

    Status Code Mapping:
    - 2xx: SUCCESS
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 408: Request timeout → TRANSIENT_ERROR
    - 401/403: PERMANENT_ERROR (credentials rejected)
    - 404/410: PERMANENT_ERROR with error_code GONE (destination removed)
    - 5xx: Server error → TRANSIENT_ERROR
    - Other 4xx: PERMANENT_ERROR

    Args:
        status_code: HTTP status code
        detail: Optional response body excerpt for the message
        retry_after: Raw Retry-After header value, if any

    Returns:
        OperationResult with the classified status
    """
    suffix = f": {detail}" if detail else ""

    if 200 <= status_code < 300:
        return OperationResult.success(message=f"HTTP {status_code}")

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            f"rate limited (HTTP 429){suffix}",
            error_code="RATE_LIMITED",
            retry_after=_parse_retry_after(retry_after),
        )

    if status_code == 408:
        return OperationResult.transient_error(
            f"request timeout (HTTP 408){suffix}", error_code="TIMEOUT"
        )

    if status_code in (401, 403):
        return OperationResult.permanent_error(
            f"authorization rejected (HTTP {status_code}){suffix}",
            error_code="UNAUTHORIZED",
        )

    if status_code in (404, 410):
        return OperationResult.permanent_error(
            f"destination gone (HTTP {status_code}){suffix}",
            error_code="GONE",
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"server error (HTTP {status_code}){suffix}",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"request rejected (HTTP {status_code}){suffix}",
        error_code=f"HTTP_{status_code}",
    )


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify an exception raised while talking to an HTTP backend.

    Transport failures (timeouts, connection resets, DNS) are transient.
    ``requests.HTTPError`` is classified from its response status. Anything
    else is treated as transient, since the request may not have reached
    the provider at all.

    Args:
        exc: Exception raised by requests or a provider SDK built on it

    Returns:
        OperationResult with appropriate status, message and error_code
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"request timed out: {exc}", error_code="TIMEOUT"
        )

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"connection error: {exc}", error_code="CONNECTION_ERROR"
        )

    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        response = exc.response
        return classify_http_status(
            response.status_code,
            detail=(response.text or "").strip()[:200],
            retry_after=response.headers.get("Retry-After"),
        )

    return OperationResult.transient_error(
        f"transport error: {type(exc).__name__}: {exc}",
        error_code="TRANSPORT_ERROR",
    )


_THROTTLING_CODES = frozenset(
    {"ThrottlingException", "ProvisionedThroughputExceededException", "RequestLimitExceeded"}
)

# AWS error code -> (status, error_code, message)
_AWS_ERROR_TABLE = {
    "ConditionalCheckFailedException": (
        OperationStatus.PERMANENT_ERROR,
        CONFLICT_ERROR_CODE,
        "conditional write rejected: item already exists",
    ),
    "AccessDeniedException": (
        OperationStatus.PERMANENT_ERROR,
        "FORBIDDEN",
        "access denied",
    ),
    "ResourceNotFoundException": (
        OperationStatus.NOT_FOUND,
        "NOT_FOUND",
        "table or resource not found",
    ),
    "ValidationException": (
        OperationStatus.PERMANENT_ERROR,
        "INVALID_REQUEST",
        "request failed validation",
    ),
    "InvalidParameterException": (
        OperationStatus.PERMANENT_ERROR,
        "INVALID_REQUEST",
        "invalid request parameter",
    ),
}


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify a boto3/botocore exception.

    A failed ``attribute_not_exists`` condition maps to a permanent error
    with ``error_code=CONFLICT`` so callers can tell a lost first-write race
    from a real failure. Throttling and unrecognized service errors are
    transient; anything that is not a ``ClientError`` never reached the
    service and is treated as a connection error.
    """
    if not isinstance(exc, ClientError):
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    code = (exc.response or {}).get("Error", {}).get("Code", "Unknown")

    if code in _THROTTLING_CODES:
        return OperationResult.transient_error(
            f"AWS throttled: {code}",
            error_code="RATE_LIMITED",
            retry_after=DEFAULT_RETRY_AFTER_SECONDS,
        )

    known = _AWS_ERROR_TABLE.get(code)
    if known is not None:
        status, error_code, message = known
        return OperationResult.error(status, f"AWS {message}", error_code=error_code)

    return OperationResult.transient_error(
        f"AWS client error: {code}", error_code="AWS_CLIENT_ERROR"
    )
