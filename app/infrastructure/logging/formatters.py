"""Structlog processors applied to every dispatch log line.

Usage:
    from infrastructure.logging.formatters import mask_sensitive_data

    processors.append(mask_sensitive_data())
"""

from typing import Any

MASK_VALUE = "***REDACTED***"

# Keys whose values are replaced entirely
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "private_key",
        "p256dh",
        "auth_key",
    }
)

# Keys whose values keep only their last digits
PARTIAL_PATTERNS = frozenset({"phone_number", "destination_number", "to_number"})


def _mask_partial(value: Any, visible: int = 4) -> str:
    text = str(value)
    if len(text) <= visible:
        return "*" * len(text)
    return "*" * (len(text) - visible) + text[-visible:]


def _matches(key: str, patterns: frozenset[str]) -> bool:
    key = key.lower()
    return any(p in key for p in patterns)


def mask_sensitive_data(
    mask_value: str = MASK_VALUE,
    additional_patterns: frozenset[str] | None = None,
):
    """Build a processor hiding credentials and phone numbers.

    Keys containing a credential pattern lose their value entirely. Phone
    number keys keep the last four digits so separate deliveries stay
    distinguishable in the logs. ``None`` values pass through.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        out = {}
        for key, value in event_dict.items():
            if value is not None and _matches(key, patterns):
                value = mask_value
            elif value is not None and _matches(key, PARTIAL_PATTERNS):
                value = _mask_partial(value)
            out[key] = value
        return out

    return processor


def truncate_large_values(max_length: int = 500):
    """Bound string values; provider error bodies can be very large."""

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        oversized = [
            k for k, v in event_dict.items() if isinstance(v, str) and len(v) > max_length
        ]
        for key in oversized:
            value = event_dict[key]
            event_dict[key] = f"{value[:max_length]}...[truncated, {len(value)} chars total]"
        return event_dict

    return processor
