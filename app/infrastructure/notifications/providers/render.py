"""Plain-text rendering of payloads for SMS and voice providers."""

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.notifications.errors import UnsupportedMessageError
from infrastructure.notifications.models import (
    AlertBundlePayload,
    AlertPayload,
    AlertStatusPayload,
    NotificationPayload,
    ScheduleOnCallUsersPayload,
    SignalPayload,
    TestPayload,
    VerificationPayload,
)

SMS_MAX_LENGTH = 1600


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def render_sms(
    provider: str, payload: NotificationPayload, config: DispatchConfig
) -> str:
    """Render a payload as SMS text, with a callback link where one exists."""
    app = config.application_name
    link = ""

    if isinstance(payload, AlertPayload):
        text = f"{app}: Alert #{payload.alert_id}: {payload.summary.strip()}"
        link = config.callback_url(f"/alerts/{payload.alert_id}")
    elif isinstance(payload, AlertBundlePayload):
        text = (
            f"{app}: Svc '{payload.service_name}': "
            f"{payload.count} unacked alert{'s' if payload.count != 1 else ''}"
        )
        link = config.callback_url(f"/services/{payload.service_id}/alerts")
    elif isinstance(payload, AlertStatusPayload):
        text = f"{app}: Alert #{payload.alert_id}: {payload.log_entry.strip()}"
    elif isinstance(payload, TestPayload):
        text = f"{app}: Test message."
    elif isinstance(payload, VerificationPayload):
        text = f"{app}: Verification code: {payload.code}"
    elif isinstance(payload, ScheduleOnCallUsersPayload):
        names = ", ".join(u.name for u in payload.users) or "No one"
        text = f"{app}: On-call for {payload.schedule_name}: {names}"
        link = payload.schedule_url
    elif isinstance(payload, SignalPayload):
        text = payload.params.get("message") or payload.params.get("summary") or ""
        if not text:
            text = ", ".join(f"{k}={v}" for k, v in sorted(payload.params.items()))
        text = f"{app}: {text}"
    else:
        raise UnsupportedMessageError(provider, type(payload).__name__)

    if link:
        text = f"{text}\n\n{link}"
    return _truncate(text, SMS_MAX_LENGTH)


def render_voice(
    provider: str, payload: NotificationPayload, config: DispatchConfig
) -> str:
    """Render a payload as a spoken sentence."""
    app = config.application_name

    if isinstance(payload, AlertPayload):
        return (
            f"This is {app} with an alert notification. "
            f"Alert {payload.alert_id} for service {payload.service_name}. "
            f"{payload.summary.strip()}."
        )
    if isinstance(payload, AlertBundlePayload):
        return (
            f"This is {app} with an alert notification. "
            f"Service {payload.service_name} has {payload.count} unacknowledged alerts."
        )
    if isinstance(payload, AlertStatusPayload):
        return (
            f"This is {app} with a status update for alert {payload.alert_id}. "
            f"{payload.log_entry.strip()}."
        )
    if isinstance(payload, TestPayload):
        return f"This is a test message from {app}."
    if isinstance(payload, VerificationPayload):
        spaced = ", ".join(payload.code)
        return f"This is {app} with your verification code. Your code is {spaced}."

    raise UnsupportedMessageError(provider, type(payload).__name__)
