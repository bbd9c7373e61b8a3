"""Message dispatch engine.

Turns pending outgoing messages into provider sends:
- Partition the backlog into ready and held messages
- Apply the high-priority voice policy to alert notifications
- Build a channel-agnostic payload per message type
- Send through the notification manager and track first deliveries

Example:
    engine = create_engine(
        alerts=alert_store,
        alert_logs=alert_log_store,
        contacts=contact_method_store,
        schedules=schedule_store,
        on_call=on_call_store,
        verifications=verification_store,
    )
    batch = engine.send_pending(messages, [MessageType.ALERT], get_dispatch_config())
"""

from typing import Optional

from infrastructure.notifications.manager import NotificationManager
from infrastructure.services.providers import get_notification_manager, get_settings
from modules.dispatch.builder import BuildOutcome, PayloadBuilder
from modules.dispatch.engine import DispatchBatch, DispatchEngine
from modules.dispatch.errors import (
    DispatchError,
    LookupFailedError,
    OriginalNotificationNotFoundError,
    TrackingError,
)
from modules.dispatch.models import (
    Alert,
    AlertLogEntry,
    AlertLogType,
    ContactMethod,
    Message,
    Schedule,
    User,
)
from modules.dispatch.partition import partition_pending
from modules.dispatch.priority import apply_high_priority_override
from modules.dispatch.stores import (
    AlertLogStore,
    AlertStore,
    ContactMethodStore,
    DynamoDBSignalParamStore,
    OnCallStore,
    ScheduleStore,
    SignalParamStore,
    VerificationStore,
)
from modules.dispatch.tracker import DeliveryTracker, DynamoDBDeliveryTracker


def create_engine(
    alerts: AlertStore,
    alert_logs: AlertLogStore,
    contacts: ContactMethodStore,
    schedules: ScheduleStore,
    on_call: OnCallStore,
    verifications: VerificationStore,
    signals: Optional[SignalParamStore] = None,
    tracker: Optional[DeliveryTracker] = None,
    manager: Optional[NotificationManager] = None,
) -> DispatchEngine:
    """Wire a dispatch engine, defaulting the state it owns to DynamoDB."""
    tables = get_settings().persistence
    tracker = tracker or DynamoDBDeliveryTracker(tables.DELIVERY_RECORDS_TABLE)
    builder = PayloadBuilder(
        alerts=alerts,
        alert_logs=alert_logs,
        contacts=contacts,
        schedules=schedules,
        on_call=on_call,
        verifications=verifications,
        signals=signals or DynamoDBSignalParamStore(tables.SIGNAL_MESSAGES_TABLE),
        tracker=tracker,
    )
    return DispatchEngine(
        builder=builder,
        manager=manager or get_notification_manager(),
        alert_logs=alert_logs,
        tracker=tracker,
    )


__all__ = [
    "create_engine",
    "BuildOutcome",
    "PayloadBuilder",
    "DispatchBatch",
    "DispatchEngine",
    "DispatchError",
    "LookupFailedError",
    "OriginalNotificationNotFoundError",
    "TrackingError",
    "Alert",
    "AlertLogEntry",
    "AlertLogType",
    "ContactMethod",
    "Message",
    "Schedule",
    "User",
    "partition_pending",
    "apply_high_priority_override",
    "AlertLogStore",
    "AlertStore",
    "ContactMethodStore",
    "DynamoDBSignalParamStore",
    "OnCallStore",
    "ScheduleStore",
    "SignalParamStore",
    "VerificationStore",
    "DeliveryTracker",
    "DynamoDBDeliveryTracker",
]
