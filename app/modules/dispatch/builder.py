"""Payload builder: resolve a message into a channel-agnostic payload.

Each message type has its own build step, selected from a fixed table keyed
by ``MessageType``. A build step either returns a payload for the provider
layer or a terminal ``SendResult`` that ends the attempt without contacting
any provider (resolved alerts, suppressed voice calls, unknown types).
"""

import json
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from uuid import UUID

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    AlertBundlePayload,
    AlertPayload,
    AlertState,
    AlertStatusPayload,
    DeliveryRecord,
    MessageType,
    NotificationPayload,
    OnCallUser,
    ScheduleOnCallUsersPayload,
    SendResult,
    SignalPayload,
    TestPayload,
    VerificationPayload,
)
from modules.dispatch.errors import LookupFailedError, OriginalNotificationNotFoundError
from modules.dispatch.models import AlertLogType, Message
from modules.dispatch.priority import apply_high_priority_override
from modules.dispatch.stores import (
    AlertLogStore,
    AlertStore,
    ContactMethodStore,
    OnCallStore,
    ScheduleStore,
    SignalParamStore,
    VerificationStore,
)
from modules.dispatch.tracker import DeliveryTracker

logger = get_module_logger()

ALERTS_RESOLVED_DETAIL = "alerts acked/closed before message sent"
VOICE_SUPPRESSED_DETAIL = "voice notification suppressed for non-priority alert"

LOG_KIND_STATES = {
    AlertLogType.ACKNOWLEDGED: AlertState.ACKNOWLEDGED,
    AlertLogType.ESCALATED: AlertState.UNACKNOWLEDGED,
    AlertLogType.CLOSED: AlertState.CLOSED,
}


@dataclass
class BuildOutcome:
    """Result of building one message.

    Exactly one of ``payload`` and ``result`` is set. ``message`` is the
    message as it will be sent, after any priority promotion.
    """

    message: Message
    payload: Optional[NotificationPayload] = None
    result: Optional[SendResult] = None
    is_first_delivery: bool = False


def _lookup(operation: str, fn: Callable, *args):
    try:
        return fn(*args)
    except Exception as e:
        raise LookupFailedError(operation, e) from e


class PayloadBuilder:
    """Resolves messages against the collaborator stores."""

    def __init__(
        self,
        alerts: AlertStore,
        alert_logs: AlertLogStore,
        contacts: ContactMethodStore,
        schedules: ScheduleStore,
        on_call: OnCallStore,
        verifications: VerificationStore,
        signals: SignalParamStore,
        tracker: DeliveryTracker,
    ):
        self.alerts = alerts
        self.alert_logs = alert_logs
        self.contacts = contacts
        self.schedules = schedules
        self.on_call = on_call
        self.verifications = verifications
        self.signals = signals
        self.tracker = tracker

        self._builders: Dict[MessageType, Callable[[Message, DispatchConfig], BuildOutcome]] = {
            MessageType.ALERT: self._build_alert,
            MessageType.ALERT_BUNDLE: self._build_alert_bundle,
            MessageType.ALERT_STATUS: self._build_alert_status,
            MessageType.TEST: self._build_test,
            MessageType.VERIFICATION: self._build_verification,
            MessageType.SCHEDULE_ON_CALL_USERS: self._build_schedule_on_call_users,
            MessageType.SIGNAL_MESSAGE: self._build_signal,
        }

    def build(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        """Build the payload for ``msg``.

        Raises:
            LookupFailedError: a collaborator lookup failed
            OriginalNotificationNotFoundError: status update without an original
            TrackingError: the delivery tracker could not be read
        """
        build = self._builders.get(msg.type)
        if build is None:
            logger.error("message_type_not_implemented", message_type=str(msg.type))
            return BuildOutcome(
                message=msg,
                result=SendResult.failed_perm(
                    msg.id, f"message type {msg.type} not implemented"
                ),
            )
        return build(msg, config)

    def _build_alert_bundle(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        name, count = _lookup("lookup service info", self.alerts.service_info, msg.service_id)
        if count == 0:
            logger.info("alert_bundle_no_open_alerts", service_id=msg.service_id)
            return BuildOutcome(
                message=msg, result=SendResult.failed_perm(msg.id, ALERTS_RESOLVED_DETAIL)
            )

        payload = AlertBundlePayload(
            id=msg.id,
            dest=msg.dest,
            user_id=msg.user_id,
            service_id=msg.service_id,
            service_name=name,
            count=count,
        )
        return BuildOutcome(message=msg, payload=payload)

    def _build_alert(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        name, _ = _lookup("lookup service info", self.alerts.service_info, msg.service_id)
        alert = _lookup("lookup alert", self.alerts.find_one, msg.alert_id)
        meta = _lookup("lookup alert metadata", self.alerts.metadata, msg.alert_id)

        msg, suppress = apply_high_priority_override(
            msg,
            meta,
            config.high_priority_label_key,
            config.high_priority_label_value,
            self.contacts,
        )
        if suppress:
            logger.info(
                "voice_notification_suppressed",
                alert_id=msg.alert_id,
                user_id=msg.user_id,
            )
            return BuildOutcome(
                message=msg, result=SendResult.failed_perm(msg.id, VOICE_SUPPRESSED_DETAIL)
            )

        original = self.tracker.original_status(msg.alert_id, msg.dest_id)
        if original is not None and original.message_id == msg.id:
            original = None

        payload = AlertPayload(
            id=msg.id,
            dest=msg.dest,
            user_id=msg.user_id,
            alert_id=alert.id,
            summary=alert.summary,
            details=alert.details,
            service_id=alert.service_id,
            service_name=name,
            meta=meta,
            original_status=original,
        )
        return BuildOutcome(message=msg, payload=payload, is_first_delivery=original is None)

    def _build_alert_status(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        entry = _lookup("lookup alert log entry", self.alert_logs.find_one, msg.alert_log_id)
        alert = _lookup("lookup alert", self.alerts.find_one, msg.alert_id)

        original: Optional[DeliveryRecord] = self.tracker.original_status(
            msg.alert_id, msg.dest_id
        )
        if original is None:
            raise OriginalNotificationNotFoundError(msg.alert_id, str(msg.dest))

        payload = AlertStatusPayload(
            id=msg.id,
            dest=msg.dest,
            user_id=msg.user_id,
            alert_id=msg.alert_id,
            service_id=alert.service_id,
            log_entry=entry.message,
            summary=alert.summary,
            details=alert.details,
            new_alert_state=LOG_KIND_STATES.get(entry.kind, AlertState.UNKNOWN),
            original_status=original,
        )
        return BuildOutcome(message=msg, payload=payload)

    def _build_test(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        return BuildOutcome(
            message=msg, payload=TestPayload(id=msg.id, dest=msg.dest, user_id=msg.user_id)
        )

    def _build_verification(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        code = _lookup("lookup verification code", self.verifications.code, msg.verify_id)
        payload = VerificationPayload(
            id=msg.id, dest=msg.dest, user_id=msg.user_id, code=f"{code:06d}"
        )
        return BuildOutcome(message=msg, payload=payload)

    def _build_schedule_on_call_users(
        self, msg: Message, config: DispatchConfig
    ) -> BuildOutcome:
        users = _lookup(
            "lookup on call users", self.on_call.on_call_users_by_schedule, msg.schedule_id
        )
        schedule = _lookup("lookup schedule", self.schedules.find_one, msg.schedule_id)

        payload = ScheduleOnCallUsersPayload(
            id=msg.id,
            dest=msg.dest,
            user_id=msg.user_id,
            schedule_id=schedule.id,
            schedule_name=schedule.name,
            schedule_url=config.callback_url(f"/schedules/{schedule.id}"),
            users=[
                OnCallUser(name=u.name, id=u.id, url=config.callback_url(f"/users/{u.id}"))
                for u in users
            ],
        )
        return BuildOutcome(message=msg, payload=payload)

    def _build_signal(self, msg: Message, config: DispatchConfig) -> BuildOutcome:
        message_id = _lookup("parse signal message id", UUID, msg.id)
        raw = _lookup("lookup signal params", self.signals.signal_params, message_id)
        params = _lookup("parse signal params", json.loads, raw)
        if not isinstance(params, dict):
            raise LookupFailedError(
                "parse signal params", ValueError("params must be a JSON object")
            )
        bad = sorted(k for k, v in params.items() if not isinstance(v, str))
        if bad:
            raise LookupFailedError(
                "parse signal params",
                ValueError(f"params must be string values: {', '.join(bad)}"),
            )

        payload = SignalPayload(
            id=msg.id,
            dest=msg.dest,
            user_id=msg.user_id,
            params=params,
        )
        return BuildOutcome(message=msg, payload=payload)
