"""Notification system core models.

Channel-agnostic models shared by the dispatch engine and every provider:

- ``Destination`` / ``DestinationID``: where a message goes and which
  contact method or notification channel it belongs to.
- Payload variants: one pydantic model per ``MessageType``, combined into the
  closed ``NotificationPayload`` union discriminated by ``message_type``.
- ``DeliveryRecord``: the original delivery referenced by later status updates.
- ``SendResult``: the outcome of one dispatch attempt.

Uses Pydantic BaseModel for:
- Runtime validation (exactly one destination id, E.164 checks upstream)
- Immutable value objects (``Destination``, ``DestinationID``)
- JSON rendering for webhook delivery (``model_dump(mode="json")``)
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from infrastructure.operations import OperationResult, OperationStatus


class MessageType(str, Enum):
    """Kinds of outgoing message. The set is closed; see ``NotificationPayload``."""

    ALERT = "alert_notification"
    ALERT_BUNDLE = "alert_notification_bundle"
    ALERT_STATUS = "alert_status_update"
    TEST = "test_notification"
    VERIFICATION = "verification_message"
    SCHEDULE_ON_CALL_USERS = "schedule_on_call_notification"
    SIGNAL_MESSAGE = "signal_message"


class AlertState(str, Enum):
    """Alert lifecycle state as seen by notifications."""

    UNKNOWN = "unknown"
    UNACKNOWLEDGED = "unacknowledged"
    ACKNOWLEDGED = "acknowledged"
    CLOSED = "closed"


class SendState(str, Enum):
    """Delivery state reported by a provider.

    FAILED_TEMP is retried by the scheduler; FAILED_PERM never is.
    """

    PENDING = "pending"
    SENDING = "sending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED_TEMP = "failed_temp"
    FAILED_PERM = "failed_perm"

    @property
    def is_ok(self) -> bool:
        return self not in (SendState.FAILED_TEMP, SendState.FAILED_PERM)


class Destination(BaseModel):
    """Channel type plus named string arguments (phone number, webhook URL...).

    Immutable: a promoted message gets a new Destination value.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    args: Dict[str, str] = Field(default_factory=dict)

    def arg(self, name: str) -> str:
        return self.args.get(name, "")

    def __str__(self) -> str:
        rendered = ",".join(f"{k}={v}" for k, v in self.args.items())
        return f"{self.type}({rendered})"


class DestinationID(BaseModel):
    """Identifies the owner of a destination.

    Exactly one of ``cm_id`` (a user's contact method) or ``channel_id``
    (a notification channel) is set.
    """

    model_config = ConfigDict(frozen=True)

    cm_id: Optional[str] = None
    channel_id: Optional[str] = None

    @field_validator("cm_id", "channel_id")
    @classmethod
    def _empty_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def _exactly_one(self) -> "DestinationID":
        if bool(self.cm_id) == bool(self.channel_id):
            raise ValueError(
                "exactly one of cm_id or channel_id must be set on a destination id"
            )
        return self

    @classmethod
    def contact_method(cls, cm_id: str) -> "DestinationID":
        return cls(cm_id=cm_id)

    @classmethod
    def channel(cls, channel_id: str) -> "DestinationID":
        return cls(channel_id=channel_id)

    @property
    def is_user_contact_method(self) -> bool:
        return self.cm_id is not None

    def __str__(self) -> str:
        if self.cm_id:
            return f"cm:{self.cm_id}"
        return f"nc:{self.channel_id}"


class DeliveryRecord(BaseModel):
    """First tracked delivery for an (alert, destination) pair.

    Attributes:
        message_id: Outgoing message that was delivered first
        alert_id: Alert the message notified about
        dest_id: Contact method or channel it was delivered to
        external_id: Provider message id (Twilio SID, Gupshup id), if any
        state: Provider state recorded with the delivery
        recorded_at: When the record was written
    """

    message_id: str
    alert_id: int
    dest_id: DestinationID
    external_id: Optional[str] = None
    state: SendState = SendState.SENT
    recorded_at: Optional[datetime] = None


class OnCallUser(BaseModel):
    name: str
    id: str
    url: str


class PayloadBase(BaseModel):
    """Fields shared by every payload variant.

    Attributes:
        id: Outgoing message id (provider callback id)
        dest: Resolved destination
        user_id: Owning user for contact-method destinations
    """

    id: str
    dest: Destination
    user_id: Optional[str] = None


class AlertPayload(PayloadBase):
    message_type: Literal[MessageType.ALERT] = MessageType.ALERT
    alert_id: int
    summary: str
    details: str = ""
    service_id: str
    service_name: str
    meta: Dict[str, str] = Field(default_factory=dict)
    original_status: Optional[DeliveryRecord] = None


class AlertBundlePayload(PayloadBase):
    message_type: Literal[MessageType.ALERT_BUNDLE] = MessageType.ALERT_BUNDLE
    service_id: str
    service_name: str
    count: int


class AlertStatusPayload(PayloadBase):
    message_type: Literal[MessageType.ALERT_STATUS] = MessageType.ALERT_STATUS
    alert_id: int
    service_id: str
    log_entry: str
    summary: str
    details: str = ""
    new_alert_state: AlertState
    original_status: DeliveryRecord


class TestPayload(PayloadBase):
    __test__ = False

    message_type: Literal[MessageType.TEST] = MessageType.TEST


class VerificationPayload(PayloadBase):
    message_type: Literal[MessageType.VERIFICATION] = MessageType.VERIFICATION
    code: str


class ScheduleOnCallUsersPayload(PayloadBase):
    message_type: Literal[MessageType.SCHEDULE_ON_CALL_USERS] = (
        MessageType.SCHEDULE_ON_CALL_USERS
    )
    schedule_id: str
    schedule_name: str
    schedule_url: str
    users: List[OnCallUser] = Field(default_factory=list)


class SignalPayload(PayloadBase):
    message_type: Literal[MessageType.SIGNAL_MESSAGE] = MessageType.SIGNAL_MESSAGE
    params: Dict[str, str] = Field(default_factory=dict)


NotificationPayload = Annotated[
    Union[
        AlertPayload,
        AlertBundlePayload,
        AlertStatusPayload,
        TestPayload,
        VerificationPayload,
        ScheduleOnCallUsersPayload,
        SignalPayload,
    ],
    Field(discriminator="message_type"),
]

PAYLOAD_TYPES: Dict[MessageType, type] = {
    MessageType.ALERT: AlertPayload,
    MessageType.ALERT_BUNDLE: AlertBundlePayload,
    MessageType.ALERT_STATUS: AlertStatusPayload,
    MessageType.TEST: TestPayload,
    MessageType.VERIFICATION: VerificationPayload,
    MessageType.SCHEDULE_ON_CALL_USERS: ScheduleOnCallUsersPayload,
    MessageType.SIGNAL_MESSAGE: SignalPayload,
}


class SendResult(BaseModel):
    """Result of a dispatch attempt.

    Attributes:
        message_id: Outgoing message id the result belongs to
        state: Terminal state for this attempt
        external_id: Provider message id, when the provider returned one
        details: Human-readable detail (failure reason, provider note)
    """

    message_id: str
    state: SendState
    external_id: Optional[str] = None
    details: str = ""

    @property
    def is_ok(self) -> bool:
        return self.state.is_ok

    @classmethod
    def sent(
        cls, message_id: str, external_id: Optional[str] = None, details: str = ""
    ) -> "SendResult":
        return cls(
            message_id=message_id,
            state=SendState.SENT,
            external_id=external_id or None,
            details=details,
        )

    @classmethod
    def failed_temp(cls, message_id: str, details: str) -> "SendResult":
        return cls(message_id=message_id, state=SendState.FAILED_TEMP, details=details)

    @classmethod
    def failed_perm(cls, message_id: str, details: str = "") -> "SendResult":
        return cls(message_id=message_id, state=SendState.FAILED_PERM, details=details)

    @classmethod
    def from_operation_result(
        cls, message_id: str, result: OperationResult
    ) -> "SendResult":
        """Map an integration OperationResult onto the send contract.

        SUCCESS → sent, TRANSIENT_ERROR → failed-temporary, anything else
        → failed-permanent.
        """
        if result.is_success:
            external_id = None
            if isinstance(result.data, dict):
                external_id = result.data.get("external_id")
            return cls.sent(message_id, external_id=external_id)
        if result.status == OperationStatus.TRANSIENT_ERROR:
            return cls.failed_temp(message_id, result.message)
        return cls.failed_perm(message_id, result.message)
