"""Domain models for the dispatch pipeline.

``Message`` is the unit of outbound work handed over by the scheduler. The
remaining models are read-only views of collaborator entities.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from infrastructure.notifications.models import (
    AlertState,
    Destination,
    DestinationID,
    MessageType,
)


class Message(BaseModel):
    """A pending outgoing message.

    Attributes:
        id: Globally unique message id
        type: Message kind; decides payload shape and control flow
        dest_id: Contact method or notification channel owning ``dest``
        dest: Resolved destination (type plus arguments)
        user_id: Owning user, for contact-method destinations
        service_id: Owning service (alert, bundle and status messages)
        alert_id: Alert referenced by alert, bundle and status messages
        alert_status: Alert state snapshot taken when the message was queued
        alert_log_id: Log entry for status updates
        schedule_id: Schedule for on-call roster messages
        verify_id: Verification code id
        sent_at: When the message was sent; None while pending
    """

    id: str
    type: MessageType
    dest_id: DestinationID
    dest: Destination
    user_id: Optional[str] = None
    service_id: Optional[str] = None
    alert_id: int = 0
    alert_status: Optional[AlertState] = None
    alert_log_id: int = 0
    schedule_id: Optional[str] = None
    verify_id: Optional[str] = None
    sent_at: Optional[datetime] = None

    @property
    def is_sent(self) -> bool:
        return self.sent_at is not None


class ContactMethod(BaseModel):
    id: str
    user_id: str
    dest: Destination


class Alert(BaseModel):
    id: int
    service_id: str
    summary: str
    details: str = ""
    status: AlertState = AlertState.UNACKNOWLEDGED


class AlertLogType(str, Enum):
    CREATED = "created"
    ACKNOWLEDGED = "acknowledged"
    ESCALATED = "escalated"
    CLOSED = "closed"
    NOTIFICATION_SENT = "notification_sent"
    ESCALATION_REQUEST = "escalation_request"
    NO_NOTIFICATION_SENT = "no_notification_sent"


class AlertLogEntry(BaseModel):
    id: int
    alert_id: int
    kind: AlertLogType
    message: str = ""


class Schedule(BaseModel):
    id: str
    name: str


class User(BaseModel):
    id: str
    name: str
