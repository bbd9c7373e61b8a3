"""Collaborator interfaces the dispatch pipeline reads from.

The stores themselves live outside this module; implementations may raise
any exception, which the pipeline wraps in ``LookupFailedError`` with the
name of the failed operation.
"""

import json
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple
from uuid import UUID

from infrastructure.logging import get_module_logger
from integrations.aws import dynamodb
from modules.dispatch.models import (
    Alert,
    AlertLogEntry,
    ContactMethod,
    Schedule,
    User,
)

logger = get_module_logger()


class ContactMethodStore(ABC):
    @abstractmethod
    def find_all(self, user_id: str) -> List[ContactMethod]:
        """All contact methods registered by a user, in a stable order."""
        pass


class AlertStore(ABC):
    @abstractmethod
    def find_one(self, alert_id: int) -> Alert:
        pass

    @abstractmethod
    def service_info(self, service_id: str) -> Tuple[str, int]:
        """Service name and its current number of unacknowledged alerts."""
        pass

    @abstractmethod
    def metadata(self, alert_id: int) -> Dict[str, str]:
        pass


class AlertLogStore(ABC):
    @abstractmethod
    def find_one(self, log_id: int) -> AlertLogEntry:
        pass

    @abstractmethod
    def log_notification_sent(self, alert_id: int, message_id: str) -> None:
        pass

    @abstractmethod
    def log_service_notification_sent(self, service_id: str, message_id: str) -> None:
        pass


class ScheduleStore(ABC):
    @abstractmethod
    def find_one(self, schedule_id: str) -> Schedule:
        pass


class OnCallStore(ABC):
    @abstractmethod
    def on_call_users_by_schedule(self, schedule_id: str) -> List[User]:
        pass


class VerificationStore(ABC):
    @abstractmethod
    def code(self, verify_id: str) -> int:
        pass


class SignalParamStore(ABC):
    @abstractmethod
    def signal_params(self, message_id: UUID) -> str:
        """Raw JSON object of string parameters stored for a signal message."""
        pass


class DynamoDBSignalParamStore(SignalParamStore):
    """Signal parameters stored as a JSON string attribute ``params``."""

    def __init__(self, table_name: str):
        self.table_name = table_name

    def signal_params(self, message_id: UUID) -> str:
        result = dynamodb.get_item(
            self.table_name, Key={"message_id": {"S": str(message_id)}}
        )
        if not result.is_success:
            raise RuntimeError(f"get signal params: {result.message}")

        item = (result.data or {}).get("Item")
        if not item:
            raise LookupError(f"no signal params for message {message_id}")

        raw = item.get("params", {}).get("S", "")
        try:
            json.loads(raw)
        except ValueError as e:
            logger.error("signal_params_malformed", message_id=str(message_id))
            raise ValueError(f"malformed signal params for message {message_id}") from e
        return raw
