"""Delivery tracking: the first message delivered per (alert, destination).

Status updates for an alert refer back to the original delivery to the same
destination. Records are first-write-wins; a lost race against a concurrent
writer is not an error since readers only need some prior delivery.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import DeliveryRecord, DestinationID, SendState
from infrastructure.operations import OperationResult
from integrations.aws import dynamodb
from modules.dispatch.errors import TrackingError

logger = get_module_logger()


def delivery_key(alert_id: int, dest_id: DestinationID) -> str:
    return f"{alert_id}#{dest_id}"


class DeliveryTracker(ABC):
    @abstractmethod
    def original_status(
        self, alert_id: int, dest_id: DestinationID
    ) -> Optional[DeliveryRecord]:
        """Return the first delivery for the pair, or None.

        Raises:
            TrackingError: if the record cannot be read
        """
        pass

    @abstractmethod
    def record(
        self,
        dest_id: DestinationID,
        alert_id: int,
        message_id: str,
        external_id: Optional[str] = None,
    ) -> OperationResult:
        """Record a delivery unless one already exists for the pair."""
        pass


class DynamoDBDeliveryTracker(DeliveryTracker):
    """Tracker keyed by ``"<alert_id>#<dest_id>"`` in a DynamoDB table.

    Writes use ``attribute_not_exists`` so only the first delivery for a
    pair is kept; contention is scoped to that single key.
    """

    def __init__(self, table_name: str):
        self.table_name = table_name

    def original_status(
        self, alert_id: int, dest_id: DestinationID
    ) -> Optional[DeliveryRecord]:
        key = delivery_key(alert_id, dest_id)
        result = dynamodb.get_item(
            self.table_name, Key={"delivery_key": {"S": key}}, ConsistentRead=True
        )
        if not result.is_success:
            raise TrackingError("lookup original status", result.message)

        item = (result.data or {}).get("Item")
        if not item:
            return None

        recorded_at = item.get("recorded_at", {}).get("S")
        return DeliveryRecord(
            message_id=item["message_id"]["S"],
            alert_id=alert_id,
            dest_id=dest_id,
            external_id=item.get("external_id", {}).get("S") or None,
            state=SendState(item.get("state", {}).get("S", SendState.SENT.value)),
            recorded_at=datetime.fromisoformat(recorded_at) if recorded_at else None,
        )

    def record(
        self,
        dest_id: DestinationID,
        alert_id: int,
        message_id: str,
        external_id: Optional[str] = None,
    ) -> OperationResult:
        key = delivery_key(alert_id, dest_id)
        item = {
            "delivery_key": {"S": key},
            "alert_id": {"N": str(alert_id)},
            "message_id": {"S": message_id},
            "state": {"S": SendState.SENT.value},
            "recorded_at": {"S": datetime.now(timezone.utc).isoformat()},
        }
        if dest_id.cm_id:
            item["contact_method_id"] = {"S": dest_id.cm_id}
        else:
            item["channel_id"] = {"S": dest_id.channel_id}
        if external_id:
            item["external_id"] = {"S": external_id}

        result = dynamodb.put_item(
            self.table_name,
            Item=item,
            ConditionExpression="attribute_not_exists(delivery_key)",
        )
        if result.is_conflict:
            logger.info("delivery_already_recorded", delivery_key=key)
            return OperationResult.success(
                data={"recorded": False}, message="delivery already recorded"
            )
        if result.is_success:
            logger.debug("delivery_recorded", delivery_key=key, message_id=message_id)
            return OperationResult.success(data={"recorded": True})
        return result
