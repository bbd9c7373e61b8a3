"""Browser push subscription storage.

Each row holds one browser subscription for a user: the push service
endpoint (primary key), the owning ``user_id`` and an opaque JSON blob
``{"endpoint": ..., "keys": {"auth": ..., "p256dh": ...}}`` as produced by
the browser's ``PushSubscription.toJSON()``.
"""

import json
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from integrations.aws import dynamodb

logger = get_module_logger()

USER_INDEX_NAME = "user_id-index"


class PushSubscription(BaseModel):
    endpoint: str
    auth: str
    p256dh: str

    def subscription_info(self) -> dict:
        """Shape expected by ``pywebpush.webpush``."""
        return {"endpoint": self.endpoint, "keys": {"auth": self.auth, "p256dh": self.p256dh}}


def endpoint_suffix(endpoint: str) -> str:
    """Last 16 characters of an endpoint, safe to log."""
    return endpoint[-16:]


def parse_subscription(raw: str) -> Optional[PushSubscription]:
    """Parse a stored subscription blob; None when it is unusable."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("push_subscription_invalid_json")
        return None
    if not isinstance(data, dict):
        logger.warning("push_subscription_invalid_json")
        return None

    keys = data.get("keys") if isinstance(data.get("keys"), dict) else {}
    endpoint = data.get("endpoint") or ""
    auth = keys.get("auth") or ""
    p256dh = keys.get("p256dh") or ""
    if not (endpoint and auth and p256dh):
        logger.warning(
            "push_subscription_incomplete",
            endpoint=endpoint_suffix(endpoint),
            has_auth=bool(auth),
            has_p256dh=bool(p256dh),
        )
        return None
    return PushSubscription(endpoint=endpoint, auth=auth, p256dh=p256dh)


class SubscriptionStore(ABC):
    """Persisted push subscriptions, keyed by user, deleted by endpoint."""

    @abstractmethod
    def find_by_user(self, user_id: str) -> List[PushSubscription]:
        pass

    @abstractmethod
    def delete_by_endpoint(self, endpoint: str) -> OperationResult:
        """Delete one subscription. Deleting an absent endpoint succeeds."""
        pass

    @abstractmethod
    def remove_user_subscriptions(self, user_id: str) -> OperationResult:
        pass


class DynamoDBSubscriptionStore(SubscriptionStore):
    """Subscription store backed by a DynamoDB table with a ``user_id`` GSI."""

    def __init__(self, table_name: str):
        self.table_name = table_name

    def _query_user(self, user_id: str) -> OperationResult:
        return dynamodb.query(
            self.table_name,
            IndexName=USER_INDEX_NAME,
            KeyConditionExpression="user_id = :user_id",
            ExpressionAttributeValues={":user_id": {"S": user_id}},
        )

    def find_by_user(self, user_id: str) -> List[PushSubscription]:
        """Return the user's usable subscriptions.

        Raises:
            RuntimeError: if the table cannot be queried
        """
        result = self._query_user(user_id)
        if not result.is_success:
            raise RuntimeError(f"query push subscriptions: {result.message}")

        subscriptions = []
        for item in result.data or []:
            sub = parse_subscription(item.get("data", {}).get("S", ""))
            if sub is not None:
                subscriptions.append(sub)
        return subscriptions

    def delete_by_endpoint(self, endpoint: str) -> OperationResult:
        result = dynamodb.delete_item(
            self.table_name, Key={"endpoint": {"S": endpoint}}
        )
        if result.is_success:
            logger.info("push_subscription_deleted", endpoint=endpoint_suffix(endpoint))
        return result

    def remove_user_subscriptions(self, user_id: str) -> OperationResult:
        result = self._query_user(user_id)
        if not result.is_success:
            return result

        removed = 0
        for item in result.data or []:
            endpoint = item.get("endpoint", {}).get("S")
            if not endpoint:
                continue
            deleted = self.delete_by_endpoint(endpoint)
            if not deleted.is_success:
                return deleted
            removed += 1

        logger.info("push_subscriptions_removed", user_id=user_id, count=removed)
        return OperationResult.success(data={"removed": removed})
