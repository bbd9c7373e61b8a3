"""DynamoDB helpers returning OperationResult.

Usage:
    result = get_item(
        table_name="dispatch_delivery_records",
        Key={"delivery_key": {"S": "42#cm:abc"}},
    )
    if result.is_success:
        item = result.data.get("Item")
"""

from typing import Any, Dict, List

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from integrations.aws.client import execute_aws_api_call

logger = get_module_logger()


def _client_kwargs() -> Dict[str, Dict[str, Any]]:
    # Imported here so that settings are only loaded on first use
    from infrastructure.services.providers import get_settings

    aws = get_settings().aws
    client_config: Dict[str, Any] = {"region_name": aws.AWS_REGION}
    if aws.AWS_ENDPOINT_URL:
        client_config["endpoint_url"] = aws.AWS_ENDPOINT_URL
    return {
        "session_config": {"region_name": aws.AWS_REGION},
        "client_config": client_config,
    }


def get_item(table_name: str, Key: Dict[str, Any], **kwargs) -> OperationResult:
    """Get an item from a DynamoDB table.

    ``result.data`` is the raw response; ``result.data.get("Item")`` is None
    when the key does not exist.
    """
    logger.debug("dynamodb_get_item_started", table=table_name)
    return execute_aws_api_call(
        "dynamodb",
        "get_item",
        TableName=table_name,
        Key=Key,
        **_client_kwargs(),
        **kwargs,
    )


def put_item(table_name: str, Item: Dict[str, Any], **kwargs) -> OperationResult:
    """Put an item into a DynamoDB table.

    Pass ``ConditionExpression`` for first-write-wins semantics; a rejected
    condition returns a result whose ``is_conflict`` is True.
    """
    logger.debug("dynamodb_put_item_started", table=table_name)
    return execute_aws_api_call(
        "dynamodb",
        "put_item",
        TableName=table_name,
        Item=Item,
        **_client_kwargs(),
        **kwargs,
    )


def delete_item(table_name: str, Key: Dict[str, Any], **kwargs) -> OperationResult:
    """Delete an item. Deleting a missing key succeeds."""
    logger.debug("dynamodb_delete_item_started", table=table_name)
    return execute_aws_api_call(
        "dynamodb",
        "delete_item",
        TableName=table_name,
        Key=Key,
        **_client_kwargs(),
        **kwargs,
    )


def query(table_name: str, **kwargs) -> OperationResult:
    """Query a table or index, following ``LastEvaluatedKey`` across pages.

    On success ``result.data`` is the list of items from every page.
    """
    logger.debug("dynamodb_query_started", table=table_name)
    items: List[Dict[str, Any]] = []
    params = dict(kwargs)

    while True:
        result = execute_aws_api_call(
            "dynamodb",
            "query",
            TableName=table_name,
            **_client_kwargs(),
            **params,
        )
        if not result.is_success:
            return result
        page = result.data or {}
        items.extend(page.get("Items", []))
        last_key = page.get("LastEvaluatedKey")
        if not last_key:
            break
        params["ExclusiveStartKey"] = last_key

    logger.debug("dynamodb_query_completed", table=table_name, item_count=len(items))
    return OperationResult.success(data=items, message="dynamodb.query succeeded")
