"""Base AWS client utilities.

Provides ``get_boto3_client`` and ``execute_aws_api_call`` with the
OperationResult pattern. Settings are not read at import time; region and
endpoint are passed in by the caller.
"""

import time
from typing import Any, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_aws_error

logger = get_module_logger()


def get_boto3_client(
    service_name: str,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
) -> BaseClient:
    """Create a boto3 client for the given service.

    Args:
        service_name: AWS service name (e.g., 'dynamodb')
        session_config: Optional boto3 session kwargs (e.g., region_name)
        client_config: Optional client kwargs (e.g., endpoint_url)

    Returns:
        botocore client instance
    """
    session = boto3.Session(**(session_config or {}))
    return session.client(service_name, **(client_config or {}))


def _calculate_retry_delay(attempt: int, backoff_factor: float = 0.5) -> float:
    return backoff_factor * (2**attempt)


def execute_aws_api_call(
    service_name: str,
    method: str,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
    max_retries: int = 2,
    backoff_factor: float = 0.5,
    **kwargs,
) -> OperationResult:
    """Execute an AWS API call with retries and standardized results.

    Transient failures (throttling, connection errors) are retried with
    exponential backoff. Everything else is classified once and returned.
    Conditional-write rejections come back with ``error_code="CONFLICT"``.
    """
    result: Optional[OperationResult] = None

    for attempt in range(max_retries + 1):
        try:
            client = get_boto3_client(
                service_name,
                session_config=session_config,
                client_config=client_config,
            )
            response = getattr(client, method)(**kwargs)
            return OperationResult.success(
                data=response, message=f"{service_name}.{method} succeeded"
            )
        except (ClientError, BotoCoreError) as e:
            result = classify_aws_error(e)
            if result.is_transient and attempt < max_retries:
                delay = _calculate_retry_delay(attempt, backoff_factor)
                logger.warning(
                    "aws_api_retry",
                    service=service_name,
                    method=method,
                    attempt=attempt + 1,
                    error=str(e),
                    delay=delay,
                )
                time.sleep(delay)
                continue

            log = logger.info if result.is_conflict else logger.error
            log(
                "aws_api_call_failed",
                service=service_name,
                method=method,
                error_code=result.error_code,
                error=str(e),
            )
            return result

    return result or OperationResult.transient_error(
        f"{service_name}.{method} failed", error_code="AWS_CLIENT_ERROR"
    )
