"""Fixtures for AWS integrations tests.

Level: Component-level fixtures for AWS integrations
"""

import pytest
from botocore.exceptions import ClientError
from unittest.mock import MagicMock, patch


@pytest.fixture
def mock_boto3_client():
    """Patch get_boto3_client and yield the client it returns."""
    with patch("integrations.aws.client.get_boto3_client") as mock_get_client:
        client = MagicMock()
        mock_get_client.return_value = client
        yield client


@pytest.fixture
def mock_sleep():
    """Skip retry backoff delays."""
    with patch("integrations.aws.client.time.sleep") as mock:
        yield mock


@pytest.fixture
def client_error_factory():
    """Factory for botocore ClientError with a given error code."""

    def _factory(code: str, operation: str = "PutItem") -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": code}}, operation)

    return _factory


@pytest.fixture
def fixed_client_kwargs():
    """Pin the region/endpoint kwargs instead of loading settings."""
    kwargs = {
        "session_config": {"region_name": "ca-central-1"},
        "client_config": {"region_name": "ca-central-1"},
    }
    with patch("integrations.aws.dynamodb._client_kwargs", return_value=kwargs):
        yield kwargs
