"""Operation result types and status enums.

This module contains standardized result types for storage and provider
operations, including status enums, result dataclasses, and error
classifiers for HTTP and AWS exceptions.
"""

from infrastructure.operations.classifiers import (
    classify_aws_error,
    classify_http_error,
    classify_http_status,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_status",
    "classify_http_error",
    "classify_aws_error",
]
