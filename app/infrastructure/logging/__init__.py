"""Structured logging infrastructure.

This package provides centralized logging configuration and utilities
for the dispatch engine using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - add_deployment_context(): Processor stamping git sha and prefix
    - get_module_logger(): Get a logger for the calling module
    - bind_message_context(): Context manager for message-scoped logging
    - get_callback_id(): Get the message id bound to the current context

Example:
    from infrastructure.logging import get_module_logger, bind_message_context

    logger = get_module_logger()

    with bind_message_context(message_id="msg-123", message_type="alert"):
        logger.info("dispatching_message")
"""

# Core logging setup
from infrastructure.logging.setup import (
    configure_logging,
    add_deployment_context,
    get_module_logger,
)

# Message context binding
from infrastructure.logging.context import (
    bind_message_context,
    get_callback_id,
)

# Log processors
from infrastructure.logging.formatters import (
    mask_sensitive_data,
    truncate_large_values,
    SENSITIVE_PATTERNS,
)

__all__ = [
    # Setup
    "configure_logging",
    "add_deployment_context",
    "get_module_logger",
    # Context
    "bind_message_context",
    "get_callback_id",
    # Processors
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
