"""Structlog configuration and module loggers for the dispatch engine.

Every log line carries the deployment (``git_sha``, ``prefix``), the calling
module and, while a message is being dispatched, the message context bound
by ``bind_message_context``. Credentials and phone numbers are masked before
rendering.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging()
    logger = get_module_logger()
    logger.info("dispatch_started", batch_size=12)

Dependencies:
    - infrastructure.services.providers.get_settings
"""

import inspect
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import mask_sensitive_data, truncate_large_values


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def add_deployment_context(git_sha: str, prefix: str = ""):
    """Create a processor stamping each event with the running deployment."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("git_sha", git_sha)
        if prefix:
            event_dict.setdefault("prefix", prefix)
        return event_dict

    return processor


def _silence_for_tests() -> BoundLogger:
    logging.root.setLevel(logging.CRITICAL + 1)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=logging.CRITICAL + 1, force=True)
    return structlog.stdlib.get_logger()


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog for the process.

    Production renders JSON lines; anything else renders for the console.
    Under pytest all output is suppressed.

    Args:
        log_level: Overrides ``settings.LOG_LEVEL``.
        is_production: Overrides ``settings.is_production``.

    Returns:
        The root bound logger.
    """
    if _is_test_environment():
        return _silence_for_tests()

    # Imported here so that settings are only loaded when logging is configured
    from infrastructure.services.providers import get_settings

    settings = get_settings()
    prod_mode = is_production if is_production is not None else settings.is_production

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_deployment_context(settings.GIT_SHA, settings.PREFIX),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if prod_mode else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def _caller_module_name(depth: int = 2) -> Optional[str]:
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame is None:
            return None
        frame = frame.f_back
    if frame is None:
        return None
    module = inspect.getmodule(frame)
    return module.__name__ if module else None


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Example:
        # In modules/dispatch/engine.py
        logger = get_module_logger()
        # context: {"component": "engine", "module_path": "modules.dispatch.engine"}
    """
    module_name = _caller_module_name()
    if module_name is None:
        return logger.bind(component="unknown")
    return logger.bind(component=module_name.split(".")[-1], module_path=module_name)
