"""Message context binding for structured logging.

Every log line emitted while a single outgoing message is dispatched carries
the message id (the provider callback id), its type and destination type.

Usage:
    from infrastructure.logging import bind_message_context

    with bind_message_context(message_id=msg.id, message_type=msg.type.value):
        logger.info("building_payload")

Dependencies:
    - structlog.contextvars
"""

from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_message_context(
    message_id: str,
    message_type: Optional[str] = None,
    dest_type: Optional[str] = None,
    user_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind message-scoped context to all logs within the context manager.

    Args:
        message_id: Outgoing message identifier (provider callback id).
        message_type: Message type value (e.g. "alert", "alert_status").
        dest_type: Destination type id (e.g. "builtin-twilio-voice").
        user_id: Owning user, when the destination is a contact method.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars for the block.
    """
    context: dict[str, Any] = {"callback_id": message_id}

    if message_type is not None:
        context["message_type"] = message_type

    if dest_type is not None:
        context["dest_type"] = dest_type

    if user_id is not None:
        context["user_id"] = user_id

    context.update(extra_context)

    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
        restore = {k: v for k, v in previous.items() if k in context}
        if restore:
            structlog.contextvars.bind_contextvars(**restore)


def get_callback_id() -> Optional[str]:
    """Get the message id bound by the innermost ``bind_message_context``."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("callback_id")
