"""Split a pending backlog into messages to send now and messages to hold."""

from typing import Iterable, List, Tuple

from infrastructure.notifications.models import AlertState, MessageType
from modules.dispatch.models import Message

RESOLVED_ALERT_STATES = (AlertState.ACKNOWLEDGED, AlertState.CLOSED)


def partition_pending(
    messages: Iterable[Message], types: Iterable[MessageType]
) -> Tuple[List[Message], List[Message]]:
    """Return ``(ready, held)`` for a backlog.

    A message is held when it was already sent, when its type is not in
    ``types``, or when it is an alert notification whose alert was
    acknowledged or closed before sending. Both lists keep input order.
    """
    admissible = set(types)
    ready: List[Message] = []
    held: List[Message] = []

    for msg in messages:
        if msg.is_sent or msg.type not in admissible:
            held.append(msg)
        elif msg.type == MessageType.ALERT and msg.alert_status in RESOLVED_ALERT_STATES:
            held.append(msg)
        else:
            ready.append(msg)

    return ready, held
