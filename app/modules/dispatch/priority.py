"""High-priority voice policy.

Voice calls are reserved for alerts whose metadata carries the configured
priority label. High-priority alerts are promoted to the user's first
voice contact method; every other alert must not ring the phone.
"""

from typing import Dict, Tuple

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import DestinationID
from infrastructure.notifications.providers.twilio import VOICE_TYPE
from modules.dispatch.models import Message
from modules.dispatch.stores import ContactMethodStore

logger = get_module_logger()


def apply_high_priority_override(
    msg: Message,
    meta: Dict[str, str],
    key: str,
    value: str,
    contacts: ContactMethodStore,
) -> Tuple[Message, bool]:
    """Apply the voice policy to an alert message.

    Returns the (possibly promoted) message and whether it must be
    suppressed. An empty ``key`` or ``value`` disables the policy. Applying
    the policy to its own output is a no-op.
    """
    if not key or not value:
        return msg, False

    is_voice = msg.dest.type == VOICE_TYPE
    if meta.get(key) != value:
        return msg, is_voice

    if is_voice or not msg.user_id:
        return msg, False

    try:
        methods = contacts.find_all(msg.user_id)
    except Exception as e:  # Lookup failure keeps the original channel
        logger.warning(
            "priority_contact_lookup_failed", user_id=msg.user_id, error=str(e)
        )
        return msg, False

    for cm in methods:
        if cm.dest.type != VOICE_TYPE:
            continue
        logger.info(
            "priority_promoted_to_voice",
            user_id=msg.user_id,
            from_dest_type=msg.dest.type,
            contact_method_id=cm.id,
        )
        promoted = msg.model_copy(
            update={"dest": cm.dest, "dest_id": DestinationID.contact_method(cm.id)}
        )
        return promoted, False

    logger.info("priority_no_voice_contact_method", user_id=msg.user_id)
    return msg, False
