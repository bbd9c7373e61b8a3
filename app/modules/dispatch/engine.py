"""Dispatch engine: send one pending message end to end.

Pipeline per message:
1. Build the payload (priority policy, entity lookups, prior delivery)
2. Send through the notification manager
3. Append alert log bookkeeping
4. Record the first delivery for (alert, destination)

Usage:
    from infrastructure.services import get_dispatch_config

    engine = DispatchEngine(builder=builder, manager=manager, alert_logs=logs, tracker=tracker)
    result = engine.send_message(message, get_dispatch_config())
"""

import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from infrastructure.configuration.snapshot import DispatchConfig
from infrastructure.logging import bind_message_context, get_module_logger
from infrastructure.notifications.manager import NotificationManager
from infrastructure.notifications.models import MessageType, SendResult
from modules.dispatch.builder import PayloadBuilder
from modules.dispatch.models import Message
from modules.dispatch.partition import partition_pending
from modules.dispatch.stores import AlertLogStore
from modules.dispatch.tracker import DeliveryTracker

logger = get_module_logger()


@dataclass
class DispatchBatch:
    """Outcome of ``send_pending``.

    Attributes:
        results: Send result per message id that reached a terminal result
        errors: Exception per message id whose attempt raised
        held: Messages not attempted in this pass
    """

    results: Dict[str, SendResult] = field(default_factory=dict)
    errors: Dict[str, Exception] = field(default_factory=dict)
    held: List[Message] = field(default_factory=list)


class DispatchEngine:
    """Sends pending messages through the provider layer.

    Safe to use from several threads at once for different messages; the
    engine itself holds no per-message state.
    """

    def __init__(
        self,
        builder: PayloadBuilder,
        manager: NotificationManager,
        alert_logs: AlertLogStore,
        tracker: DeliveryTracker,
    ):
        self.builder = builder
        self.manager = manager
        self.alert_logs = alert_logs
        self.tracker = tracker

    def send_message(
        self,
        msg: Message,
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> SendResult:
        """Send one message and return its result.

        Raises:
            DispatchError: a lookup failed or a status update has no original
            NotificationError: no provider for the destination, or the
                provider is missing configuration
        """
        with bind_message_context(
            message_id=msg.id,
            message_type=msg.type.value,
            dest_type=msg.dest.type,
            user_id=msg.user_id,
        ):
            logger.info("send_message_started", dest_id=str(msg.dest_id))

            outcome = self.builder.build(msg, config)
            if outcome.result is not None:
                logger.info(
                    "send_message_short_circuited",
                    state=outcome.result.state.value,
                    details=outcome.result.details,
                )
                return outcome.result

            msg = outcome.message
            res = self.manager.send(outcome.payload, config, cancel=cancel)
            logger.info(
                "send_message_provider_result", state=res.state.value, details=res.details
            )

            self._log_sent(msg)

            if outcome.is_first_delivery and res.is_ok:
                self._track(msg, res)

            return res

    def send_pending(
        self,
        messages: Iterable[Message],
        types: Iterable[MessageType],
        config: DispatchConfig,
        cancel: Optional[threading.Event] = None,
    ) -> DispatchBatch:
        """Partition a backlog and send every ready message independently.

        An exception for one message is recorded in ``errors`` and does not
        stop the rest of the batch.
        """
        ready, held = partition_pending(messages, types)
        batch = DispatchBatch(held=held)

        for msg in ready:
            try:
                batch.results[msg.id] = self.send_message(msg, config, cancel=cancel)
            except Exception as e:
                logger.error(
                    "send_message_failed",
                    message_id=msg.id,
                    message_type=msg.type.value,
                    error=str(e),
                )
                batch.errors[msg.id] = e

        logger.info(
            "send_pending_completed",
            ready=len(ready),
            held=len(held),
            sent=sum(1 for r in batch.results.values() if r.is_ok),
            errors=len(batch.errors),
        )
        return batch

    def _log_sent(self, msg: Message) -> None:
        try:
            if msg.type == MessageType.ALERT:
                self.alert_logs.log_notification_sent(msg.alert_id, msg.id)
            elif msg.type == MessageType.ALERT_BUNDLE:
                self.alert_logs.log_service_notification_sent(msg.service_id, msg.id)
        except Exception as e:
            logger.error(
                "append_alert_log_failed",
                alert_id=msg.alert_id,
                service_id=msg.service_id,
                error=str(e),
            )

    def _track(self, msg: Message, res: SendResult) -> None:
        try:
            result = self.tracker.record(msg.dest_id, msg.alert_id, msg.id, res.external_id)
        except Exception as e:
            logger.error(
                "track_status_failed", alert_id=msg.alert_id, dest=str(msg.dest), error=str(e)
            )
            return
        if not result.is_success:
            logger.error(
                "track_status_failed",
                alert_id=msg.alert_id,
                dest=str(msg.dest),
                error=result.message,
            )
