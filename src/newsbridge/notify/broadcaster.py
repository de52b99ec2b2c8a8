"""Best-effort fan-out of a notification to every subscribed chat."""

import structlog

from newsbridge.logging_config import get_delivery_logger
from newsbridge.models import DeliveryOutcome, Notification
from newsbridge.subscriptions.registry import SubscriptionRegistry
from newsbridge.transport.base import MessagingTransport

logger = structlog.get_logger(__name__)


class Broadcaster:
    """Sends one message per subscriber; one chat failing never stops the rest."""

    def __init__(self, registry: SubscriptionRegistry, transport: MessagingTransport):
        self._registry = registry
        self._transport = transport
        self._delivery_log = get_delivery_logger()

    def broadcast(self, notification: Notification) -> list[DeliveryOutcome]:
        recipients = self._registry.list_all()
        outcomes: list[DeliveryOutcome] = []

        for chat_id in recipients:
            try:
                if notification.media is not None:
                    self._transport.send_message(
                        chat_id, notification.media, caption=notification.text
                    )
                else:
                    self._transport.send_message(chat_id, notification.text)
            except Exception as e:
                logger.warning("broadcast.delivery_failed", chat_id=chat_id, error=str(e))
                outcome = DeliveryOutcome(chat_id=chat_id, delivered=False, error=str(e))
            else:
                outcome = DeliveryOutcome(chat_id=chat_id, delivered=True)

            self._delivery_log.info(
                "delivery",
                chat_id=chat_id,
                delivered=outcome.delivered,
                error=outcome.error,
                with_media=notification.media is not None,
            )
            outcomes.append(outcome)

        delivered = sum(1 for o in outcomes if o.delivered)
        logger.info(
            "broadcast.complete",
            recipients=len(recipients),
            delivered=delivered,
            failed=len(outcomes) - delivered,
        )
        return outcomes
