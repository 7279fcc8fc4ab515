"""Order notifications — best-effort emails for order confirmation and status changes.

Neither method raises. A failed or crashed delivery is logged and the calling
operation carries on; there is a single attempt and no retry queue.
"""

import structlog

from storefront.notification import get_email_channel
from storefront.notification.email_port import EmailPort, OrderEmail
from storefront.notification.templates import OrderConfirmationTemplate, OrderStatusUpdateTemplate

logger = structlog.get_logger(__name__)


class OrderNotifier:
    def __init__(self, channel: EmailPort | None = None):
        self._channel = channel

    @property
    def channel(self) -> EmailPort:
        return self._channel or get_email_channel()

    def send_order_confirmation(self, email: str, payload: dict) -> bool:
        return self._send(email, OrderConfirmationTemplate, payload, kind="order_confirmation")

    def send_order_status_update(self, email: str, payload: dict) -> bool:
        return self._send(email, OrderStatusUpdateTemplate, payload, kind="order_status_update")

    def _send(self, email, template, payload, kind) -> bool:
        order_id = payload.get("order_id")
        try:
            content = template.render(payload)
            delivery = self.channel.deliver(
                OrderEmail(to=email, subject=content["subject"], body=content["body"], order_id=order_id)
            )
        except Exception as exc:
            logger.error(
                "Failed to send order email",
                kind=kind,
                order_id=order_id,
                to=email,
                error=str(exc),
            )
            return False

        if not delivery.delivered:
            logger.warning(
                "Order email was not delivered",
                kind=kind,
                order_id=order_id,
                to=email,
                error=delivery.failure_reason,
            )
            return False

        logger.info("Order email sent", kind=kind, order_id=order_id, to=email, message_id=delivery.message_id)
        return True
