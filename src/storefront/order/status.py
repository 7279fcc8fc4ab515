"""Order status changes — command and handler.

A status email goes out after every accepted transition. Delivery problems
are logged by the notifier and never undo the transition.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.notification.notifier import OrderNotifier
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_pk = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_pk)
        previous = order.change_status(command.status)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=order.order_id,
            previous_status=previous,
            new_status=order.status,
        )
        return previous


def change_order_status(order_pk, status, notifier=None) -> Order:
    """Apply a status change, then send the best-effort status email."""
    current_domain.process(UpdateOrderStatus(order_pk=order_pk, status=status), asynchronous=False)
    order = current_domain.repository_for(Order).get(order_pk)

    if order.contact_email:
        (notifier or OrderNotifier()).send_order_status_update(
            order.contact_email,
            {
                "order_id": order.order_id,
                "status": order.status,
                "total_amount": order.total_amount,
            },
        )
    return order
