"""Order placement — commands and handler used by the checkout flow.

``PlaceOrder`` persists a pending order; ``DiscardOrder`` deletes one that
could not get its stock, and exists only as checkout's compensating action.
"""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    order_id = String(required=True, max_length=40)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item snapshot dicts
    subtotal = Float(required=True)
    discount = Float(default=0.0)
    total_amount = Float(required=True)
    total_items = Integer(required=True)
    shipping_address = String(max_length=500)
    contact_email = String(max_length=254)
    contact_phone = String(max_length=20)
    notes = String(max_length=1000)


@storefront.command(part_of="Order")
class DiscardOrder:
    order_pk = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            order_id=command.order_id,
            user_id=command.user_id,
            items_data=json.loads(command.items),
            subtotal=command.subtotal,
            discount=command.discount or 0.0,
            total_amount=command.total_amount,
            total_items=command.total_items,
            shipping_address=command.shipping_address,
            contact_email=command.contact_email,
            contact_phone=command.contact_phone,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(DiscardOrder)
    def discard_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_pk)
        repo._dao.delete(order)
