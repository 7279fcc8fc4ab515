"""Checkout — turns a user's priced cart into a pending order.

Flow:
    1. Price the cart afresh, never from the cached view, so offers and
       prices are the ones in force now; an empty cart is rejected
    2. Re-check every product is active and has enough stock (no writes yet)
    3. Generate a unique ``ORD-<millis>-<nnnn>`` order number
    4. Persist the order with item snapshots and the cart's totals
    5. Deduct stock line by line
       - on failure: restore the lines already deducted, delete the order,
         raise StockDeductionError
    6. Count usage of every applied offer (best-effort)
    7. Clear the cart and its cached view
    8. Send the confirmation email (best-effort)

Every step that writes runs as its own command, so each has its own unit of
work. That is what lets step 5 undo steps 4 and 5 explicitly when a later line
fails.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront import config
from storefront.cart.pricing import CartPricingService
from storefront.cart.priced_cart import PricedCart
from storefront.cart.store import CartStore
from storefront.notification.notifier import OrderNotifier
from storefront.offer.usage import RecordOfferUsage
from storefront.order.order import Order
from storefront.order.placement import DiscardOrder, PlaceOrder
from storefront.product.ledger import StockLedger
from storefront.shared.errors import ConflictError, StockDeductionError
from storefront.shared.identifiers import generate_unique, new_order_number

logger = structlog.get_logger(__name__)


class OrderCreator:
    def __init__(
        self,
        pricing: CartPricingService | None = None,
        ledger: StockLedger | None = None,
        notifier: OrderNotifier | None = None,
        cart_store: CartStore | None = None,
    ):
        self.ledger = ledger or StockLedger()
        self.pricing = pricing or CartPricingService(ledger=self.ledger)
        self.notifier = notifier or OrderNotifier()
        self.cart_store = cart_store or CartStore(pricing=self.pricing)

    def create_from_cart(
        self,
        user_id,
        shipping_address=None,
        contact_email=None,
        contact_phone=None,
        notes=None,
    ) -> Order:
        cart = self.pricing.compute(user_id)
        if cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        self._verify_stock(cart)

        order_id = self._new_order_id()
        order_pk = current_domain.process(
            PlaceOrder(
                order_id=order_id,
                user_id=user_id,
                items=json.dumps(self._snapshot_items(cart)),
                subtotal=cart.summary.subtotal,
                discount=cart.summary.total_discount,
                total_amount=cart.summary.total,
                total_items=cart.summary.total_items,
                shipping_address=shipping_address,
                contact_email=contact_email,
                contact_phone=contact_phone,
                notes=notes,
            ),
            asynchronous=False,
        )

        self._deduct_stock(cart, order_pk, order_id)
        self._record_offer_usage(cart, order_id)
        self.cart_store.clear(user_id)

        order = current_domain.repository_for(Order).get(order_pk)
        logger.info(
            "Order created from cart",
            order_id=order_id,
            user_id=str(user_id),
            total_amount=order.total_amount,
            total_items=order.total_items,
        )

        if contact_email:
            self.notifier.send_order_confirmation(
                contact_email,
                {
                    "order_id": order.order_id,
                    "items": [
                        {
                            "product_name": item.product_name,
                            "sku": item.sku,
                            "quantity": item.quantity,
                            "price": item.price,
                        }
                        for item in order.items
                    ],
                    "subtotal": order.subtotal,
                    "discount": order.discount,
                    "total_amount": order.total_amount,
                },
            )

        return order

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _verify_stock(self, cart: PricedCart):
        """Fail on the first line whose product is gone, inactive or short of stock."""
        for line in cart.items:
            try:
                product = self.ledger.find_one(line.product.id)
            except ObjectNotFoundError:
                raise ValidationError(
                    {"product_id": [f"Product {line.product.name} is no longer available"]}
                ) from None

            if not product.is_active:
                raise ValidationError({"product_id": [f"Product {product.name} is no longer available"]})
            if not product.has_stock_for(line.quantity):
                raise ValidationError(
                    {
                        "stock": [
                            f"Insufficient stock for {product.name}. "
                            f"Available: {product.stock}, Required: {line.quantity}"
                        ]
                    }
                )

    def _new_order_id(self) -> str:
        repo = current_domain.repository_for(Order)
        return generate_unique(
            new_order_number,
            repo.order_id_exists,
            config.ORDER_ID_MAX_ATTEMPTS,
            label="order_id",
            error_cls=ConflictError,
        )

    @staticmethod
    def _snapshot_items(cart: PricedCart) -> list[dict]:
        return [
            {
                "product_id": line.product.id,
                "product_name": line.product.name,
                "sku": line.product.sku,
                "quantity": line.quantity,
                "price": line.unit_price,
                "discount_price": line.product.discount_price,
                "images": line.product.images,
                "subtotal": line.subtotal,
                "offer_discount": line.offer_discount,
                "applied_offer_id": line.applied_offer.id if line.applied_offer else None,
            }
            for line in cart.items
        ]

    def _deduct_stock(self, cart: PricedCart, order_pk, order_id):
        deducted = []
        for line in cart.items:
            try:
                self.ledger.update_stock(line.product.id, -line.quantity)
            except Exception as exc:
                logger.error(
                    "Stock deduction failed, rolling back order",
                    order_id=order_id,
                    product_id=line.product.id,
                    quantity=line.quantity,
                    error=str(exc),
                )
                self._compensate(deducted, order_pk, order_id)
                raise StockDeductionError(
                    {"order": ["Failed to update stock. Order creation cancelled."]}
                ) from exc
            deducted.append((line.product.id, line.quantity))

    def _compensate(self, deducted, order_pk, order_id):
        """Undo earlier deductions and delete the order. Failures here are logged, not raised."""
        for product_id, quantity in reversed(deducted):
            try:
                self.ledger.update_stock(product_id, quantity)
            except Exception as exc:
                logger.error(
                    "COMPENSATION FAILED: could not restore stock",
                    order_id=order_id,
                    product_id=product_id,
                    quantity=quantity,
                    error=str(exc),
                )

        try:
            current_domain.process(DiscardOrder(order_pk=order_pk), asynchronous=False)
        except Exception as exc:
            logger.error(
                "COMPENSATION FAILED: could not delete order",
                order_id=order_id,
                error=str(exc),
            )

    def _record_offer_usage(self, cart: PricedCart, order_id):
        offer_ids = sorted({line.applied_offer.id for line in cart.items if line.applied_offer})
        for offer_id in offer_ids:
            try:
                current_domain.process(RecordOfferUsage(offer_id=offer_id), asynchronous=False)
            except Exception as exc:
                logger.warning(
                    "Could not record offer usage",
                    order_id=order_id,
                    offer_id=offer_id,
                    error=str(exc),
                )
