"""FastAPI routes for the Storefront domain — cart, orders, offers and products."""

import json
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, admin_principal, current_principal
from storefront.api.schemas import (
    AddToCartRequest,
    AdjustStockRequest,
    CartItemResponse,
    CountResponse,
    CreateOfferRequest,
    CreateOrderRequest,
    MessageResponse,
    OfferResponse,
    OrderResponse,
    OrderStatsResponse,
    ProductResponse,
    RegisterProductRequest,
    UpdateCartQuantityRequest,
    UpdateOfferRequest,
    UpdateOrderStatusRequest,
)
from storefront.cart.priced_cart import PricedCart
from storefront.cart.pricing import CartPricingService
from storefront.cart.store import CartStore
from storefront.offer.management import CreateOffer, RemoveOffer, UpdateOffer
from storefront.offer.offer import Offer
from storefront.order.checkout import OrderCreator
from storefront.order.order import Order
from storefront.order.queries import list_orders, order_stats
from storefront.order.status import change_order_status
from storefront.product.ledger import StockLedger
from storefront.product.registration import RegisterProduct

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("", status_code=201, response_model=CartItemResponse)
async def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(current_principal)) -> CartItemResponse:
    item_id = CartStore().add(principal.user_id, body.product_id, body.quantity)
    return CartItemResponse(item_id=item_id)


@cart_router.get("", response_model=PricedCart)
async def get_cart(principal: Principal = Depends(current_principal)) -> PricedCart:
    return CartPricingService().get_priced_cart(principal.user_id)


@cart_router.get("/count", response_model=CountResponse)
async def get_cart_count(principal: Principal = Depends(current_principal)) -> CountResponse:
    return CountResponse(count=CartStore().count(principal.user_id))


@cart_router.patch("/{item_id}", response_model=MessageResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartQuantityRequest,
    principal: Principal = Depends(current_principal),
) -> MessageResponse:
    CartStore().update_quantity(principal.user_id, item_id, body.quantity)
    return MessageResponse(message="Cart item updated successfully")


@cart_router.delete("/{item_id}", response_model=MessageResponse)
async def remove_cart_item(item_id: str, principal: Principal = Depends(current_principal)) -> MessageResponse:
    CartStore().remove(principal.user_id, item_id)
    return MessageResponse(message="Item removed from cart successfully")


@cart_router.delete("", response_model=MessageResponse)
async def clear_cart(principal: Principal = Depends(current_principal)) -> MessageResponse:
    CartStore().clear(principal.user_id)
    return MessageResponse(message="Cart cleared successfully")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _visible_order(order: Order, principal: Principal) -> Order:
    if not principal.is_admin and str(order.user_id) != principal.user_id:
        raise HTTPException(status_code=403, detail="Not allowed to view this order")
    return order


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, principal: Principal = Depends(current_principal)) -> OrderResponse:
    order = OrderCreator().create_from_cart(
        principal.user_id,
        shipping_address=body.shipping_address,
        contact_email=body.contact_email,
        contact_phone=body.contact_phone,
        notes=body.notes,
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_all_orders(
    user_id: str | None = Query(default=None, alias="userId"),
    status: str | None = None,
    from_date: datetime | None = Query(default=None, alias="fromDate"),
    to_date: datetime | None = Query(default=None, alias="toDate"),
    principal: Principal = Depends(admin_principal),
) -> list[OrderResponse]:
    orders = list_orders(user_id=user_id, status=status, from_date=from_date, to_date=to_date)
    return [OrderResponse.from_order(o) for o in orders]


@order_router.get("/my-orders", response_model=list[OrderResponse])
async def list_my_orders(principal: Principal = Depends(current_principal)) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in list_orders(user_id=principal.user_id)]


@order_router.get("/stats", response_model=OrderStatsResponse)
async def get_order_stats(principal: Principal = Depends(current_principal)) -> OrderStatsResponse:
    stats = order_stats(user_id=None if principal.is_admin else principal.user_id)
    return OrderStatsResponse(**stats)


@order_router.get("/order-id/{order_id}", response_model=OrderResponse)
async def get_order_by_order_id(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    order = current_domain.repository_for(Order).get_by_order_id(order_id)
    return OrderResponse.from_order(_visible_order(order, principal))


@order_router.get("/{order_pk}", response_model=OrderResponse)
async def get_order(order_pk: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_pk)
    return OrderResponse.from_order(_visible_order(order, principal))


@order_router.patch("/{order_pk}/status", response_model=OrderResponse)
async def update_order_status(
    order_pk: str,
    body: UpdateOrderStatusRequest,
    principal: Principal = Depends(admin_principal),
) -> OrderResponse:
    order = change_order_status(order_pk, body.status)
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Offer Router
# ---------------------------------------------------------------------------
offer_router = APIRouter(prefix="/offer", tags=["offers"])


@offer_router.post("", status_code=201, response_model=OfferResponse)
async def create_offer(body: CreateOfferRequest, principal: Principal = Depends(admin_principal)) -> OfferResponse:
    command = CreateOffer(
        name=body.name,
        description=body.description,
        offer_type=body.offer_type,
        rule=body.rules.model_dump_json(),
        product_ids=json.dumps(body.product_ids),
        start_date=body.start_date,
        end_date=body.end_date,
        is_active=body.is_active,
        usage_limit=body.usage_limit,
        priority=body.priority,
    )
    offer_id = current_domain.process(command, asynchronous=False)
    return OfferResponse.from_offer(current_domain.repository_for(Offer).get(offer_id))


@offer_router.get("", response_model=list[OfferResponse])
async def list_offers(is_active: bool | None = Query(default=None, alias="isActive")) -> list[OfferResponse]:
    offers = current_domain.repository_for(Offer).list_offers(is_active=is_active)
    return [OfferResponse.from_offer(o) for o in offers]


@offer_router.get("/active", response_model=list[OfferResponse])
async def list_active_offers() -> list[OfferResponse]:
    return [OfferResponse.from_offer(o) for o in current_domain.repository_for(Offer).applicable()]


@offer_router.get("/{offer_id}", response_model=OfferResponse)
async def get_offer(offer_id: str) -> OfferResponse:
    return OfferResponse.from_offer(current_domain.repository_for(Offer).get(offer_id))


@offer_router.patch("/{offer_id}", response_model=OfferResponse)
async def update_offer(
    offer_id: str,
    body: UpdateOfferRequest,
    principal: Principal = Depends(admin_principal),
) -> OfferResponse:
    changes = body.model_dump(mode="json", exclude_unset=True)
    if "rules" in changes:
        changes["rule"] = changes.pop("rules")
    current_domain.process(UpdateOffer(offer_id=offer_id, changes=json.dumps(changes)), asynchronous=False)
    return OfferResponse.from_offer(current_domain.repository_for(Offer).get(offer_id))


@offer_router.delete("/{offer_id}", response_model=MessageResponse)
async def delete_offer(offer_id: str, principal: Principal = Depends(admin_principal)) -> MessageResponse:
    name = current_domain.process(RemoveOffer(offer_id=offer_id), asynchronous=False)
    return MessageResponse(message=f"Offer {name} has been deleted successfully")


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductResponse)
async def register_product(
    body: RegisterProductRequest,
    principal: Principal = Depends(admin_principal),
) -> ProductResponse:
    command = RegisterProduct(
        name=body.name,
        gender_name=body.gender_name,
        category_name=body.category_name,
        sku=body.sku,
        price=body.price,
        discount_price=body.discount_price,
        stock=body.stock,
        images=json.dumps(body.images),
        is_active=body.is_active,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductResponse.from_product(StockLedger().find_one(product_id))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(StockLedger().find_one(product_id))


@product_router.patch("/{product_id}/stock", response_model=ProductResponse)
async def adjust_product_stock(
    product_id: str,
    body: AdjustStockRequest,
    principal: Principal = Depends(admin_principal),
) -> ProductResponse:
    ledger = StockLedger()
    ledger.update_stock(product_id, body.quantity)
    return ProductResponse.from_product(ledger.find_one(product_id))
