"""Read-side queries over orders: filtered listings and revenue statistics."""

from collections import defaultdict

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderStatus
from storefront.shared.dates import EPOCH, as_utc


def list_orders(user_id=None, status=None, from_date=None, to_date=None) -> list[Order]:
    """Orders matching every given filter, newest first."""
    repo = current_domain.repository_for(Order)
    orders = repo.for_user(user_id) if user_id else repo.all_orders()

    if status:
        if status not in {s.value for s in OrderStatus}:
            raise ValidationError({"status": [f"Unknown order status: {status}"]})
        orders = [o for o in orders if o.status == status]
    if from_date:
        orders = [o for o in orders if as_utc(o.created_at) >= as_utc(from_date)]
    if to_date:
        orders = [o for o in orders if as_utc(o.created_at) <= as_utc(to_date)]

    return sorted(orders, key=lambda o: as_utc(o.created_at) or EPOCH, reverse=True)


def order_stats(user_id=None) -> dict:
    """Order count and revenue, overall and per status."""
    orders = list_orders(user_id=user_id)

    by_status = defaultdict(lambda: {"count": 0, "total_amount": 0.0})
    for order in orders:
        bucket = by_status[order.status]
        bucket["count"] += 1
        bucket["total_amount"] = round(bucket["total_amount"] + order.total_amount, 2)

    return {
        "total_orders": len(orders),
        "total_revenue": round(sum(o.total_amount for o in orders), 2),
        "by_status": dict(by_status),
    }
