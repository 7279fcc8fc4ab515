"""Application tests for order listings and statistics."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.cart.store import CartStore
from storefront.order.checkout import OrderCreator
from storefront.order.queries import list_orders, order_stats
from storefront.order.status import change_order_status


@pytest.fixture()
def place_order(make_product):
    def _place(user_id="user-001", price=100.0, quantity=1):
        product = make_product(name=f"Item {price}", price=price, stock=10)
        CartStore().add(user_id, product.id, quantity)
        return OrderCreator().create_from_cart(user_id)

    return _place


class TestListOrders:
    def test_newest_first(self, place_order):
        first = place_order()
        second = place_order()

        assert [o.order_id for o in list_orders()] == [second.order_id, first.order_id]

    def test_filter_by_user(self, place_order):
        mine = place_order(user_id="user-001")
        place_order(user_id="user-002")

        assert [o.order_id for o in list_orders(user_id="user-001")] == [mine.order_id]

    def test_filter_by_status(self, place_order):
        confirmed = place_order()
        place_order()
        change_order_status(confirmed.id, "confirmed")

        assert [o.order_id for o in list_orders(status="confirmed")] == [confirmed.order_id]

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            list_orders(status="lost")

    def test_filter_by_date_range(self, place_order):
        order = place_order()
        now = datetime.now(UTC)

        assert list_orders(from_date=now - timedelta(minutes=1), to_date=now + timedelta(minutes=1))
        assert list_orders(from_date=now + timedelta(minutes=1)) == []
        assert list_orders(to_date=order.created_at - timedelta(minutes=1)) == []


class TestOrderStats:
    def test_empty(self):
        assert order_stats() == {"total_orders": 0, "total_revenue": 0.0, "by_status": {}}

    def test_totals_by_status(self, place_order):
        place_order(price=100.0)
        place_order(price=50.0)
        cancelled = place_order(price=20.0)
        change_order_status(cancelled.id, "cancelled")

        stats = order_stats()

        assert stats["total_orders"] == 3
        assert stats["total_revenue"] == 170.0
        assert stats["by_status"]["pending"] == {"count": 2, "total_amount": 150.0}
        assert stats["by_status"]["cancelled"] == {"count": 1, "total_amount": 20.0}

    def test_scoped_to_user(self, place_order):
        place_order(user_id="user-001", price=100.0)
        place_order(user_id="user-002", price=30.0)

        stats = order_stats(user_id="user-002")

        assert stats["total_orders"] == 1
        assert stats["total_revenue"] == 30.0
