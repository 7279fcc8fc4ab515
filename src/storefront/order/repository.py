"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_order_id(self, order_id: str) -> Order | None:
        results = self._dao.query.filter(order_id=order_id).all().items
        if not results:
            return None
        return self.get(results[0].id)

    def get_by_order_id(self, order_id: str) -> Order:
        order = self.find_by_order_id(order_id)
        if order is None:
            raise ObjectNotFoundError({"order_id": [f"Order with Order ID {order_id} not found"]})
        return order

    def order_id_exists(self, order_id: str) -> bool:
        return bool(self._dao.query.filter(order_id=order_id).all().items)

    def all_orders(self) -> list[Order]:
        return [self.get(o.id) for o in self._dao.query.all().items]

    def for_user(self, user_id) -> list[Order]:
        return [self.get(o.id) for o in self._dao.query.filter(user_id=str(user_id)).all().items]
