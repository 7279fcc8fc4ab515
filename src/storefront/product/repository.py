"""Repository for the Product aggregate."""

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str) -> Product | None:
        results = self._dao.query.filter(sku=sku.upper()).all().items
        return results[0] if results else None

    def sku_exists(self, sku: str) -> bool:
        return self.find_by_sku(sku) is not None
