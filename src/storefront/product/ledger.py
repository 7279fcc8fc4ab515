"""StockLedger — the read and signed-delta update surface over product stock.

Cart and checkout code talk to products only through this class so they
depend on a narrow interface rather than on the Product repository.
"""

from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.product.stock import AdjustStock


class StockLedger:
    def find_one(self, product_id) -> Product:
        """Load a product. Raises ``ObjectNotFoundError`` when it does not exist."""
        return current_domain.repository_for(Product).get(product_id)

    def find_many(self, product_ids) -> dict[str, Product]:
        """Load the products that still exist, keyed by id. Missing ids are left out."""
        wanted = {str(pid) for pid in product_ids}
        if not wanted:
            return {}
        products = current_domain.repository_for(Product)._dao.query.filter(id__in=list(wanted)).all().items
        return {str(p.id): p for p in products}

    def update_stock(self, product_id, delta) -> int:
        """Apply a signed delta in its own unit of work and return the new stock.

        The delta is checked against the freshly loaded stock, so a decrement
        that would drive stock negative fails with ``ValidationError`` and
        leaves the product untouched.
        """
        return current_domain.process(AdjustStock(product_id=product_id, delta=delta), asynchronous=False)
