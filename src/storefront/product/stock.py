"""Stock and availability management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class AdjustStock:
    product_id = Identifier(required=True)
    delta = Integer(required=True)  # Signed: negative deducts, positive restocks


@storefront.command(part_of="Product")
class ChangeProductAvailability:
    product_id = Identifier(required=True)
    is_active = Boolean(required=True)


@storefront.command_handler(part_of=Product)
class ManageStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.delta)
        repo.add(product)
        return product.stock

    @handle(ChangeProductAvailability)
    def change_availability(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if command.is_active:
            product.activate()
        else:
            product.deactivate()
        repo.add(product)
