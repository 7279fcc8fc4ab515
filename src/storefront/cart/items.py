"""Cart line management — commands and handler.

Handlers validate against live product data through the StockLedger. Cache
invalidation happens in ``storefront.cart.store`` once the unit of work has
committed.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.product.ledger import StockLedger


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


def _available_product(product_id):
    product = StockLedger().find_one(product_id)
    if not product.is_active:
        raise ValidationError({"product_id": [f"Product {product.name} is not available"]})
    return product


def _existing_cart(repo, user_id) -> ShoppingCart:
    cart = repo.find_by_user(user_id)
    if cart is None:
        raise ObjectNotFoundError({"cart": [f"No cart found for user {user_id}"]})
    return cart


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = _available_product(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_user(command.user_id) or ShoppingCart.create(user_id=command.user_id)
        item_id = cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity or 1,
            available_stock=product.stock,
        )
        repo.add(cart)
        return item_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(repo, command.user_id)
        item = cart.find_item(command.item_id)

        product = StockLedger().find_one(item.product_id)
        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.quantity,
            available_stock=product.stock,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(repo, command.user_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_user(command.user_id)
        if cart is None:
            return
        cart.clear()
        repo.add(cart)
