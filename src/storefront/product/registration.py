"""Product registration — command and handler.

Generates a unique SKU from the gender and category names unless the caller
supplies one.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.product.sku import generate_sku
from storefront.shared.errors import ConflictError

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=200)
    gender_name = String(required=True, max_length=50)
    category_name = String(required=True, max_length=50)
    sku = String(max_length=50)
    price = Float(required=True, min_value=0.0)
    discount_price = Float(min_value=0.0)
    stock = Integer(default=0, min_value=0)
    images = Text()  # JSON array of image URLs
    is_active = Boolean(default=True)


@storefront.command_handler(part_of=Product)
class RegisterProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        repo = current_domain.repository_for(Product)

        if command.sku:
            sku = command.sku.upper()
            if repo.sku_exists(sku):
                raise ConflictError({"sku": [f"Product with SKU {sku} already exists"]})
        else:
            sku = generate_sku(command.gender_name, command.category_name, exists=repo.sku_exists)

        product = Product.register(
            name=command.name,
            sku=sku,
            price=command.price,
            discount_price=command.discount_price,
            stock=command.stock or 0,
            images=json.loads(command.images) if command.images else [],
            is_active=command.is_active if command.is_active is not None else True,
        )
        repo.add(product)

        logger.info("Product registered", product_id=str(product.id), sku=sku)
        return str(product.id)
