"""Storefront bounded context — catalogue stock, offers, carts and orders.

Handles the shopping cart (CQRS), promotional offer evaluation, and the
checkout flow that turns a priced cart into an order while keeping product
stock consistent.
"""

import structlog
from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

logger = structlog.get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
