"""Offer evaluation — picks the single best offer for one cart line.

The engine is pure: callers pass the line (product id, quantity, unit price)
and the offers that are currently applicable, and get back the discount and
the offer that produced it. At most one offer applies per line, computed on
the unit price after the product's own discount price.
"""

from dataclasses import dataclass

from storefront.offer.offer import Offer, OfferType
from storefront.shared.dates import EPOCH, as_utc


@dataclass(frozen=True)
class LineDiscount:
    """Outcome of evaluating offers against one line."""

    amount: float = 0.0
    offer: Offer | None = None


def buy_x_get_y_discount(quantity, unit_price, buy_quantity, get_quantity):
    group = buy_quantity + get_quantity
    if group <= 0:
        return 0.0
    return (quantity // group) * get_quantity * unit_price


def bundle_discount(quantity, unit_price, min_quantity, bundle_price):
    if not min_quantity:
        return 0.0
    bundles = quantity // min_quantity
    return max(0.0, bundles * min_quantity * unit_price - bundles * bundle_price)


def percentage_discount(quantity, unit_price, discount_percentage):
    return quantity * unit_price * discount_percentage / 100


def fixed_amount_discount(quantity, unit_price, discount_amount, min_quantity=None):
    times = quantity // (min_quantity or 1)
    return min(discount_amount * times, quantity * unit_price)


def discount_for(offer: Offer, quantity: int, unit_price: float) -> float:
    """Discount a single offer would give on ``quantity`` units at ``unit_price``."""
    rule = offer.rule
    offer_type = OfferType(offer.offer_type)

    if offer_type == OfferType.BUY_X_GET_Y:
        return buy_x_get_y_discount(quantity, unit_price, rule.buy_quantity, rule.get_quantity)
    if offer_type == OfferType.BUNDLE_DISCOUNT:
        return bundle_discount(quantity, unit_price, rule.min_quantity, rule.bundle_price)
    if offer_type == OfferType.PERCENTAGE_OFF:
        return percentage_discount(quantity, unit_price, rule.discount_percentage)
    if offer_type == OfferType.FIXED_AMOUNT_OFF:
        return fixed_amount_discount(quantity, unit_price, rule.discount_amount, rule.min_quantity)
    return 0.0


def is_eligible(offer: Offer, product_id, quantity: int) -> bool:
    """The offer covers the product and the quantity meets its minimum."""
    if not offer.applies_to(product_id):
        return False
    min_quantity = offer.rule.min_quantity if offer.rule else None
    return not min_quantity or quantity >= min_quantity


def _rank(candidate):
    # Largest discount, then highest priority, then the oldest offer
    discount, offer = candidate
    created = as_utc(offer.created_at) or EPOCH
    return (-discount, -(offer.priority or 0), created, str(offer.id))


def best_offer(product_id, quantity: int, unit_price: float, offers: list[Offer]) -> LineDiscount:
    """Choose the offer giving the largest discount on this line.

    ``offers`` must already be restricted to currently applicable offers.
    Ties go to the higher ``priority``, then to the earliest created offer.
    """
    candidates = []
    for offer in offers:
        if not is_eligible(offer, product_id, quantity):
            continue
        discount = round(discount_for(offer, quantity, unit_price), 2)
        if discount > 0:
            candidates.append((discount, offer))

    if not candidates:
        return LineDiscount()

    discount, offer = min(candidates, key=_rank)
    return LineDiscount(amount=discount, offer=offer)
