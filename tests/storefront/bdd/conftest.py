"""Shared BDD fixtures and step definitions for the Storefront domain."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.cart.store import CartStore
from storefront.offer.offer import OfferType
from storefront.order.order import Order
from storefront.product.ledger import StockLedger
from storefront.shared.errors import StorefrontError


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def user_id():
    return "user-001"


@pytest.fixture()
def products():
    """Products registered by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


def error_messages(exc) -> list[str]:
    return [message for messages in exc.messages.values() for message in messages]


@pytest.fixture()
def attempt(error):
    """Run an action, capturing the domain error it raises into `error`."""

    def _attempt(action):
        try:
            return action()
        except (ValidationError, StorefrontError) as exc:
            error["exc"] = exc
            return None

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def _(products, make_product, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('a product "{name}" priced {price:f} discounted to {discount:f} with {stock:d} in stock'))
def _(products, make_product, name, price, discount, stock):
    products[name] = make_product(name=name, price=price, discount_price=discount, stock=stock)


@given(parsers.cfparse("a percentage offer of {percentage:d} percent"))
def _(make_offer, percentage):
    make_offer(OfferType.PERCENTAGE_OFF.value, {"discount_percentage": percentage})


@given(parsers.cfparse("a percentage offer of {percentage:d} percent with minimum quantity {min_quantity:d}"))
def _(make_offer, percentage, min_quantity):
    make_offer(
        OfferType.PERCENTAGE_OFF.value,
        {"discount_percentage": percentage, "min_quantity": min_quantity},
    )


@given(parsers.cfparse("a fixed amount offer of {amount:f} with minimum quantity {min_quantity:d}"))
def _(make_offer, amount, min_quantity):
    make_offer(
        OfferType.FIXED_AMOUNT_OFF.value,
        {"discount_amount": amount, "min_quantity": min_quantity},
    )


@given(parsers.cfparse("a buy {buy:d} get {get:d} offer"))
def _(make_offer, buy, get):
    make_offer(OfferType.BUY_X_GET_Y.value, {"buy_quantity": buy, "get_quantity": get})


@given(parsers.cfparse('the customer has {quantity:d} "{name}" in the cart'))
def _(products, user_id, quantity, name):
    CartStore().add(user_id, products[name].id, quantity)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is rejected with "{message}"'))
def _(error, message):
    assert error["exc"] is not None
    assert any(message in m for m in error_messages(error["exc"]))


@then("no order exists")
def _():
    assert current_domain.repository_for(Order).all_orders() == []


@then(parsers.cfparse('the stock of "{name}" is {stock:d}'))
def _(products, name, stock):
    assert StockLedger().find_one(products[name].id).stock == stock
