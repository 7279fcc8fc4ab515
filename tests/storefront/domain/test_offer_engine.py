"""Tests for the offer engine — discount formulas and best-offer selection."""

from datetime import UTC, datetime, timedelta

import pytest
from storefront.offer.engine import (
    best_offer,
    bundle_discount,
    buy_x_get_y_discount,
    discount_for,
    fixed_amount_discount,
    is_eligible,
    percentage_discount,
)
from storefront.offer.offer import Offer, OfferRule


def _offer(offer_type, product_ids=None, priority=1, name=None, **rule):
    now = datetime.now(UTC)
    return Offer.create(
        name=name or f"{offer_type} offer",
        offer_type=offer_type,
        rule=OfferRule(**rule),
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=1),
        product_ids=product_ids,
        priority=priority,
    )


class TestDiscountFormulas:
    def test_buy_x_get_y(self):
        assert buy_x_get_y_discount(9, 50.0, buy_quantity=2, get_quantity=1) == 150.0

    def test_buy_x_get_y_counts_only_complete_groups(self):
        assert buy_x_get_y_discount(5, 10.0, buy_quantity=2, get_quantity=1) == 10.0

    def test_bundle(self):
        # Two bundles of 3 at 250 instead of 300
        assert bundle_discount(7, 100.0, min_quantity=3, bundle_price=250.0) == 100.0

    def test_bundle_never_negative(self):
        assert bundle_discount(3, 10.0, min_quantity=3, bundle_price=50.0) == 0.0

    def test_percentage(self):
        assert percentage_discount(3, 100.0, 10) == 30.0

    def test_fixed_amount_applies_per_minimum_quantity(self):
        assert fixed_amount_discount(6, 100.0, 20.0, min_quantity=3) == 40.0

    def test_fixed_amount_without_minimum_applies_per_unit(self):
        assert fixed_amount_discount(2, 100.0, 5.0) == 10.0

    def test_fixed_amount_capped_at_line_value(self):
        assert fixed_amount_discount(1, 15.0, 20.0) == 15.0


class TestEligibility:
    def test_offer_without_products_covers_everything(self):
        offer = _offer("percentageOff", discount_percentage=10)
        assert is_eligible(offer, "prod-001", 1)

    def test_offer_restricted_to_other_products(self):
        offer = _offer("percentageOff", product_ids=["prod-002"], discount_percentage=10)
        assert not is_eligible(offer, "prod-001", 5)

    def test_minimum_quantity_not_met(self):
        offer = _offer("percentageOff", discount_percentage=10, min_quantity=3)
        assert not is_eligible(offer, "prod-001", 2)


class TestBestOffer:
    def test_percentage_beats_fixed_amount(self):
        percentage = _offer("percentageOff", discount_percentage=10, min_quantity=2)
        fixed = _offer("fixedAmountOff", discount_amount=20, min_quantity=3)

        result = best_offer("prod-001", 3, 100.0, [fixed, percentage])

        assert result.amount == 30.0
        assert result.offer is percentage

    def test_buy_x_get_y_example(self):
        offer = _offer("buyXgetY", buy_quantity=2, get_quantity=1)

        result = best_offer("prod-001", 9, 50.0, [offer])

        assert result.amount == 150.0
        assert result.offer is offer

    def test_no_offers_means_no_discount(self):
        result = best_offer("prod-001", 3, 100.0, [])
        assert result.amount == 0.0
        assert result.offer is None

    def test_zero_discount_offer_is_never_selected(self):
        # Quantity 2 never completes a buy-2-get-1 group
        offer = _offer("buyXgetY", buy_quantity=2, get_quantity=1)

        result = best_offer("prod-001", 2, 50.0, [offer])

        assert result.offer is None

    def test_tie_goes_to_higher_priority(self):
        low = _offer("percentageOff", name="Low", priority=1, discount_percentage=10)
        high = _offer("fixedAmountOff", name="High", priority=5, discount_amount=10)

        result = best_offer("prod-001", 1, 100.0, [low, high])

        assert result.amount == 10.0
        assert result.offer is high

    def test_tie_on_priority_goes_to_oldest_offer(self):
        first = _offer("percentageOff", name="First", discount_percentage=10)
        second = _offer("percentageOff", name="Second", discount_percentage=10)
        second.created_at = first.created_at + timedelta(seconds=1)

        result = best_offer("prod-001", 1, 100.0, [second, first])

        assert result.offer is first

    def test_discount_is_rounded_to_cents(self):
        offer = _offer("percentageOff", discount_percentage=33)

        result = best_offer("prod-001", 1, 9.99, [offer])

        assert result.amount == pytest.approx(3.30)

    def test_discount_for_uses_discounted_unit_price(self):
        offer = _offer("percentageOff", discount_percentage=50)
        assert discount_for(offer, 2, 80.0) == 80.0
