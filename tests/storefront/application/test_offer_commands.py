"""Application tests for offer configuration via domain.process()."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.offer.management import RemoveOffer, UpdateOffer
from storefront.offer.offer import Offer
from storefront.offer.usage import RecordOfferUsage


def _repo():
    return current_domain.repository_for(Offer)


class TestCreateOffer:
    def test_create_persists_rule(self, make_offer, make_product):
        product = make_product()
        offer = make_offer("bundleDiscount", {"min_quantity": 3, "bundle_price": 250.0}, product_ids=[product.id])

        stored = _repo().get(offer.id)
        assert stored.offer_type == "bundleDiscount"
        assert stored.rule.min_quantity == 3
        assert stored.rule.bundle_price == 250.0
        assert stored.product_id_list == [str(product.id)]

    def test_invalid_rule_rejected(self, make_offer):
        with pytest.raises(ValidationError):
            make_offer("buyXgetY", {"buy_quantity": 2})
        assert _repo().list_offers() == []

    def test_inverted_dates_rejected(self, make_offer):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError):
            make_offer("percentageOff", {"discount_percentage": 10}, start_date=now, end_date=now - timedelta(days=1))


class TestUpdateOffer:
    def test_update_fields(self, make_offer):
        offer = make_offer("percentageOff", {"discount_percentage": 10})

        current_domain.process(
            UpdateOffer(
                offer_id=offer.id,
                changes=json.dumps({"name": "Summer Sale", "priority": 4, "rule": {"discount_percentage": 25}}),
            ),
            asynchronous=False,
        )

        stored = _repo().get(offer.id)
        assert stored.name == "Summer Sale"
        assert stored.priority == 4
        assert stored.rule.discount_percentage == 25

    def test_update_dates_from_iso_strings(self, make_offer):
        offer = make_offer("percentageOff", {"discount_percentage": 10})
        new_end = datetime.now(UTC) + timedelta(days=90)

        current_domain.process(
            UpdateOffer(offer_id=offer.id, changes=json.dumps({"end_date": new_end.isoformat()})),
            asynchronous=False,
        )

        assert _repo().get(offer.id).end_date.date() == new_end.date()

    def test_invalid_update_leaves_offer_unchanged(self, make_offer):
        offer = make_offer("percentageOff", {"discount_percentage": 10})

        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateOffer(offer_id=offer.id, changes=json.dumps({"offer_type": "buyXgetY"})),
                asynchronous=False,
            )

        assert _repo().get(offer.id).offer_type == "percentageOff"


class TestRemoveOffer:
    def test_remove_returns_name(self, make_offer):
        offer = make_offer("percentageOff", {"discount_percentage": 10}, name="Flash Sale")

        name = current_domain.process(RemoveOffer(offer_id=offer.id), asynchronous=False)

        assert name == "Flash Sale"
        with pytest.raises(ObjectNotFoundError):
            _repo().get(offer.id)

    def test_remove_unknown_offer(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveOffer(offer_id="missing-offer"), asynchronous=False)


class TestListingOffers:
    def test_sorted_by_priority(self, make_offer):
        make_offer("percentageOff", {"discount_percentage": 10}, name="Low", priority=1)
        make_offer("percentageOff", {"discount_percentage": 10}, name="High", priority=9)
        make_offer("percentageOff", {"discount_percentage": 10}, name="Mid", priority=5)

        assert [o.name for o in _repo().list_offers()] == ["High", "Mid", "Low"]

    def test_filter_by_active_flag(self, make_offer):
        make_offer("percentageOff", {"discount_percentage": 10}, name="On")
        make_offer("percentageOff", {"discount_percentage": 10}, name="Off", is_active=False)

        assert [o.name for o in _repo().list_offers(is_active=True)] == ["On"]
        assert [o.name for o in _repo().list_offers(is_active=False)] == ["Off"]

    def test_applicable_excludes_expired_and_used_up(self, make_offer):
        now = datetime.now(UTC)
        make_offer("percentageOff", {"discount_percentage": 10}, name="Current")
        make_offer(
            "percentageOff",
            {"discount_percentage": 10},
            name="Expired",
            start_date=now - timedelta(days=10),
            end_date=now - timedelta(days=1),
        )
        used_up = make_offer("percentageOff", {"discount_percentage": 10}, name="Used Up", usage_limit=1)
        current_domain.process(RecordOfferUsage(offer_id=used_up.id), asynchronous=False)

        assert [o.name for o in _repo().applicable()] == ["Current"]


class TestRecordOfferUsage:
    def test_returns_new_count(self, make_offer):
        offer = make_offer("percentageOff", {"discount_percentage": 10}, usage_limit=2)
        assert current_domain.process(RecordOfferUsage(offer_id=offer.id), asynchronous=False) == 1
        assert current_domain.process(RecordOfferUsage(offer_id=offer.id), asynchronous=False) == 2

    def test_beyond_limit_rejected(self, make_offer):
        offer = make_offer("percentageOff", {"discount_percentage": 10}, usage_limit=1)
        current_domain.process(RecordOfferUsage(offer_id=offer.id), asynchronous=False)

        with pytest.raises(ValidationError):
            current_domain.process(RecordOfferUsage(offer_id=offer.id), asynchronous=False)
