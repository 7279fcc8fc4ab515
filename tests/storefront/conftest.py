"""Shared fixtures for the Storefront domain tests."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from storefront.notification import get_email_channel, reset_email_channel


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_bed):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    reset_email_channel()
    with storefront_bed.domain_context():
        yield

        # Drop cached cart views
        for _, cache in current_domain.caches.items():
            cache.flush_all()

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()
    reset_email_channel()


@pytest.fixture()
def email_channel():
    """The fake email adapter every notifier in the test talks to."""
    return get_email_channel()


@pytest.fixture()
def make_product():
    """Factory: register a product through its command and return the stored aggregate."""
    from storefront.product.ledger import StockLedger
    from storefront.product.registration import RegisterProduct

    def _make(name="Linen Shirt", price=100.0, discount_price=None, stock=10, is_active=True, sku=None, **extra):
        product_id = current_domain.process(
            RegisterProduct(
                name=name,
                gender_name=extra.get("gender_name", "Men"),
                category_name=extra.get("category_name", "Clothing"),
                sku=sku,
                price=price,
                discount_price=discount_price,
                stock=stock,
                images=json.dumps(extra.get("images", ["https://cdn.example.com/shirt.jpg"])),
                is_active=is_active,
            ),
            asynchronous=False,
        )
        return StockLedger().find_one(product_id)

    return _make


@pytest.fixture()
def make_offer():
    """Factory: create an offer through its command and return the stored aggregate."""
    from storefront.offer.management import CreateOffer
    from storefront.offer.offer import Offer

    def _make(offer_type, rule, product_ids=None, name=None, priority=1, usage_limit=None, **extra):
        now = datetime.now(UTC)
        offer_id = current_domain.process(
            CreateOffer(
                name=name or f"{offer_type} offer",
                description=extra.get("description"),
                offer_type=offer_type,
                rule=json.dumps(rule),
                product_ids=json.dumps([str(pid) for pid in product_ids or []]),
                start_date=extra.get("start_date", now - timedelta(days=1)),
                end_date=extra.get("end_date", now + timedelta(days=30)),
                is_active=extra.get("is_active", True),
                usage_limit=usage_limit,
                priority=priority,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Offer).get(offer_id)

    return _make
