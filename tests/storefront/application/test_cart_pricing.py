"""Application tests for the priced cart view and its cache."""

import pytest
from storefront.cart.pricing import CartPricingService
from storefront.cart.store import CartStore
from storefront.cart.view_cache import CartViewCache, NullCartViewCache
from storefront.product.ledger import StockLedger


@pytest.fixture()
def pricing():
    return CartPricingService()


@pytest.fixture()
def store(pricing):
    return CartStore(pricing=pricing)


class TestPricedCart:
    def test_empty_cart(self, pricing):
        cart = pricing.get_priced_cart("user-001")
        assert cart.is_empty
        assert cart.summary.total == 0.0
        assert cart.summary.item_count == 0

    def test_line_without_discounts(self, store, pricing, make_product):
        product = make_product(price=25.0, stock=10)
        store.add("user-001", product.id, 2)

        line = pricing.get_priced_cart("user-001").items[0]

        assert line.unit_price == 25.0
        assert line.subtotal == 50.0
        assert line.product_discount == 0.0
        assert line.offer_discount == 0.0
        assert line.applied_offer is None
        assert line.line_total == 50.0
        assert line.product.sku == product.sku

    def test_product_discount_then_offer(self, store, pricing, make_product, make_offer):
        product = make_product(price=100.0, discount_price=80.0, stock=10)
        offer = make_offer("percentageOff", {"discount_percentage": 10}, name="Ten Off")
        store.add("user-001", product.id, 2)

        cart = pricing.get_priced_cart("user-001")
        line = cart.items[0]

        assert line.unit_price == 80.0
        assert line.subtotal == 160.0
        assert line.product_discount == 40.0
        assert line.offer_discount == 16.0
        assert line.applied_offer.id == str(offer.id)
        assert line.applied_offer.name == "Ten Off"
        assert line.line_total == 144.0

        summary = cart.summary
        assert summary.subtotal == 200.0
        assert summary.total_product_discount == 40.0
        assert summary.total_offer_discount == 16.0
        assert summary.total_discount == 56.0
        assert summary.total == 144.0
        assert summary.total_items == 2
        assert summary.item_count == 1

    def test_best_offer_wins(self, store, pricing, make_product, make_offer):
        product = make_product(price=100.0, stock=10)
        percentage = make_offer("percentageOff", {"discount_percentage": 10, "min_quantity": 2})
        make_offer("fixedAmountOff", {"discount_amount": 20, "min_quantity": 3})
        store.add("user-001", product.id, 3)

        line = pricing.get_priced_cart("user-001").items[0]

        assert line.offer_discount == 30.0
        assert line.applied_offer.id == str(percentage.id)

    def test_offer_limited_to_other_product_is_ignored(self, store, pricing, make_product, make_offer):
        product = make_product()
        other = make_product(name="Other")
        make_offer("percentageOff", {"discount_percentage": 50}, product_ids=[other.id])
        store.add("user-001", product.id, 1)

        assert pricing.get_priced_cart("user-001").items[0].applied_offer is None

    def test_inactive_offer_is_ignored(self, store, pricing, make_product, make_offer):
        product = make_product()
        make_offer("percentageOff", {"discount_percentage": 50}, is_active=False)
        store.add("user-001", product.id, 1)

        assert pricing.get_priced_cart("user-001").items[0].offer_discount == 0.0

    def test_newest_line_first(self, store, pricing, make_product):
        first = make_product(name="First")
        second = make_product(name="Second")
        store.add("user-001", first.id, 1)
        store.add("user-001", second.id, 1)

        names = [line.product.name for line in pricing.get_priced_cart("user-001").items]

        assert names == ["Second", "First"]

    def test_line_for_deleted_product_is_skipped(self, store, pricing, make_product):
        from protean import current_domain
        from storefront.product.product import Product

        kept = make_product(name="Kept")
        gone = make_product(name="Gone")
        store.add("user-001", kept.id, 1)
        store.add("user-001", gone.id, 1)

        repo = current_domain.repository_for(Product)
        repo._dao.delete(repo.get(gone.id))

        cart = pricing.compute("user-001")
        assert [line.product.name for line in cart.items] == ["Kept"]


class TestCartCache:
    def test_priced_cart_is_cached_in_camel_case(self, store, pricing, make_product):
        store.add("user-001", make_product().id, 1)
        pricing.get_priced_cart("user-001")

        cached = CartViewCache().get("user-001")

        assert cached is not None
        assert '"lineTotal"' in cached
        assert '"totalDiscount"' in cached

    def test_cached_read_round_trips(self, store, pricing, make_product):
        store.add("user-001", make_product().id, 2)
        fresh = pricing.get_priced_cart("user-001")
        cached = pricing.get_priced_cart("user-001")
        assert cached == fresh

    @pytest.mark.parametrize("mutation", ["add", "update", "remove", "clear"])
    def test_mutations_are_visible_on_next_read(self, store, pricing, make_product, mutation):
        product = make_product(stock=10)
        other = make_product(name="Other", stock=10)
        item_id = store.add("user-001", product.id, 1)
        before = pricing.get_priced_cart("user-001")

        if mutation == "add":
            store.add("user-001", other.id, 1)
        elif mutation == "update":
            store.update_quantity("user-001", item_id, 4)
        elif mutation == "remove":
            store.remove("user-001", item_id)
        else:
            store.clear("user-001")

        after = pricing.get_priced_cart("user-001")
        assert after == pricing.compute("user-001")
        assert after != before

    def test_unreadable_cache_entry_is_recomputed(self, store, pricing, make_product):
        store.add("user-001", make_product().id, 1)
        CartViewCache().put("user-001", "not json")

        cart = pricing.get_priced_cart("user-001")

        assert len(cart.items) == 1
        assert CartViewCache().get("user-001") != "not json"

    def test_null_cache_gives_the_same_answer(self, store, make_product, make_offer):
        product = make_product(price=100.0, discount_price=90.0, stock=10)
        make_offer("buyXgetY", {"buy_quantity": 2, "get_quantity": 1})
        store.add("user-001", product.id, 3)

        cached = CartPricingService().get_priced_cart("user-001")
        uncached = CartPricingService(ledger=StockLedger(), cache=NullCartViewCache()).get_priced_cart("user-001")

        assert cached == uncached
        assert uncached.summary.total_offer_discount == 90.0
