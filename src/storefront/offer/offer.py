"""Offer aggregate — a promotional rule evaluated against cart lines.

Four rule variants are supported, each with its own required parameters:

- ``buyXgetY``: ``buy_quantity`` + ``get_quantity``
- ``bundleDiscount``: ``min_quantity`` + ``bundle_price``
- ``percentageOff``: ``discount_percentage`` (1-100), optional ``min_quantity``
- ``fixedAmountOff``: ``discount_amount``, optional ``min_quantity``

Offers are business configuration; only ``usage_count`` moves at order time.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.offer.events import OfferCreated, OfferRedeemed, OfferUpdated
from storefront.shared.dates import as_utc


class OfferType(Enum):
    BUY_X_GET_Y = "buyXgetY"
    BUNDLE_DISCOUNT = "bundleDiscount"
    PERCENTAGE_OFF = "percentageOff"
    FIXED_AMOUNT_OFF = "fixedAmountOff"


@storefront.value_object(part_of="Offer")
class OfferRule:
    """Parameters of an offer's discount rule. Which ones matter depends on the offer type."""

    buy_quantity = Integer(min_value=1)
    get_quantity = Integer(min_value=0)
    bundle_price = Float(min_value=0.0)
    discount_percentage = Float(min_value=0.0, max_value=100.0)
    discount_amount = Float(min_value=0.0)
    min_quantity = Integer(min_value=1)


# Parameters each offer type cannot do without
_REQUIRED_RULE_PARAMETERS = {
    OfferType.BUY_X_GET_Y: ("buy_quantity", "get_quantity"),
    OfferType.BUNDLE_DISCOUNT: ("min_quantity", "bundle_price"),
    OfferType.PERCENTAGE_OFF: ("discount_percentage",),
    OfferType.FIXED_AMOUNT_OFF: ("discount_amount",),
}

_UPDATABLE_FIELDS = (
    "name",
    "description",
    "offer_type",
    "rule",
    "product_ids",
    "start_date",
    "end_date",
    "is_active",
    "usage_limit",
    "priority",
)


@storefront.aggregate
class Offer:
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    offer_type = String(required=True, choices=OfferType)
    rule = ValueObject(OfferRule)
    product_ids = Text()  # JSON array; empty means every product
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    usage_limit = Integer(min_value=1)
    usage_count = Integer(default=0, min_value=0)
    priority = Integer(default=1, min_value=1)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def end_date_must_follow_start_date(self):
        if self.start_date and self.end_date and as_utc(self.end_date) <= as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    @invariant.post
    def rule_must_suit_offer_type(self):
        if self.rule is None:
            raise ValidationError({"rule": [f"Offer {self.name} must define its rule parameters"]})

        try:
            offer_type = OfferType(self.offer_type)
        except ValueError:
            raise ValidationError({"offer_type": [f"Unknown offer type: {self.offer_type}"]}) from None

        missing = [p for p in _REQUIRED_RULE_PARAMETERS[offer_type] if getattr(self.rule, p) is None]
        if missing:
            raise ValidationError(
                {"rule": [f"Offer type {offer_type.value} requires {', '.join(sorted(missing))}"]}
            )

        if offer_type == OfferType.BUY_X_GET_Y and self.rule.get_quantity < 1:
            raise ValidationError({"rule": ["get_quantity must be at least 1 for buyXgetY offers"]})
        if offer_type == OfferType.PERCENTAGE_OFF and not 1 <= self.rule.discount_percentage <= 100:
            raise ValidationError({"rule": ["discount_percentage must be between 1 and 100"]})
        if offer_type == OfferType.FIXED_AMOUNT_OFF and self.rule.discount_amount <= 0:
            raise ValidationError({"rule": ["discount_amount must be greater than 0"]})

    @invariant.post
    def usage_must_stay_within_limit(self):
        if self.usage_limit is not None and (self.usage_count or 0) > self.usage_limit:
            raise ValidationError({"usage_count": [f"Offer {self.name} has exceeded its usage limit"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        offer_type,
        rule,
        start_date,
        end_date,
        description=None,
        product_ids=None,
        is_active=True,
        usage_limit=None,
        priority=1,
    ):
        now = datetime.now(UTC)
        offer = cls(
            name=name,
            description=description,
            offer_type=offer_type,
            rule=rule,
            product_ids=json.dumps([str(pid) for pid in product_ids or []]),
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
            usage_limit=usage_limit,
            usage_count=0,
            priority=priority,
            created_at=now,
            updated_at=now,
        )
        offer.raise_(
            OfferCreated(
                offer_id=str(offer.id),
                name=name,
                offer_type=offer_type,
                start_date=start_date,
                end_date=end_date,
            )
        )
        return offer

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def product_id_list(self) -> list[str]:
        return json.loads(self.product_ids) if self.product_ids else []

    def is_applicable(self, at=None) -> bool:
        """Active, inside its validity window, and not used up."""
        at = as_utc(at) or datetime.now(UTC)
        if not self.is_active:
            return False
        if not as_utc(self.start_date) <= at <= as_utc(self.end_date):
            return False
        if self.usage_limit is not None and (self.usage_count or 0) >= self.usage_limit:
            return False
        return True

    def applies_to(self, product_id) -> bool:
        products = self.product_id_list
        return not products or str(product_id) in products

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def update(self, **changes):
        """Change configuration fields. Invariants are checked once, after all changes."""
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({"offer": [f"Cannot update fields: {', '.join(sorted(unknown))}"]})

        with atomic_change(self):
            for field_name, value in changes.items():
                if field_name == "product_ids":
                    value = json.dumps([str(pid) for pid in value or []])
                setattr(self, field_name, value)
            self.updated_at = datetime.now(UTC)

        self.raise_(OfferUpdated(offer_id=str(self.id), changed_fields=",".join(sorted(changes))))

    def record_usage(self):
        if self.usage_limit is not None and (self.usage_count or 0) >= self.usage_limit:
            raise ValidationError({"usage_count": [f"Offer {self.name} has reached its usage limit"]})

        self.usage_count = (self.usage_count or 0) + 1
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OfferRedeemed(
                offer_id=str(self.id),
                usage_count=self.usage_count,
                usage_limit=self.usage_limit,
            )
        )
