"""Domain events for the Offer aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Offer")
class OfferCreated:
    """A promotional offer was configured."""

    __version__ = 1

    offer_id = Identifier(required=True)
    name = String(required=True)
    offer_type = String(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@storefront.event(part_of="Offer")
class OfferUpdated:
    """Offer configuration changed."""

    __version__ = 1

    offer_id = Identifier(required=True)
    changed_fields = String(max_length=500)  # Comma-separated field names


@storefront.event(part_of="Offer")
class OfferRedeemed:
    """An order used the offer on one of its lines."""

    __version__ = 1

    offer_id = Identifier(required=True)
    usage_count = Integer(required=True)
    usage_limit = Integer()
