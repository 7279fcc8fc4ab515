"""Offer usage tracking — command and handler run once per applied offer at order time."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.offer.offer import Offer


@storefront.command(part_of="Offer")
class RecordOfferUsage:
    offer_id = Identifier(required=True)


@storefront.command_handler(part_of=Offer)
class RecordOfferUsageHandler:
    @handle(RecordOfferUsage)
    def record_offer_usage(self, command):
        repo = current_domain.repository_for(Offer)
        offer = repo.get(command.offer_id)
        offer.record_usage()
        repo.add(offer)
        return offer.usage_count
