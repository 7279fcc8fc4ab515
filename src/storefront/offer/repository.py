"""Repository for the Offer aggregate."""

from datetime import UTC, datetime

from storefront.domain import storefront
from storefront.offer.offer import Offer
from storefront.shared.dates import EPOCH, as_utc


def _by_priority(offers):
    # Highest priority first, newest first within a priority
    newest_first = sorted(offers, key=lambda o: as_utc(o.created_at) or EPOCH, reverse=True)
    return sorted(newest_first, key=lambda o: o.priority or 0, reverse=True)


@storefront.repository(part_of=Offer)
class OfferRepository:
    def list_offers(self, is_active: bool | None = None) -> list[Offer]:
        query = self._dao.query
        if is_active is not None:
            query = query.filter(is_active=is_active)
        return _by_priority(query.all().items)

    def applicable(self, at=None) -> list[Offer]:
        """Offers that may be applied right now, highest priority first."""
        at = at or datetime.now(UTC)
        candidates = self._dao.query.filter(is_active=True).all().items
        return _by_priority([o for o in candidates if o.is_applicable(at)])
