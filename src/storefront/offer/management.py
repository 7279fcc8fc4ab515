"""Offer configuration — commands and handler for create, update and removal."""

import json
from datetime import datetime

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.offer.offer import Offer, OfferRule

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Offer")
class CreateOffer:
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    offer_type = String(required=True, max_length=50)
    rule = Text(required=True)  # JSON: rule parameters
    product_ids = Text()  # JSON: list of product ids
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    usage_limit = Integer(min_value=1)
    priority = Integer(default=1, min_value=1)


@storefront.command(part_of="Offer")
class UpdateOffer:
    offer_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: field name -> new value


@storefront.command(part_of="Offer")
class RemoveOffer:
    offer_id = Identifier(required=True)


def _rule_from(data) -> OfferRule:
    data = json.loads(data) if isinstance(data, str) else data
    return OfferRule(**(data or {}))


@storefront.command_handler(part_of=Offer)
class ManageOffersHandler:
    @handle(CreateOffer)
    def create_offer(self, command):
        offer = Offer.create(
            name=command.name,
            description=command.description,
            offer_type=command.offer_type,
            rule=_rule_from(command.rule),
            product_ids=json.loads(command.product_ids) if command.product_ids else [],
            start_date=command.start_date,
            end_date=command.end_date,
            is_active=command.is_active if command.is_active is not None else True,
            usage_limit=command.usage_limit,
            priority=command.priority or 1,
        )
        current_domain.repository_for(Offer).add(offer)

        logger.info("Offer created", offer_id=str(offer.id), offer_type=offer.offer_type)
        return str(offer.id)

    @handle(UpdateOffer)
    def update_offer(self, command):
        repo = current_domain.repository_for(Offer)
        offer = repo.get(command.offer_id)

        changes = json.loads(command.changes)
        if "rule" in changes:
            changes["rule"] = _rule_from(changes["rule"])
        for field_name in ("start_date", "end_date"):
            if isinstance(changes.get(field_name), str):
                changes[field_name] = datetime.fromisoformat(changes[field_name])

        offer.update(**changes)
        repo.add(offer)

    @handle(RemoveOffer)
    def remove_offer(self, command):
        repo = current_domain.repository_for(Offer)
        offer = repo.get(command.offer_id)
        repo._dao.delete(offer)

        logger.info("Offer removed", offer_id=str(offer.id), name=offer.name)
        return offer.name
