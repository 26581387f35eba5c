"""
OfferService - offer negotiation state machine

    pending --accept--> accepted
    pending --reject--> rejected

``accepted`` and ``rejected`` are terminal: deciding a decided offer fails
with INVALID_STATE and leaves the status unchanged. Decisions are
independent; accepting one offer does not touch competing offers on the same
item.

The status check and the status write happen in one transaction holding the
item row lock, so two racing decisions on the same item serialize and the
loser sees the winner's status.
"""

from decimal import Decimal
from typing import List

from django.utils import timezone

from marketplace.catalog.domain.models import MIN_OFFER_AMOUNT, Item, Offer
from marketplace.infra.observability import metrics
from utils.ownership import is_owner, require_owner
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.tracing import get_tracer
from utils.transaction_utils import LockConflictError, retry_on_lock_conflict

from .queries import parse_int, parse_money, parse_uuid, to_cents

tracer = get_tracer(__name__)


class OfferService(BaseService):
    def __init__(self, store):
        super().__init__()
        self.store = store

    def _offers(self):
        return self.store.manager(Offer)

    @BaseService.log_performance
    def submit_offer(self, item_id, buyer, amount) -> ServiceResult[Offer]:
        """
        Append a pending offer from ``buyer`` to the item.

        Errors:
            VALIDATION_ERROR: amount missing, non-numeric or below the minimum;
                buyer is the item's seller
            NOT_FOUND: item absent
        """
        with tracer.start_as_current_span("offers.submit") as span:
            value = parse_money(amount)
            if value is None:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Offer amount must be a number")
            if value < Decimal(MIN_OFFER_AMOUNT):
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Offer amount must be at least {MIN_OFFER_AMOUNT}")

            pk = parse_uuid(item_id)
            if pk is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")

            try:
                result = self._append_offer(pk, buyer, to_cents(value))
            except LockConflictError:
                metrics.lock_conflicts_total.labels(operation="submit_offer").inc()
                return service_err(ErrorCodes.CONFLICT, "Item is busy, please retry")
            except Exception as e:
                return self.internal_error(f"submitting offer on item {item_id}", e)

            if not result.ok:
                return result

            offer = self._offers().select_related("buyer", "item").get(pk=result.value)
            span.set_attribute("offer.id", offer.pk)
            metrics.offers_submitted_total.inc()
            self.logger.info(f"Offer {offer.pk} of {offer.amount} submitted on item {pk} by {offer.buyer_id}")
            return service_ok(offer)

    @retry_on_lock_conflict()
    def _append_offer(self, item_pk, buyer, amount: Decimal) -> ServiceResult[int]:
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().filter(pk=item_pk).first()
            if item is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")
            if is_owner(item, buyer, "seller"):
                return service_err(ErrorCodes.VALIDATION_ERROR, "You cannot make an offer on your own item")

            offer = self._offers().create(
                item=item,
                buyer_id=buyer.pk,
                amount=amount,
                status=Offer.STATUS_PENDING,
                created_at=timezone.now(),
            )
            return service_ok(offer.pk)

    @BaseService.log_performance
    def decide_offer(self, item_id, offer_id, caller, decision: str) -> ServiceResult[Offer]:
        """
        Accept or reject a pending offer on an item owned by ``caller``.

        Checks, in order: decision value (VALIDATION_ERROR), item exists
        (NOT_FOUND), caller is the seller (FORBIDDEN), offer belongs to the
        item (NOT_FOUND), offer is pending (INVALID_STATE).
        """
        with tracer.start_as_current_span("offers.decide") as span:
            span.set_attribute("offer.decision", str(decision))
            if decision not in Offer.DECISIONS:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Decision must be 'accepted' or 'rejected'")

            item_pk = parse_uuid(item_id)
            if item_pk is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")

            try:
                result = self._decide_locked(item_pk, parse_int(offer_id), caller, decision)
            except LockConflictError:
                metrics.lock_conflicts_total.labels(operation="decide_offer").inc()
                return service_err(ErrorCodes.CONFLICT, "Item is busy, please retry")
            except Exception as e:
                return self.internal_error(f"deciding offer {offer_id} on item {item_id}", e)

            if not result.ok:
                return result

            offer = self._offers().select_related("buyer", "item").get(pk=result.value)
            metrics.offer_decisions_total.labels(decision=decision).inc()
            self.logger.info(f"Offer {offer.pk} on item {item_pk} {decision}")
            return service_ok(offer)

    @retry_on_lock_conflict()
    def _decide_locked(self, item_pk, offer_pk, caller, decision: str) -> ServiceResult[int]:
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().filter(pk=item_pk).first()
            if item is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")

            denied = require_owner(item, caller, "seller", "You can only manage offers for your own items")
            if denied:
                return denied

            offer = item.offer_index().get(offer_pk)
            if offer is None:
                return service_err(ErrorCodes.NOT_FOUND, "Offer not found")
            if not offer.is_pending:
                return service_err(ErrorCodes.INVALID_STATE, f"Offer has already been {offer.status}")

            offer.status = decision
            offer.decided_at = timezone.now()
            offer.save(update_fields=["status", "decided_at"])
            return service_ok(offer.pk)

    @BaseService.log_performance
    def list_offers_by_buyer(self, buyer_id) -> ServiceResult[List[Offer]]:
        """Offers made by ``buyer_id`` with their item, newest first (ties: higher id first)."""
        pk = parse_uuid(buyer_id)
        if pk is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid user id")
        try:
            offers = list(
                self._offers()
                .filter(buyer_id=pk)
                .select_related("buyer", "item", "item__seller")
                .order_by("-created_at", "-id")
            )
        except Exception as e:
            return self.internal_error(f"listing offers of buyer {buyer_id}", e)
        return service_ok(offers)
