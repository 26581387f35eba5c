"""
PaymentService - purchase intents

Prices a cart server-side from the catalog and asks the payment provider for
an intent only when the client's amount matches. Settlement happens at the
provider; nothing is persisted here.
"""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings

from infrastructure.payments.interface import PaymentException, PaymentProviderInterface
from marketplace.catalog.domain.models import Item
from marketplace.catalog.domain.services.queries import parse_uuid
from payment_system.infra.observability.metrics import payment_intents_total
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.tracing import get_tracer

tracer = get_tracer(__name__)

CURRENCY_RE = re.compile(r"^[a-z]{3}$")


def to_minor_units(total: Decimal) -> int:
    """Decimal amount to integer cents, rounding half up."""
    return int((total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _client_amount(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


class PaymentService(BaseService):
    """
    Service for purchase intents.

    Dependencies:
    - Store: catalog prices
    - PaymentProviderInterface: Stripe (or the mock provider in tests)
    """

    def __init__(self, store, provider: PaymentProviderInterface):
        super().__init__()
        self.store = store
        self.provider = provider

    def _server_total(self, cart_item_ids: List[Any]) -> ServiceResult[Decimal]:
        pks = []
        for raw in cart_item_ids:
            pk = parse_uuid(raw)
            if pk is None:
                return service_err(ErrorCodes.NOT_FOUND, f"Item not found: {raw}")
            pks.append(pk)

        prices = dict(self.store.manager(Item).filter(pk__in=set(pks)).values_list("pk", "price"))
        missing = [str(pk) for pk in pks if pk not in prices]
        if missing:
            return service_err(ErrorCodes.NOT_FOUND, f"Item not found: {missing[0]}")

        # One line per cart entry, as the client priced it
        return service_ok(sum((prices[pk] for pk in pks), Decimal("0")))

    @BaseService.log_performance
    def create_purchase_intent(
        self, user, cart_item_ids, amount, currency: Optional[str] = None
    ) -> ServiceResult[Dict[str, str]]:
        """
        Create a payment intent for the cart.

        Args:
            user: Authenticated buyer
            cart_item_ids: Item ids in the cart
            amount: Client-computed total in minor units (cents)
            currency: ISO code, defaults to settings.PAYMENT_CURRENCY

        Returns:
            ServiceResult with ``{"clientSecret", "paymentIntentId"}``.
            A mismatched amount fails with VALIDATION_ERROR carrying
            ``expected`` and ``received``.
        """
        with tracer.start_as_current_span("payments.purchase_intent") as span:
            if not isinstance(cart_item_ids, (list, tuple)) or not cart_item_ids:
                payment_intents_total.labels(outcome="rejected").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Cart is empty")

            currency = (currency or settings.PAYMENT_CURRENCY).lower()
            if not CURRENCY_RE.match(currency):
                payment_intents_total.labels(outcome="rejected").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Currency must be a three-letter ISO code")

            try:
                total = self._server_total(list(cart_item_ids))
            except Exception as e:
                return self.internal_error("pricing cart", e)
            if not total.ok:
                payment_intents_total.labels(outcome="rejected").inc()
                return total

            expected = to_minor_units(total.value)
            received = _client_amount(amount)
            span.set_attribute("payment.amount", expected)
            if received != expected:
                payment_intents_total.labels(outcome="mismatch").inc()
                self.logger.warning(f"Amount mismatch for user {user.pk}: expected {expected}, received {amount!r}")
                return service_err(
                    ErrorCodes.VALIDATION_ERROR,
                    "Amount mismatch between frontend and backend",
                    extra={"expected": expected, "received": amount},
                )

            try:
                intent = self.provider.create_payment_intent(
                    expected,
                    currency,
                    metadata={"user_id": str(user.pk), "item_count": str(len(cart_item_ids))},
                )
            except PaymentException as e:
                payment_intents_total.labels(outcome="provider_error").inc()
                self.logger.error(f"Payment provider failed for user {user.pk}: {e}", exc_info=True)
                return service_err(ErrorCodes.PAYMENT_ERROR, "Failed to create payment intent")
            except Exception as e:
                payment_intents_total.labels(outcome="provider_error").inc()
                return self.internal_error("creating payment intent", e)

            payment_intents_total.labels(outcome="created").inc()
            self.logger.info(f"Payment intent {intent.intent_id} created for {expected} {currency}")
            return service_ok({"clientSecret": intent.client_secret, "paymentIntentId": intent.intent_id})
