"""
Stripe Payment Provider
========================

Concrete implementation of PaymentProviderInterface using Stripe.
"""

import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, PaymentStatus

logger = logging.getLogger(__name__)

_TRANSIENT_STRIPE_ERRORS = (
    stripe.RateLimitError,
    stripe.APIConnectionError,
    stripe.APIError,
)


class StripeProvider(PaymentProviderInterface):
    """
    Stripe payment provider implementation.

    Configuration (in settings.py):
        STRIPE_SECRET_KEY: Stripe secret API key
        STRIPE_TIMEOUT_SECONDS: Per-request HTTP timeout
    """

    def __init__(self):
        """Initialize Stripe provider with API credentials and a bounded HTTP client."""
        stripe.api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
        self.timeout = getattr(settings, "STRIPE_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=self.timeout)

        if not stripe.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type(_TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _create_payment_intent_api(self, **kwargs):
        """Internal method to create the intent with retries on transient errors."""
        return stripe.PaymentIntent.create(**kwargs)

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """
        Create a Stripe payment intent with automatic payment methods.

        Raises:
            PaymentException: If Stripe rejects the request or stays unreachable
        """
        try:
            intent = self._create_payment_intent_api(
                amount=amount_cents,
                currency=currency.lower(),
                automatic_payment_methods={"enabled": True},
                metadata=metadata or {},
            )

            logger.info(f"Created Stripe payment intent: {intent.id} ({amount_cents} {currency.lower()})")

            return PaymentIntent(
                intent_id=intent.id,
                client_secret=intent.client_secret,
                amount=amount_cents,
                currency=currency.lower(),
                status=self._map_stripe_status(getattr(intent, "status", None)),
                metadata=metadata or {},
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent creation failed: {str(e)}")
            raise PaymentException(f"Failed to create payment intent: {str(e)}") from e

    @staticmethod
    def _map_stripe_status(stripe_status: Optional[str]) -> PaymentStatus:
        try:
            return PaymentStatus(stripe_status)
        except ValueError:
            return PaymentStatus.UNKNOWN
