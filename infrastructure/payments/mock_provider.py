"""
Mock Payment Provider
=====================

In-memory provider used by the test settings and local development. Records
every intent it creates so tests can assert on them.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from .interface import PaymentIntent, PaymentProviderInterface, PaymentStatus

logger = logging.getLogger(__name__)


class MockPaymentProvider(PaymentProviderInterface):
    def __init__(self):
        self.intents: List[PaymentIntent] = []

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        intent_id = f"pi_mock_{uuid.uuid4().hex[:16]}"
        intent = PaymentIntent(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:8]}",
            amount=amount_cents,
            currency=currency.lower(),
            status=PaymentStatus.REQUIRES_PAYMENT_METHOD,
            metadata=metadata or {},
        )
        self.intents.append(intent)
        logger.info(f"[mock] Created payment intent {intent_id} for {amount_cents} {currency.lower()}")
        return intent
