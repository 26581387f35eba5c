"""
Payment Provider Interface
===========================

Contract for the external payment processor. The marketplace only creates
payment intents; settlement, refunds and payouts belong to the processor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


@dataclass
class PaymentIntent:
    """
    A payment intent created at the processor.

    Attributes:
        intent_id: Processor identifier of the intent
        client_secret: Secret handed to the client to confirm the payment
        amount: Amount in the smallest currency unit (cents)
        currency: ISO currency code (lowercase)
        status: Current status of the intent
        metadata: Custom data attached to the intent
    """

    intent_id: str
    client_secret: str
    amount: int
    currency: str
    status: PaymentStatus
    metadata: Dict[str, Any] = field(default_factory=dict)


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment provider operations.

    Concrete implementations:
        - StripeProvider: Stripe payment processing
        - MockPaymentProvider: in-memory provider for tests and local runs
    """

    @abstractmethod
    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """
        Create a payment intent.

        Args:
            amount_cents: Amount in the smallest currency unit
            currency: ISO currency code
            metadata: Custom data to attach to the intent

        Returns:
            PaymentIntent with the client secret

        Raises:
            PaymentException: If the processor rejects or cannot be reached
        """
        pass


class PaymentException(Exception):
    """Base exception for payment operations."""

    pass
