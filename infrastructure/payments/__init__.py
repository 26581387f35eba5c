"""
Payment Service Abstraction Layer
==================================

Provides a unified interface for creating payment intents across providers.
"""

from .factory import PaymentFactory
from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, PaymentStatus
from .mock_provider import MockPaymentProvider
from .stripe_provider import StripeProvider

__all__ = [
    "PaymentProviderInterface",
    "PaymentIntent",
    "PaymentStatus",
    "PaymentException",
    "StripeProvider",
    "MockPaymentProvider",
    "PaymentFactory",
]
