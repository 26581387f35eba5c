# Marketplace API Serializers

# Import response serializers for API documentation
from .response_serializers import (
    AmountMismatchResponseSerializer,
    ErrorResponseSerializer,
    OfferResponseSerializer,
)

__all__ = [
    "AmountMismatchResponseSerializer",
    "ErrorResponseSerializer",
    "OfferResponseSerializer",
]
