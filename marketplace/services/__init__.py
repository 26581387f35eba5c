"""
Marketplace Service Layer

Business logic for the marketplace app, one service per concern.

Services:
- CatalogService: Item CRUD and catalog listings
- OfferService: Offer submission and the pending -> accepted/rejected lifecycle
- FavoriteService: Favorite records and the item favourited_by cache
- ReviewService: User reviews and average rating

Usage:
    from infrastructure.container import container

    result = container.offer_service().submit_offer(item_id, request.user, amount)

    if result.ok:
        offer = result.value
    else:
        error = result.error
"""

from marketplace.catalog.domain.services import CatalogService, FavoriteService, OfferService, ReviewService
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
    # Services
    "CatalogService",
    "FavoriteService",
    "OfferService",
    "ReviewService",
]
