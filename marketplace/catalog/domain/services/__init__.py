from .catalog_service import CatalogService
from .favorite_service import FavoriteService
from .offer_service import OfferService
from .review_service import ReviewService

__all__ = [
    "CatalogService",
    "FavoriteService",
    "OfferService",
    "ReviewService",
]
