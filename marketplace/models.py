from marketplace.catalog.domain.models import Favorite, Item, Offer, UserReview

__all__ = [
    "Item",
    "Offer",
    "Favorite",
    "UserReview",
]
