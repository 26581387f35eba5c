from .favorite_views import FavoriteViewSet
from .item_views import BuyerOfferViewSet, ItemViewSet
from .offer_views import OfferViewSet
from .review_views import ReviewViewSet

__all__ = [
    "BuyerOfferViewSet",
    "FavoriteViewSet",
    "ItemViewSet",
    "OfferViewSet",
    "ReviewViewSet",
]
