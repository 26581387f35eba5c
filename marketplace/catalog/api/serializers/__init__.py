from .item_serializers import (
    BuyerOfferSerializer,
    FavoriteStatusSerializer,
    ItemInputSerializer,
    ItemSerializer,
    ItemSummarySerializer,
    OfferDecisionSerializer,
    OfferInputSerializer,
    OfferSerializer,
)
from .review_serializers import RatingSerializer, ReviewInputSerializer, ReviewSerializer
from .user_serializers import DELETED_USER, UserRefField, UserRefSerializer, user_ref

__all__ = [
    "BuyerOfferSerializer",
    "DELETED_USER",
    "FavoriteStatusSerializer",
    "ItemInputSerializer",
    "ItemSerializer",
    "ItemSummarySerializer",
    "OfferDecisionSerializer",
    "OfferInputSerializer",
    "OfferSerializer",
    "RatingSerializer",
    "ReviewInputSerializer",
    "ReviewSerializer",
    "UserRefField",
    "UserRefSerializer",
    "user_ref",
]
