from .catalog import ITEM_TYPES, MIN_ITEM_PRICE, MIN_OFFER_AMOUNT, Item, Offer
from .interaction import Favorite, UserReview

__all__ = [
    "ITEM_TYPES",
    "MIN_ITEM_PRICE",
    "MIN_OFFER_AMOUNT",
    "Item",
    "Offer",
    "Favorite",
    "UserReview",
]
