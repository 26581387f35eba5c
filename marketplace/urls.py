from django.urls import path

from .api.views import prometheus_metrics
from .catalog.api.views import BuyerOfferViewSet, FavoriteViewSet, ItemViewSet, OfferViewSet, ReviewViewSet

app_name = "marketplace"

item_list = ItemViewSet.as_view({"get": "list", "post": "create"})
item_detail = ItemViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update", "delete": "destroy"}
)
review_detail = ReviewViewSet.as_view({"put": "update", "patch": "partial_update", "delete": "destroy"})

urlpatterns = [
    # Catalog
    path("items/", item_list, name="item-list"),
    path("items/types/", ItemViewSet.as_view({"get": "types"}), name="item-types"),
    path("items/user/<uuid:user_id>/", ItemViewSet.as_view({"get": "by_seller"}), name="item-by-seller"),
    path("items/<uuid:item_id>/", item_detail, name="item-detail"),
    # Favorites
    path("items/with-favorites/", FavoriteViewSet.as_view({"get": "with_flags"}), name="item-with-favorites"),
    path("items/favorites/", FavoriteViewSet.as_view({"get": "list"}), name="favorite-list"),
    path(
        "items/<uuid:item_id>/toggle-favorite/",
        FavoriteViewSet.as_view({"post": "toggle"}),
        name="favorite-toggle",
    ),
    path(
        "items/<uuid:item_id>/favorite/",
        FavoriteViewSet.as_view({"get": "check", "post": "add", "delete": "remove"}),
        name="favorite-detail",
    ),
    # Offers
    path("items/offers/user/<uuid:user_id>/", BuyerOfferViewSet.as_view({"get": "list"}), name="offer-by-buyer"),
    path("items/<uuid:item_id>/offers/", OfferViewSet.as_view({"post": "create"}), name="offer-create"),
    path(
        "items/<uuid:item_id>/offers/<int:offer_id>/<str:decision>/",
        OfferViewSet.as_view({"put": "decide"}),
        name="offer-decide",
    ),
    # Reviews
    path(
        "users/<uuid:user_id>/reviews/",
        ReviewViewSet.as_view({"get": "list", "post": "create"}),
        name="review-list",
    ),
    path("users/<uuid:user_id>/reviews/<int:review_id>/", review_detail, name="review-detail"),
    path("users/<uuid:user_id>/rating/", ReviewViewSet.as_view({"get": "rating"}), name="user-rating"),
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
]
