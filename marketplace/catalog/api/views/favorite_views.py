from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.catalog.api.serializers import FavoriteStatusSerializer, ItemSerializer
from marketplace.services import FavoriteService

ADDED_MESSAGE = "Item added to favorites"
REMOVED_MESSAGE = "Item removed from favorites"


def _status_payload(value):
    message = ADDED_MESSAGE if value["isFavorited"] else REMOVED_MESSAGE
    return {"isFavorited": value["isFavorited"], "message": message}


class FavoriteViewSet(viewsets.ViewSet):
    """
    Favorites of the signed-in user.

    ``toggle`` is the primary write; ``add``/``remove`` keep the older
    one-direction endpoints working. All three share one write path in
    FavoriteService.
    """

    permission_classes = [IsAuthenticated]

    def get_service(self) -> FavoriteService:
        return container.favorite_service()

    @extend_schema(
        operation_id="favorites_toggle",
        summary="Toggle whether the item is in the user's favorites",
        request=None,
        responses={
            200: FavoriteStatusSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not found"),
        },
        tags=["Marketplace - Favorites"],
    )
    def toggle(self, request, item_id=None):
        result = self.get_service().toggle_favorite(request.user, item_id)
        if not result.ok:
            return error_response(result)
        return Response(_status_payload(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="favorites_status",
        summary="Whether the item is in the user's favorites",
        responses={200: FavoriteStatusSerializer},
        tags=["Marketplace - Favorites"],
    )
    def check(self, request, item_id=None):
        result = self.get_service().is_favorited(request.user, item_id)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="favorites_add",
        summary="Add the item to favorites",
        request=None,
        responses={
            200: FavoriteStatusSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Already a favorite"),
        },
        tags=["Marketplace - Favorites"],
    )
    def add(self, request, item_id=None):
        result = self.get_service().add_favorite(request.user, item_id)
        if not result.ok:
            return error_response(result)
        return Response(_status_payload(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="favorites_remove",
        summary="Remove the item from favorites",
        responses={200: FavoriteStatusSerializer},
        tags=["Marketplace - Favorites"],
    )
    def remove(self, request, item_id=None):
        result = self.get_service().remove_favorite(request.user, item_id)
        if not result.ok:
            return error_response(result)
        return Response(_status_payload(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="favorites_list",
        summary="Items the user has favorited, most recent first",
        responses={200: ItemSerializer(many=True)},
        tags=["Marketplace - Favorites"],
    )
    def list(self, request):
        result = self.get_service().list_favorites_for_user(request.user)
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="items_with_favorites",
        summary="All items, each flagged with isFavorited for the user",
        responses={200: ItemSerializer(many=True)},
        tags=["Marketplace - Favorites"],
    )
    def with_flags(self, request):
        result = self.get_service().list_items_with_favorite_flag(request.user)
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value, many=True).data, status=status.HTTP_200_OK)
