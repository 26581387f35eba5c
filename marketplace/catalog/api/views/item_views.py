from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.catalog.api.serializers import BuyerOfferSerializer, ItemInputSerializer, ItemSerializer
from marketplace.services import CatalogService


ITEM_FIELDS = ("title", "type", "price", "description", "location", "images")


def _item_payload(data):
    return {field: data[field] for field in ITEM_FIELDS if field in data}


class ItemViewSet(viewsets.ViewSet):
    """
    Item catalog endpoints.

    Reads are public; create requires a signed-in user and update/delete are
    restricted to the item's seller (checked by CatalogService).
    """

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    def get_permissions(self):
        if self.action in ["list", "retrieve", "types", "by_seller"]:
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(
        operation_id="items_list",
        summary="List all items, newest first",
        responses={200: ItemSerializer(many=True)},
        tags=["Marketplace - Items"],
    )
    def list(self, request):
        result = self.get_service().list_items()
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="items_create",
        summary="Create an item for sale",
        request=ItemInputSerializer,
        responses={
            201: ItemSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
        },
        tags=["Marketplace - Items"],
    )
    def create(self, request):
        result = self.get_service().create_item(request.user, _item_payload(request.data))
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="items_retrieve",
        summary="Get item details",
        responses={
            200: ItemSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not found"),
        },
        tags=["Marketplace - Items"],
    )
    def retrieve(self, request, item_id=None):
        result = self.get_service().get_item(item_id)
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="items_update",
        summary="Update an item (seller only)",
        request=ItemInputSerializer,
        responses={
            200: ItemSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not found"),
        },
        tags=["Marketplace - Items"],
    )
    def update(self, request, item_id=None):
        result = self.get_service().update_item(item_id, request.user, _item_payload(request.data))
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value).data, status=status.HTTP_200_OK)

    def partial_update(self, request, item_id=None):
        return self.update(request, item_id)

    @extend_schema(
        operation_id="items_destroy",
        summary="Delete an item (seller only)",
        responses={
            204: None,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not found"),
        },
        tags=["Marketplace - Items"],
    )
    def destroy(self, request, item_id=None):
        result = self.get_service().delete_item(item_id, request.user)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="items_types",
        summary="List the allowed item types",
        tags=["Marketplace - Items"],
    )
    def types(self, request):
        return Response(self.get_service().list_types().value, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="items_by_seller",
        summary="List the items a user is selling",
        responses={200: ItemSerializer(many=True)},
        tags=["Marketplace - Items"],
    )
    def by_seller(self, request, user_id=None):
        result = self.get_service().list_items({"seller": user_id})
        if not result.ok:
            return error_response(result)
        return Response(ItemSerializer(result.value, many=True).data, status=status.HTTP_200_OK)


class BuyerOfferViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="offers_by_buyer",
        summary="List the offers a user has made, newest first",
        responses={200: BuyerOfferSerializer(many=True)},
        tags=["Marketplace - Offers"],
    )
    def list(self, request, user_id=None):
        result = container.offer_service().list_offers_by_buyer(user_id)
        if not result.ok:
            return error_response(result)
        return Response(BuyerOfferSerializer(result.value, many=True).data, status=status.HTTP_200_OK)
