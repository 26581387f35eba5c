from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response
from marketplace.api.serializers import ErrorResponseSerializer, OfferResponseSerializer
from marketplace.catalog.api.serializers import OfferDecisionSerializer, OfferInputSerializer
from marketplace.services import OfferService


class OfferViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OfferService:
        return container.offer_service()

    @extend_schema(
        operation_id="offers_create",
        summary="Make an offer on an item",
        request=OfferInputSerializer,
        responses={
            201: OfferResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid amount or own item"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item not found"),
        },
        tags=["Marketplace - Offers"],
    )
    def create(self, request, item_id=None):
        result = self.get_service().submit_offer(item_id, request.user, request.data.get("amount"))
        if not result.ok:
            return error_response(result)
        return Response(
            {"message": "Offer submitted successfully", "offer": OfferDecisionSerializer(result.value).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="offers_decide",
        summary="Accept or reject a pending offer (seller only)",
        request=None,
        responses={
            200: OfferResponseSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Item or offer not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Offer already decided"),
        },
        tags=["Marketplace - Offers"],
    )
    def decide(self, request, item_id=None, offer_id=None, decision=None):
        result = self.get_service().decide_offer(item_id, offer_id, request.user, decision)
        if not result.ok:
            return error_response(result)
        return Response(
            {"message": f"Offer {decision} successfully", "offer": OfferDecisionSerializer(result.value).data},
            status=status.HTTP_200_OK,
        )
