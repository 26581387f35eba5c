import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response
from marketplace.api.serializers import AmountMismatchResponseSerializer, ErrorResponseSerializer
from payment_system.api.serializers.request_serializers import PurchaseIntentRequestSerializer
from payment_system.api.serializers.response_serializers import PurchaseIntentResponseSerializer

logger = logging.getLogger(__name__)


def cart_item_ids(cart_items):
    """Ids from ``cartItems``: plain ids, or objects carrying ``id`` / ``_id``."""
    if not isinstance(cart_items, list):
        return []
    ids = []
    for entry in cart_items:
        if isinstance(entry, dict):
            ids.append(entry.get("id") or entry.get("_id"))
        else:
            ids.append(entry)
    return ids


@extend_schema(
    operation_id="payments_purchase_intent",
    summary="Create a payment intent for the cart",
    description="The server re-prices the cart from the catalog and rejects the request if `amount` differs.",
    request=PurchaseIntentRequestSerializer,
    responses={
        200: PurchaseIntentResponseSerializer,
        400: OpenApiResponse(response=AmountMismatchResponseSerializer, description="Empty cart or amount mismatch"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown cart item"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider failure"),
    },
    tags=["Payments"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def purchase_intent(request):
    result = container.payment_service().create_purchase_intent(
        request.user,
        cart_item_ids(request.data.get("cartItems")),
        request.data.get("amount"),
        request.data.get("currency"),
    )
    if not result.ok:
        return error_response(result)
    return Response(result.value, status=status.HTTP_200_OK)
