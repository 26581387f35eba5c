from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.catalog.api.serializers import RatingSerializer, ReviewInputSerializer, ReviewSerializer
from marketplace.services import ReviewService


class ReviewViewSet(viewsets.ViewSet):
    """Reviews written about a user. Only the rater may change or delete a review."""

    def get_service(self) -> ReviewService:
        return container.review_service()

    def get_permissions(self):
        if self.action in ["list", "rating"]:
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(
        operation_id="reviews_list",
        summary="Reviews of a user, newest first",
        responses={
            200: ReviewSerializer(many=True),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def list(self, request, user_id=None):
        result = self.get_service().list_reviews(user_id)
        if not result.ok:
            return error_response(result)
        return Response(ReviewSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="reviews_create",
        summary="Review a user",
        request=ReviewInputSerializer,
        responses={
            201: ReviewSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid rating or self-review"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Already reviewed"),
        },
        tags=["Marketplace - Reviews"],
    )
    def create(self, request, user_id=None):
        result = self.get_service().create_review(
            request.user,
            user_id,
            request.data.get("rating"),
            request.data.get("description", ""),
        )
        if not result.ok:
            return error_response(result)
        return Response(ReviewSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="reviews_rating",
        summary="Average rating of a user",
        responses={200: RatingSerializer},
        tags=["Marketplace - Reviews"],
    )
    def rating(self, request, user_id=None):
        result = self.get_service().average_rating(user_id)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="reviews_update",
        summary="Change a review (rater only)",
        request=ReviewInputSerializer,
        responses={
            200: ReviewSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the rater"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def update(self, request, user_id=None, review_id=None):
        result = self.get_service().update_review(
            review_id,
            request.user,
            rating=request.data.get("rating"),
            description=request.data.get("description"),
            target_user_id=user_id,
        )
        if not result.ok:
            return error_response(result)
        return Response(ReviewSerializer(result.value).data, status=status.HTTP_200_OK)

    def partial_update(self, request, user_id=None, review_id=None):
        return self.update(request, user_id, review_id)

    def destroy(self, request, user_id=None, review_id=None):
        result = self.get_service().delete_review(review_id, request.user, target_user_id=user_id)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
