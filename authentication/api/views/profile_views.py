from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import ProfileSerializer, ProfileUpdateRequestSerializer
from authentication.api.serializers.response_serializers import (
    AuthTokensResponseSerializer,
    ErrorResponseSerializer,
    ProfileResponseSerializer,
)
from infrastructure.container import container
from marketplace.api.responses import error_response

from .auth_views import auth_payload

# Request keys accepted for each profile field
PROFILE_KEYS = {
    "username": ("username",),
    "email": ("email",),
    "bio": ("bio", "Bio"),
    "location": ("location",),
    "profile_pic": ("profilePic", "profile_pic"),
}


def profile_changes(data):
    changes = {}
    for field, keys in PROFILE_KEYS.items():
        for key in keys:
            if key in data:
                changes[field] = data[key]
                break
    return changes


class PublicProfileDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="users_profile",
        summary="Public profile with the user's items",
        responses={
            200: ProfileResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Users"],
    )
    def get(self, request, username):
        result = container.auth_service().get_profile(username, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ProfileSerializer(result.value).data, status=status.HTTP_200_OK)


class ProfileManageView(APIView):
    """Owner-only profile edit and account deletion."""

    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="users_update",
        summary="Update your profile",
        request=ProfileUpdateRequestSerializer,
        responses={
            200: AuthTokensResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid or duplicate data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your account"),
        },
        tags=["Users"],
    )
    def put(self, request, user_id):
        result = container.auth_service().update_profile(user_id, request.user, profile_changes(request.data))
        if not result.ok:
            return error_response(result)
        return Response(auth_payload(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="users_delete",
        summary="Delete your account",
        responses={
            204: None,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your account"),
        },
        tags=["Users"],
    )
    def delete(self, request, user_id):
        result = container.auth_service().delete_account(user_id, request.user)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
