from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import SignInRequestSerializer, SignUpRequestSerializer, UserSerializer
from authentication.api.serializers.response_serializers import AuthTokensResponseSerializer, ErrorResponseSerializer
from infrastructure.container import container
from marketplace.api.responses import error_response


def auth_payload(auth_result):
    return {
        "message": auth_result.message,
        "access": auth_result.access_token,
        "refresh": auth_result.refresh_token,
        "user": UserSerializer(auth_result.user).data,
    }


class SignUpAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_sign_up",
        summary="Create an account",
        request=SignUpRequestSerializer,
        responses={
            201: AuthTokensResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid or duplicate data"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        result = container.auth_service().register(
            request.data.get("username"),
            request.data.get("email"),
            request.data.get("password"),
            request.data.get("passwordConfirmation"),
        )
        if not result.ok:
            return error_response(result)
        return Response(auth_payload(result.value), status=status.HTTP_201_CREATED)


class SignInAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_sign_in",
        summary="Sign in with username or email",
        request=SignInRequestSerializer,
        responses={
            200: AuthTokensResponseSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid credentials"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        identifier = request.data.get("identifier") or request.data.get("username") or request.data.get("email")
        result = container.auth_service().login(identifier, request.data.get("password"))
        if not result.ok:
            return error_response(result)
        return Response(auth_payload(result.value), status=status.HTTP_200_OK)
