"""
Response Serializers for API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

from marketplace.catalog.api.serializers import ItemSerializer

from .auth_serializers import UserSerializer


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    message = serializers.CharField(help_text="Human-readable error message")


class AuthTokensResponseSerializer(serializers.Serializer):
    """Response for sign-up, sign-in and profile update"""

    message = serializers.CharField(help_text="Success message")
    access = serializers.CharField(help_text="JWT access token")
    refresh = serializers.CharField(help_text="JWT refresh token")
    user = UserSerializer(help_text="User details")


class ProfileResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    items = ItemSerializer(many=True)
    likedItems = ItemSerializer(many=True, required=False, help_text="Only present for the profile owner")


class HealthResponseSerializer(serializers.Serializer):
    status = serializers.CharField()
    checks = serializers.DictField(child=serializers.BooleanField(), required=False)
