"""
Response envelopes used only for API documentation (drf-spectacular).
"""

from rest_framework import serializers

from marketplace.catalog.api.serializers import OfferDecisionSerializer


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    message = serializers.CharField(help_text="Human-readable error message")


class AmountMismatchResponseSerializer(ErrorResponseSerializer):
    expected = serializers.IntegerField(help_text="Server-computed total in minor units")
    received = serializers.IntegerField(help_text="Amount sent by the client in minor units")


class OfferResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    offer = OfferDecisionSerializer()

