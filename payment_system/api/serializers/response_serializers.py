from rest_framework import serializers


class PurchaseIntentResponseSerializer(serializers.Serializer):
    clientSecret = serializers.CharField(help_text="Secret the client uses to confirm the payment")
    paymentIntentId = serializers.CharField(help_text="Provider id of the payment intent")
