from rest_framework import serializers


class PurchaseIntentRequestSerializer(serializers.Serializer):
    amount = serializers.IntegerField(help_text="Cart total in minor units (cents), as computed by the client")
    cartItems = serializers.ListField(
        help_text="Item ids, or item objects carrying an id, in the cart",
    )
    currency = serializers.CharField(required=False, default="eur", help_text="ISO currency code")
