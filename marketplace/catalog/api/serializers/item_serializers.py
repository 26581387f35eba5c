from rest_framework import serializers

from marketplace.catalog.domain.models import ITEM_TYPES, MIN_ITEM_PRICE, MIN_OFFER_AMOUNT, Item, Offer

from .user_serializers import UserRefField


class OfferSerializer(serializers.ModelSerializer):
    buyer = UserRefField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Offer
        fields = ["id", "buyer", "amount", "status", "createdAt"]
        read_only_fields = fields


class OfferDecisionSerializer(OfferSerializer):
    """Offer as returned after submission or a decision."""

    itemId = serializers.UUIDField(source="item_id", read_only=True)
    decidedAt = serializers.DateTimeField(source="decided_at", read_only=True, allow_null=True)

    class Meta(OfferSerializer.Meta):
        fields = ["id", "itemId", "buyer", "amount", "status", "createdAt", "decidedAt"]
        read_only_fields = fields


class ItemSerializer(serializers.ModelSerializer):
    """
    Public item shape.

    ``isFavorited`` is only present when the service flagged the item for the
    requesting user (favorites listing, catalog-with-flags listing).
    """

    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    seller = UserRefField()
    offers = OfferSerializer(many=True, read_only=True)
    favouritedBy = serializers.ListField(source="favourited_by", child=serializers.CharField(), read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Item
        fields = [
            "id",
            "title",
            "type",
            "price",
            "description",
            "location",
            "images",
            "seller",
            "offers",
            "favouritedBy",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if hasattr(instance, "is_favorited"):
            data["isFavorited"] = bool(instance.is_favorited)
        return data


class ItemSummarySerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    seller = UserRefField()

    class Meta:
        model = Item
        fields = ["id", "title", "price", "images", "seller"]
        read_only_fields = fields


class BuyerOfferSerializer(serializers.ModelSerializer):
    """An offer seen from the buyer's side, with the item it targets."""

    amount = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    item = ItemSummarySerializer(read_only=True)

    class Meta:
        model = Offer
        fields = ["id", "amount", "status", "createdAt", "item"]
        read_only_fields = fields


# Request bodies below are documentation only; field validation lives in the services.


class ItemInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    type = serializers.ChoiceField(choices=ITEM_TYPES)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_ITEM_PRICE)
    description = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True)
    images = serializers.ListField(child=serializers.CharField(), required=False)


class OfferInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_OFFER_AMOUNT)


class FavoriteStatusSerializer(serializers.Serializer):
    isFavorited = serializers.BooleanField()
    message = serializers.CharField(required=False)
