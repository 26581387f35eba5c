from rest_framework import serializers

from marketplace.catalog.api.serializers import ItemSerializer

from .auth_serializers import PublicUserSerializer, UserSerializer


class ProfileSerializer(serializers.Serializer):
    """
    Serializes a ProfileResult.

    ``likedItems`` and the email address are only included when the viewer
    owns the profile.
    """

    def to_representation(self, instance):
        user_serializer = UserSerializer if instance.is_owner else PublicUserSerializer
        data = {
            "user": user_serializer(instance.user).data,
            "items": ItemSerializer(instance.items, many=True).data,
        }
        if instance.is_owner:
            data["likedItems"] = ItemSerializer(instance.liked_items or [], many=True).data
        return data
