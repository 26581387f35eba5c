from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

DELETED_USER = {"id": None, "username": "[deleted]"}


def user_ref(user):
    """``{id, username}`` for display; a placeholder once the account is gone."""
    if user is None:
        return dict(DELETED_USER)
    return {"id": str(user.pk), "username": user.username}


class UserRefSerializer(serializers.Serializer):
    """Schema for UserRefField."""

    id = serializers.UUIDField(allow_null=True)
    username = serializers.CharField()


@extend_schema_field(UserRefSerializer)
class UserRefField(serializers.Field):
    """Read-only ``{id, username}`` rendering of a user foreign key."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def get_attribute(self, instance):
        # Returning None from the default lookup would skip to_representation
        return getattr(instance, self.source, None) or DELETED_USER

    def to_representation(self, value):
        if value is DELETED_USER:
            return dict(DELETED_USER)
        return user_ref(value)
