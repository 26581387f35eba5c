from rest_framework import serializers

from authentication.domain.models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    """The signed-in user's own view of their account."""

    profilePic = serializers.URLField(source="profile_pic", read_only=True)
    dateJoined = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = CustomUser
        fields = ("id", "username", "email", "bio", "location", "profilePic", "dateJoined")
        read_only_fields = fields


class PublicUserSerializer(UserSerializer):
    """What anyone may see about a user."""

    class Meta(UserSerializer.Meta):
        fields = ("id", "username", "bio", "location", "profilePic", "dateJoined")
        read_only_fields = fields


# Request bodies (documentation only; AuthService validates)


class SignUpRequestSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    passwordConfirmation = serializers.CharField(write_only=True, style={"input_type": "password"})


class SignInRequestSerializer(serializers.Serializer):
    identifier = serializers.CharField(help_text="Username or email address")
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class ProfileUpdateRequestSerializer(serializers.Serializer):
    username = serializers.CharField(required=False)
    email = serializers.EmailField(required=False)
    bio = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True)
    profilePic = serializers.URLField(required=False)
