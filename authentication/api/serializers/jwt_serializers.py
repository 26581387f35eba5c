from rest_framework_simplejwt.tokens import RefreshToken


class CustomRefreshToken(RefreshToken):
    """Refresh token carrying the caller identity claims (copied onto the access token)."""

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token["username"] = user.username
        token["email"] = user.email
        return token
