from .auth_serializers import (
    ProfileUpdateRequestSerializer,
    PublicUserSerializer,
    SignInRequestSerializer,
    SignUpRequestSerializer,
    UserSerializer,
)
from .jwt_serializers import CustomRefreshToken
from .profile_serializers import ProfileSerializer

__all__ = [
    "CustomRefreshToken",
    "ProfileSerializer",
    "ProfileUpdateRequestSerializer",
    "PublicUserSerializer",
    "SignInRequestSerializer",
    "SignUpRequestSerializer",
    "UserSerializer",
]
