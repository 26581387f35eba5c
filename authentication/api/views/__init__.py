from .auth_views import SignInAPIView, SignUpAPIView
from .health_views import health_live, health_ready
from .profile_views import ProfileManageView, PublicProfileDetailView

__all__ = [
    "SignUpAPIView",
    "SignInAPIView",
    "PublicProfileDetailView",
    "ProfileManageView",
    "health_live",
    "health_ready",
]
