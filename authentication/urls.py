from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .api import views

app_name = "authentication"

urlpatterns = [
    path("sign-up/", views.SignUpAPIView.as_view(), name="sign-up"),
    path("sign-in/", views.SignInAPIView.as_view(), name="sign-in"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    # Profiles
    path("users/<uuid:user_id>/manage/", views.ProfileManageView.as_view(), name="user-manage"),
    path("users/<str:username>/", views.PublicProfileDetailView.as_view(), name="user-profile"),
    # Health probes
    path("health/live/", views.health_live, name="health-live"),
    path("health/ready/", views.health_ready, name="health-ready"),
]
