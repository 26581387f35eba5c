from django.urls import path

from .api.views import payment_views

app_name = "payment_system"

urlpatterns = [
    path("purchase-intent/", payment_views.purchase_intent, name="purchase-intent"),
]
