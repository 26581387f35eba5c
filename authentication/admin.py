from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("username", "email", "location", "is_active", "date_joined")
    search_fields = ("username", "email")
    fieldsets = UserAdmin.fieldsets + (("Profile", {"fields": ("bio", "location", "profile_pic")}),)
