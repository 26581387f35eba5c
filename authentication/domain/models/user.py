import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models

DEFAULT_PROFILE_PIC = "https://cdn.pixabay.com/photo/2015/10/05/22/37/blank-profile-picture-973460_1280.png"


class CustomUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    bio = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    profile_pic = models.URLField(max_length=500, blank=True, default=DEFAULT_PROFILE_PIC)

    REQUIRED_FIELDS = ["email"]

    class Meta:
        app_label = "authentication"

    def __str__(self):
        return self.username
