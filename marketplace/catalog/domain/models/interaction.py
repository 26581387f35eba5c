from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .catalog import Item


class Favorite(models.Model):
    """System of record for "user favorited item"; ``Item.favourited_by`` mirrors it."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorites")
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name="favorite_records")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(fields=["user", "item"], name="unique_favorite_per_user_item"),
        ]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="favorite_user_created_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.item_id}"


class UserReview(models.Model):
    rater = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="reviews_given"
    )
    target = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="reviews_received"
    )
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(fields=["rater", "target"], name="unique_review_per_rater_target"),
        ]
        indexes = [
            models.Index(fields=["target", "-created_at"], name="review_target_created_idx"),
        ]

    def __str__(self):
        return f"Review by {self.rater_id} for {self.target_id}: {self.rating}/5"
