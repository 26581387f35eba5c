import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

ITEM_TYPES = [
    # Fashion
    "handbag",
    "shoes",
    "dress",
    "jacket",
    "trousers",
    "pants",
    "watch",
    "jewelry",
    "coat",
    "skirt",
    "suit",
    "shirt",
    "blouse",
    "sweater",
    "jumper",
    "scarf",
    "belt",
    "sunglasses",
    "wallet",
    "purse",
    "clutch",
    # Tech
    "smart watch",
    "smart glasses",
    "fitness tracker",
    "smart ring",
    "wireless earbuds",
    "noise-canceling headphones",
    "smartphone",
    "tablet",
    "laptop",
    "smart speaker",
    "VR headset",
    # Home
    "candle",
    "fragrance",
    "vase",
    "side table",
    "candle holder",
    "tray",
    "lamp",
    "trunk",
    "towel",
    "bathrobe",
    "rug",
    "soft furnishing",
    "coffee table",
]

MIN_ITEM_PRICE = 1
MIN_OFFER_AMOUNT = 10


class Item(models.Model):
    TYPE_CHOICES = [(value, value) for value in ITEM_TYPES]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    type = models.CharField(max_length=64, choices=TYPE_CHOICES)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(MIN_ITEM_PRICE)])
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    images = models.JSONField(default=list, blank=True, help_text="Ordered list of image URIs")

    # Null only once the seller's account has been deleted
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="items")

    # Cache of Favorite records; written only by FavoriteService
    favourited_by = models.JSONField(default=list, blank=True, help_text="User ids (str) who favorited this item")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["seller", "-created_at"], name="item_seller_created_idx"),
            models.Index(fields=["-created_at"], name="item_created_idx"),
        ]

    def offer_index(self):
        """Offers keyed by id. ``offers.all()`` keeps insertion order for display."""
        return {offer.id: offer for offer in self.offers.all()}

    def __str__(self):
        return self.title


class Offer(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
    ]
    DECISIONS = (STATUS_ACCEPTED, STATUS_REJECTED)

    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name="offers")
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="offers_made"
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(MIN_OFFER_AMOUNT)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(default=timezone.now)
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["buyer", "-created_at"], name="offer_buyer_created_idx"),
            models.Index(fields=["item", "status"], name="offer_item_status_idx"),
        ]

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    def __str__(self):
        return f"Offer {self.id} on {self.item_id}: {self.amount} ({self.status})"
