import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


ITEM_TYPE_CHOICES = [
    ("handbag", "handbag"),
    ("shoes", "shoes"),
    ("dress", "dress"),
    ("jacket", "jacket"),
    ("trousers", "trousers"),
    ("pants", "pants"),
    ("watch", "watch"),
    ("jewelry", "jewelry"),
    ("coat", "coat"),
    ("skirt", "skirt"),
    ("suit", "suit"),
    ("shirt", "shirt"),
    ("blouse", "blouse"),
    ("sweater", "sweater"),
    ("jumper", "jumper"),
    ("scarf", "scarf"),
    ("belt", "belt"),
    ("sunglasses", "sunglasses"),
    ("wallet", "wallet"),
    ("purse", "purse"),
    ("clutch", "clutch"),
    ("smart watch", "smart watch"),
    ("smart glasses", "smart glasses"),
    ("fitness tracker", "fitness tracker"),
    ("smart ring", "smart ring"),
    ("wireless earbuds", "wireless earbuds"),
    ("noise-canceling headphones", "noise-canceling headphones"),
    ("smartphone", "smartphone"),
    ("tablet", "tablet"),
    ("laptop", "laptop"),
    ("smart speaker", "smart speaker"),
    ("VR headset", "VR headset"),
    ("candle", "candle"),
    ("fragrance", "fragrance"),
    ("vase", "vase"),
    ("side table", "side table"),
    ("candle holder", "candle holder"),
    ("tray", "tray"),
    ("lamp", "lamp"),
    ("trunk", "trunk"),
    ("towel", "towel"),
    ("bathrobe", "bathrobe"),
    ("rug", "rug"),
    ("soft furnishing", "soft furnishing"),
    ("coffee table", "coffee table"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("type", models.CharField(choices=ITEM_TYPE_CHOICES, max_length=64)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("images", models.JSONField(blank=True, default=list, help_text="Ordered list of image URIs")),
                (
                    "favourited_by",
                    models.JSONField(blank=True, default=list, help_text="User ids (str) who favorited this item"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "seller",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="items",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["seller", "-created_at"], name="item_seller_created_idx"),
                    models.Index(fields=["-created_at"], name="item_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Offer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(10)],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("accepted", "Accepted"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("decided_at", models.DateTimeField(blank=True, null=True)),
                (
                    "buyer",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="offers_made",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="offers",
                        to="marketplace.item",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["buyer", "-created_at"], name="offer_buyer_created_idx"),
                    models.Index(fields=["item", "status"], name="offer_item_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Favorite",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="favorite_records",
                        to="marketplace.item",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="favorites",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="favorite_user_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "item"), name="unique_favorite_per_user_item"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserReview",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ]
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "rater",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviews_given",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "target",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviews_received",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["target", "-created_at"], name="review_target_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("rater", "target"), name="unique_review_per_rater_target"),
                ],
            },
        ),
    ]
