from django.contrib import admin

from .models import Favorite, Item, Offer, UserReview


class OfferInline(admin.TabularInline):
    model = Offer
    extra = 0
    fields = ("buyer", "amount", "status", "created_at", "decided_at")
    readonly_fields = ("created_at", "decided_at")


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "price", "seller", "offer_count", "created_at")
    list_filter = ("type", "created_at")
    search_fields = ("title", "description", "seller__username")
    readonly_fields = ("id", "favourited_by", "created_at", "updated_at")

    inlines = [OfferInline]

    fieldsets = (
        ("Basic Information", {"fields": ("id", "title", "type", "description", "location", "images")}),
        ("Seller & Pricing", {"fields": ("seller", "price")}),
        ("Favorites", {"fields": ("favourited_by",), "classes": ("collapse",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("seller")

    def offer_count(self, obj):
        return obj.offers.count()

    offer_count.short_description = "Offers"


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ("id", "item", "buyer", "amount", "status", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("item__title", "buyer__username")
    readonly_fields = ("created_at", "decided_at")


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("user", "item", "created_at")
    list_filter = ("created_at",)
    search_fields = ("user__username", "item__title")
    readonly_fields = ("created_at",)


@admin.register(UserReview)
class UserReviewAdmin(admin.ModelAdmin):
    list_display = ("target", "rater", "rating", "created_at")
    list_filter = ("rating", "created_at")
    search_fields = ("target__username", "rater__username", "description")
    readonly_fields = ("created_at", "updated_at")
