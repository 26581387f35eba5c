from rest_framework import serializers

from marketplace.catalog.domain.models import UserReview

from .user_serializers import UserRefField


class ReviewSerializer(serializers.ModelSerializer):
    rater = UserRefField()
    target = UserRefField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = UserReview
        fields = ["id", "rater", "target", "rating", "description", "createdAt", "updatedAt"]
        read_only_fields = fields


class ReviewInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    description = serializers.CharField(required=False, allow_blank=True)


class RatingSerializer(serializers.Serializer):
    average = serializers.FloatField()
    count = serializers.IntegerField()
