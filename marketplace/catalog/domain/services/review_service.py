"""
ReviewService - user-to-user reviews

One review per (rater, target) pair, enforced by a unique constraint as well
as a pre-check; a concurrent duplicate that slips past the pre-check trips
the constraint and is reported as CONFLICT. Only the rater may update or
delete a review.
"""

from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import Avg, Count

from marketplace.catalog.domain.models import UserReview
from marketplace.infra.observability import metrics
from utils.ownership import require_owner
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .queries import parse_int, parse_uuid

User = get_user_model()

MIN_RATING = 1
MAX_RATING = 5
RATING_ERROR = f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}"


def _clean_rating(value: Any) -> Optional[int]:
    rating = parse_int(value)
    if rating is None or not (MIN_RATING <= rating <= MAX_RATING):
        return None
    return rating


def _clean_description(value: Any) -> Optional[str]:
    if value is None:
        return ""
    if not isinstance(value, str):
        return None
    return value.strip()


class ReviewService(BaseService):
    """
    Service for managing user reviews.

    Responsibilities:
    - Create review (one per rater/target pair, never about oneself)
    - Average rating and review listing for a user
    - Update / delete review (rater only)
    """

    def __init__(self, store):
        super().__init__()
        self.store = store

    def _reviews(self):
        return self.store.manager(UserReview)

    def _target_exists(self, pk) -> bool:
        return self.store.manager(User).filter(pk=pk).exists()

    @BaseService.log_performance
    def create_review(self, rater, target_user_id, rating, description: str = "") -> ServiceResult[UserReview]:
        """
        Create a review of ``target_user_id`` by ``rater``.

        Errors: VALIDATION_ERROR (rating outside 1-5 or not an integer,
        reviewing oneself, bad description), NOT_FOUND (target absent),
        CONFLICT (already reviewed).
        """
        clean_rating = _clean_rating(rating)
        if clean_rating is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, RATING_ERROR)

        clean_description = _clean_description(description)
        if clean_description is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Description must be text")

        target_pk = parse_uuid(target_user_id)
        if target_pk is None:
            return service_err(ErrorCodes.NOT_FOUND, "User not found")
        if target_pk == rater.pk:
            return service_err(ErrorCodes.VALIDATION_ERROR, "You cannot review yourself")
        if not self._target_exists(target_pk):
            return service_err(ErrorCodes.NOT_FOUND, "User not found")

        if self._reviews().filter(rater_id=rater.pk, target_id=target_pk).exists():
            return service_err(ErrorCodes.CONFLICT, "You have already reviewed this user")

        try:
            with self.store.atomic():
                review = self._reviews().create(
                    rater_id=rater.pk,
                    target_id=target_pk,
                    rating=clean_rating,
                    description=clean_description,
                )
        except IntegrityError:
            return service_err(ErrorCodes.CONFLICT, "You have already reviewed this user")
        except Exception as e:
            return self.internal_error(f"creating review for user {target_pk}", e)

        metrics.reviews_created_total.inc()
        self.logger.info(f"Review {review.pk} ({clean_rating}/5) created by {rater.pk} for {target_pk}")
        return service_ok(self._reviews().select_related("rater", "target").get(pk=review.pk))

    @BaseService.log_performance
    def average_rating(self, target_user_id) -> ServiceResult[Dict[str, Any]]:
        """``{"average", "count"}`` over all reviews of the user; ``{0, 0}`` when there are none."""
        target_pk = parse_uuid(target_user_id)
        if target_pk is None or not self._target_exists(target_pk):
            return service_err(ErrorCodes.NOT_FOUND, "User not found")

        stats = self._reviews().filter(target_id=target_pk).aggregate(average=Avg("rating"), count=Count("id"))
        if not stats["count"]:
            return service_ok({"average": 0, "count": 0})
        return service_ok({"average": round(float(stats["average"]), 2), "count": stats["count"]})

    @BaseService.log_performance
    def list_reviews(self, target_user_id) -> ServiceResult[List[UserReview]]:
        """Reviews of the user, newest first."""
        target_pk = parse_uuid(target_user_id)
        if target_pk is None or not self._target_exists(target_pk):
            return service_err(ErrorCodes.NOT_FOUND, "User not found")
        reviews = list(self._reviews().filter(target_id=target_pk).select_related("rater", "target"))
        return service_ok(reviews)

    def _get_for_rater(self, review_id, caller, target_user_id=None):
        pk = parse_int(review_id)
        if pk is None:
            return None, service_err(ErrorCodes.NOT_FOUND, "Review not found")

        queryset = self._reviews().select_for_update().filter(pk=pk)
        if target_user_id is not None:
            target_pk = parse_uuid(target_user_id)
            if target_pk is None:
                return None, service_err(ErrorCodes.NOT_FOUND, "Review not found")
            queryset = queryset.filter(target_id=target_pk)
        review = queryset.first()
        if review is None:
            return None, service_err(ErrorCodes.NOT_FOUND, "Review not found")

        denied = require_owner(review, caller, "rater", "You can only modify your own reviews")
        if denied:
            return None, denied
        return review, None

    @BaseService.log_performance
    def update_review(
        self, review_id, caller, rating=None, description=None, target_user_id=None
    ) -> ServiceResult[UserReview]:
        """Change rating and/or description. Errors: NOT_FOUND, FORBIDDEN, VALIDATION_ERROR."""
        changes = {}
        if rating is not None:
            changes["rating"] = _clean_rating(rating)
        if description is not None:
            changes["description"] = _clean_description(description)

        try:
            with self.store.atomic():
                review, error = self._get_for_rater(review_id, caller, target_user_id)
                if error:
                    return error
                if "rating" in changes and changes["rating"] is None:
                    return service_err(ErrorCodes.VALIDATION_ERROR, RATING_ERROR)
                if "description" in changes and changes["description"] is None:
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Description must be text")

                for field, value in changes.items():
                    setattr(review, field, value)
                if changes:
                    review.save(update_fields=[*changes.keys(), "updated_at"])
        except Exception as e:
            return self.internal_error(f"updating review {review_id}", e)

        return service_ok(self._reviews().select_related("rater", "target").get(pk=review.pk))

    @BaseService.log_performance
    def delete_review(self, review_id, caller, target_user_id=None) -> ServiceResult[None]:
        """Hard-delete a review written by ``caller``."""
        try:
            with self.store.atomic():
                review, error = self._get_for_rater(review_id, caller, target_user_id)
                if error:
                    return error
                review.delete()
        except Exception as e:
            return self.internal_error(f"deleting review {review_id}", e)

        self.logger.info(f"Review {review_id} deleted by {caller.pk}")
        return service_ok(None)
