import uuid

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import UserReview
from marketplace.tests.factories import UserFactory, UserReviewFactory


class ReviewAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.rater = UserFactory(username="rater")
        self.target = UserFactory(username="target")

    def test_create_review(self):
        self.client.force_authenticate(user=self.rater)

        response = self.client.post(
            reverse("marketplace:review-list", args=[self.target.pk]),
            {"rating": 5, "description": "Smooth trade"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual(body["rating"], 5)
        self.assertEqual(body["rater"]["username"], "rater")
        self.assertEqual(body["target"]["username"], "target")

    def test_duplicate_review_conflicts(self):
        UserReviewFactory(rater=self.rater, target=self.target)
        self.client.force_authenticate(user=self.rater)

        response = self.client.post(
            reverse("marketplace:review-list", args=[self.target.pk]), {"rating": 3}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_invalid_rating(self):
        self.client.force_authenticate(user=self.rater)

        response = self.client.post(
            reverse("marketplace:review-list", args=[self.target.pk]), {"rating": 7}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(UserReview.objects.exists())

    def test_rating_endpoint(self):
        UserReviewFactory(target=self.target, rating=3)
        UserReviewFactory(target=self.target, rating=4)

        response = self.client.get(reverse("marketplace:user-rating", args=[self.target.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"average": 3.5, "count": 2})

    def test_rating_unknown_user(self):
        response = self.client.get(reverse("marketplace:user-rating", args=[uuid.uuid4()]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_reviews_shows_deleted_rater(self):
        review = UserReviewFactory(rater=self.rater, target=self.target)
        self.rater.delete()

        response = self.client.get(reverse("marketplace:review-list", args=[self.target.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body[0]["id"], review.pk)
        self.assertEqual(body[0]["rater"], {"id": None, "username": "[deleted]"})

    def test_rater_updates_review(self):
        review = UserReviewFactory(rater=self.rater, target=self.target, rating=2)
        self.client.force_authenticate(user=self.rater)

        response = self.client.patch(
            reverse("marketplace:review-detail", args=[self.target.pk, review.pk]), {"rating": 4}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["rating"], 4)

    def test_target_cannot_delete_review(self):
        review = UserReviewFactory(rater=self.rater, target=self.target)
        self.client.force_authenticate(user=self.target)

        response = self.client.delete(reverse("marketplace:review-detail", args=[self.target.pk, review.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(UserReview.objects.filter(pk=review.pk).exists())

    def test_rater_deletes_review(self):
        review = UserReviewFactory(rater=self.rater, target=self.target)
        self.client.force_authenticate(user=self.rater)

        response = self.client.delete(reverse("marketplace:review-detail", args=[self.target.pk, review.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(UserReview.objects.exists())
