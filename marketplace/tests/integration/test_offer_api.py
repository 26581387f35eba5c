import uuid

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Offer
from marketplace.tests.factories import ItemFactory, OfferFactory, UserFactory


class OfferAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = UserFactory()
        self.buyer = UserFactory()
        self.item = ItemFactory(seller=self.seller)

    def _decide_url(self, offer_id, decision):
        return reverse("marketplace:offer-decide", args=[self.item.pk, offer_id, decision])

    def test_submit_offer(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("marketplace:offer-create", args=[self.item.pk]), {"amount": 75}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual(body["message"], "Offer submitted successfully")
        self.assertEqual(body["offer"]["status"], "pending")
        self.assertEqual(body["offer"]["amount"], 75.0)
        self.assertEqual(body["offer"]["itemId"], str(self.item.pk))
        self.assertEqual(body["offer"]["buyer"]["id"], str(self.buyer.pk))

    def test_submit_offer_requires_authentication(self):
        response = self.client.post(
            reverse("marketplace:offer-create", args=[self.item.pk]), {"amount": 75}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_submit_offer_below_minimum(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("marketplace:offer-create", args=[self.item.pk]), {"amount": 5}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Offer.objects.exists())

    def test_seller_cannot_offer_on_own_item(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            reverse("marketplace:offer-create", args=[self.item.pk]), {"amount": 50}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_submit_offer_missing_item(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("marketplace:offer-create", args=[uuid.uuid4()]), {"amount": 50}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_seller_accepts_offer(self):
        offer = OfferFactory(item=self.item, buyer=self.buyer)
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(self._decide_url(offer.pk, "accepted"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["message"], "Offer accepted successfully")
        self.assertEqual(response.json()["offer"]["status"], "accepted")
        self.assertIsNotNone(response.json()["offer"]["decidedAt"])

    def test_buyer_cannot_decide(self):
        offer = OfferFactory(item=self.item, buyer=self.buyer)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(self._decide_url(offer.pk, "accepted"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_decided_offer_returns_conflict(self):
        offer = OfferFactory(item=self.item, buyer=self.buyer, status=Offer.STATUS_REJECTED)
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(self._decide_url(offer.pk, "accepted"))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["error"], "invalid_state")
        offer.refresh_from_db()
        self.assertEqual(offer.status, Offer.STATUS_REJECTED)

    def test_unknown_decision(self):
        offer = OfferFactory(item=self.item, buyer=self.buyer)
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(self._decide_url(offer.pk, "pending"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_offers_by_buyer(self):
        offer = OfferFactory(item=self.item, buyer=self.buyer)
        OfferFactory(item=self.item)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(reverse("marketplace:offer-by-buyer", args=[self.buyer.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual([entry["id"] for entry in body], [offer.pk])
        self.assertEqual(body[0]["item"]["id"], str(self.item.pk))
