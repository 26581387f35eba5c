from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Favorite
from marketplace.tests.factories import FavoriteFactory, ItemFactory, UserFactory


class FavoriteAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = UserFactory()
        self.item = ItemFactory()
        self.client.force_authenticate(user=self.user)

    def test_toggle_on_and_off(self):
        url = reverse("marketplace:favorite-toggle", args=[self.item.pk])

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"isFavorited": True, "message": "Item added to favorites"})
        self.item.refresh_from_db()
        self.assertEqual(self.item.favourited_by, [str(self.user.pk)])

        response = self.client.post(url)
        self.assertEqual(response.json(), {"isFavorited": False, "message": "Item removed from favorites"})
        self.item.refresh_from_db()
        self.assertEqual(self.item.favourited_by, [])
        self.assertFalse(Favorite.objects.exists())

    def test_toggle_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.post(reverse("marketplace:favorite-toggle", args=[self.item.pk]))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_add_twice_conflicts(self):
        url = reverse("marketplace:favorite-detail", args=[self.item.pk])

        self.assertEqual(self.client.post(url).status_code, status.HTTP_200_OK)
        response = self.client.post(url)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Favorite.objects.filter(user=self.user).count(), 1)

    def test_check_and_remove(self):
        FavoriteFactory(user=self.user, item=self.item)
        url = reverse("marketplace:favorite-detail", args=[self.item.pk])

        self.assertEqual(self.client.get(url).json(), {"isFavorited": True})
        response = self.client.delete(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(url).json(), {"isFavorited": False})

    def test_list_favorites(self):
        FavoriteFactory(user=self.user, item=self.item)
        ItemFactory()

        response = self.client.get(reverse("marketplace:favorite-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual([entry["id"] for entry in body], [str(self.item.pk)])
        self.assertTrue(body[0]["isFavorited"])

    def test_items_with_favorite_flags(self):
        other = ItemFactory()
        FavoriteFactory(user=self.user, item=self.item)

        response = self.client.get(reverse("marketplace:item-with-favorites"))

        flags = {entry["id"]: entry["isFavorited"] for entry in response.json()}
        self.assertEqual(flags, {str(self.item.pk): True, str(other.pk): False})
