"""
Concurrent writes on one item.

Each call runs in its own thread and database connection, so the row lock
and lock-conflict retry path are exercised for real. Scheduling decides who
wins; the assertions only check what must hold for every interleaving.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection
from django.test import TransactionTestCase

from infrastructure.store import Store
from marketplace.catalog.domain.services.favorite_service import FavoriteService
from marketplace.catalog.domain.services.offer_service import OfferService
from marketplace.models import Favorite, Offer
from marketplace.tests.factories import ItemFactory, OfferFactory, UserFactory
from utils.service_base import ErrorCodes


def run_together(*calls):
    """Start every call at the same moment and return results in call order."""
    barrier = threading.Barrier(len(calls))

    def worker(call):
        try:
            barrier.wait(timeout=5)
            return call()
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(worker, call) for call in calls]
        return [future.result(timeout=30) for future in futures]


@pytest.mark.unit
class ConcurrentFavoriteTest(TransactionTestCase):
    def setUp(self):
        self.service = FavoriteService(store=Store())
        self.item = ItemFactory()

    def assert_consistent(self):
        self.item.refresh_from_db()
        records = {str(pk) for pk in Favorite.objects.filter(item=self.item).values_list("user_id", flat=True)}
        self.assertEqual(len(self.item.favourited_by), len(set(self.item.favourited_by)))
        self.assertEqual(set(self.item.favourited_by), records)

    def test_racing_toggles_from_two_users(self):
        first, second = UserFactory.create_batch(2)

        results = run_together(
            lambda: self.service.toggle_favorite(first, self.item.pk),
            lambda: self.service.toggle_favorite(second, self.item.pk),
        )

        for result in results:
            if result.ok:
                self.assertEqual(result.value, {"isFavorited": True})
            else:
                self.assertEqual(result.error, ErrorCodes.CONFLICT)
        self.assertEqual(Favorite.objects.filter(item=self.item).count(), sum(result.ok for result in results))
        self.assert_consistent()

    def test_racing_toggles_on_the_same_pair(self):
        user = UserFactory()

        results = run_together(
            lambda: self.service.toggle_favorite(user, self.item.pk),
            lambda: self.service.toggle_favorite(user, self.item.pk),
        )

        succeeded = [result for result in results if result.ok]
        for result in results:
            if not result.ok:
                self.assertEqual(result.error, ErrorCodes.CONFLICT)
        # Each successful toggle flips membership once
        expected = len(succeeded) % 2 == 1
        self.assertEqual(Favorite.objects.filter(user=user, item=self.item).exists(), expected)
        self.assert_consistent()


@pytest.mark.unit
class ConcurrentDecisionTest(TransactionTestCase):
    def setUp(self):
        self.service = OfferService(store=Store())
        self.item = ItemFactory()
        self.offer = OfferFactory(item=self.item)

    def test_racing_decisions_on_one_offer(self):
        seller = self.item.seller

        results = run_together(
            lambda: self.service.decide_offer(self.item.pk, self.offer.pk, seller, "accepted"),
            lambda: self.service.decide_offer(self.item.pk, self.offer.pk, seller, "rejected"),
        )

        winners = [decision for decision, result in zip(["accepted", "rejected"], results) if result.ok]
        self.assertLessEqual(len(winners), 1)
        for result in results:
            if not result.ok:
                self.assertIn(result.error, (ErrorCodes.INVALID_STATE, ErrorCodes.CONFLICT))

        self.offer.refresh_from_db()
        if winners:
            self.assertEqual(self.offer.status, winners[0])
            self.assertIsNotNone(self.offer.decided_at)
        else:
            self.assertEqual(self.offer.status, Offer.STATUS_PENDING)

    def test_racing_decisions_on_competing_offers(self):
        seller = self.item.seller
        other = OfferFactory(item=self.item)

        results = run_together(
            lambda: self.service.decide_offer(self.item.pk, self.offer.pk, seller, "accepted"),
            lambda: self.service.decide_offer(self.item.pk, other.pk, seller, "accepted"),
        )

        for offer, result in zip([self.offer, other], results):
            offer.refresh_from_db()
            if result.ok:
                self.assertEqual(offer.status, Offer.STATUS_ACCEPTED)
            else:
                self.assertEqual(result.error, ErrorCodes.CONFLICT)
                self.assertEqual(offer.status, Offer.STATUS_PENDING)
