import uuid
from unittest.mock import patch

import pytest

from infrastructure.store import Store
from marketplace.catalog.domain.services.favorite_service import FavoriteService, _merge_cache
from marketplace.models import Favorite, Item
from marketplace.tests.factories import FavoriteFactory, ItemFactory, UserFactory
from utils.service_base import ErrorCodes


@pytest.fixture
def favorite_service():
    return FavoriteService(store=Store())


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def item(db):
    return ItemFactory()


def cache_of(item):
    item.refresh_from_db()
    return item.favourited_by


def assert_consistent(item):
    """Record set and cache agree, with no duplicate cache entries."""
    cache = cache_of(item)
    records = {str(user_id) for user_id in Favorite.objects.filter(item=item).values_list("user_id", flat=True)}
    assert len(cache) == len(set(cache))
    assert set(cache) == records


@pytest.mark.unit
class TestMergeCache:
    def test_adds_missing_entry(self):
        assert _merge_cache(["a"], "b", True) == ["a", "b"]

    def test_collapses_duplicates(self):
        assert _merge_cache(["b", "a", "b"], "b", True) == ["b", "a"]

    def test_removes_every_copy(self):
        assert _merge_cache(["b", "a", "b"], "b", False) == ["a"]


@pytest.mark.unit
@pytest.mark.django_db
class TestToggleFavorite:
    def test_toggle_on_writes_record_and_cache(self, favorite_service, user, item):
        result = favorite_service.toggle_favorite(user, item.pk)

        assert result.ok is True
        assert result.value == {"isFavorited": True}
        assert Favorite.objects.filter(user=user, item=item).exists()
        assert cache_of(item) == [str(user.pk)]

    def test_toggle_twice_removes_both(self, favorite_service, user, item):
        favorite_service.toggle_favorite(user, item.pk)
        result = favorite_service.toggle_favorite(user, item.pk)

        assert result.value == {"isFavorited": False}
        assert not Favorite.objects.filter(user=user, item=item).exists()
        assert cache_of(item) == []

    def test_toggle_keeps_other_users(self, favorite_service, user, item):
        other = UserFactory()
        favorite_service.toggle_favorite(other, item.pk)
        favorite_service.toggle_favorite(user, item.pk)
        favorite_service.toggle_favorite(user, item.pk)

        assert cache_of(item) == [str(other.pk)]
        assert_consistent(item)

    def test_toggle_missing_item(self, favorite_service, user):
        assert favorite_service.toggle_favorite(user, uuid.uuid4()).error == ErrorCodes.NOT_FOUND
        assert favorite_service.toggle_favorite(user, "bogus").error == ErrorCodes.NOT_FOUND

    def test_toggle_repairs_stale_cache_entry(self, favorite_service, user, item):
        # Cache claims membership, no record exists
        Item.objects.filter(pk=item.pk).update(favourited_by=[str(user.pk)])

        result = favorite_service.toggle_favorite(user, item.pk)

        assert result.value == {"isFavorited": True}
        assert cache_of(item) == [str(user.pk)]
        assert_consistent(item)

    def test_toggle_repairs_duplicate_cache_entries(self, favorite_service, user, item):
        FavoriteFactory(user=user, item=item)
        Item.objects.filter(pk=item.pk).update(favourited_by=[str(user.pk), str(user.pk)])

        result = favorite_service.toggle_favorite(user, item.pk)

        assert result.value == {"isFavorited": False}
        assert cache_of(item) == []

    def test_failed_cache_write_rolls_back_record(self, favorite_service, user, item):
        with patch.object(Item, "save", side_effect=RuntimeError("disk full")):
            result = favorite_service.toggle_favorite(user, item.pk)

        assert result.ok is False
        assert result.error == ErrorCodes.INTERNAL_ERROR
        assert not Favorite.objects.filter(user=user, item=item).exists()
        assert cache_of(item) == []


@pytest.mark.unit
@pytest.mark.django_db
class TestAddRemoveFavorite:
    def test_add_then_add_again_conflicts(self, favorite_service, user, item):
        assert favorite_service.add_favorite(user, item.pk).value == {"isFavorited": True}

        result = favorite_service.add_favorite(user, item.pk)

        assert result.error == ErrorCodes.CONFLICT
        assert Favorite.objects.filter(user=user, item=item).count() == 1
        assert cache_of(item) == [str(user.pk)]

    def test_remove_when_absent_is_noop(self, favorite_service, user, item):
        result = favorite_service.remove_favorite(user, item.pk)

        assert result.ok is True
        assert result.value == {"isFavorited": False}
        assert cache_of(item) == []

    def test_remove_existing(self, favorite_service, user, item):
        favorite_service.add_favorite(user, item.pk)

        result = favorite_service.remove_favorite(user, item.pk)

        assert result.value == {"isFavorited": False}
        assert_consistent(item)

    def test_clear_user_favorites(self, favorite_service, user):
        items = ItemFactory.create_batch(3)
        other = UserFactory()
        for target in items:
            favorite_service.add_favorite(user, target.pk)
        favorite_service.add_favorite(other, items[0].pk)

        result = favorite_service.clear_user_favorites(user)

        assert result.value == 3
        assert not Favorite.objects.filter(user=user).exists()
        assert cache_of(items[0]) == [str(other.pk)]
        for target in items:
            assert_consistent(target)


@pytest.mark.unit
@pytest.mark.django_db
class TestFavoriteQueries:
    def test_is_favorited_reads_records_not_cache(self, favorite_service, user, item):
        Item.objects.filter(pk=item.pk).update(favourited_by=[str(user.pk)])

        assert favorite_service.is_favorited(user, item.pk).value == {"isFavorited": False}

        FavoriteFactory(user=user, item=item)
        assert favorite_service.is_favorited(user, item.pk).value == {"isFavorited": True}

    def test_is_favorited_missing_item(self, favorite_service, user):
        assert favorite_service.is_favorited(user, uuid.uuid4()).error == ErrorCodes.NOT_FOUND

    def test_list_favorites_most_recent_first(self, favorite_service, user):
        first, second = ItemFactory.create_batch(2)
        favorite_service.add_favorite(user, first.pk)
        favorite_service.add_favorite(user, second.pk)
        ItemFactory()

        result = favorite_service.list_favorites_for_user(user)

        assert [found.pk for found in result.value] == [second.pk, first.pk]
        assert all(found.is_favorited for found in result.value)

    def test_list_favorites_ignores_drifted_cache(self, favorite_service, user, item):
        Item.objects.filter(pk=item.pk).update(favourited_by=[str(user.pk)])

        assert favorite_service.list_favorites_for_user(user).value == []

    def test_items_with_flag(self, favorite_service, user):
        liked, other = ItemFactory.create_batch(2)
        FavoriteFactory(user=user, item=liked)

        result = favorite_service.list_items_with_favorite_flag(user)

        flags = {found.pk: found.is_favorited for found in result.value}
        assert flags == {liked.pk: True, other.pk: False}
        # The flag is never stored on the item
        assert not hasattr(Item.objects.get(pk=liked.pk), "is_favorited")


@pytest.mark.unit
@pytest.mark.django_db
class TestRebuildFavouriteCache:
    def test_rebuild_all(self, favorite_service, user):
        clean, drifted = ItemFactory.create_batch(2)
        FavoriteFactory(user=user, item=clean)
        Item.objects.filter(pk=clean.pk).update(favourited_by=[str(user.pk)])
        FavoriteFactory(user=user, item=drifted)
        Item.objects.filter(pk=drifted.pk).update(favourited_by=["ghost", "ghost"])

        result = favorite_service.rebuild_favourite_cache()

        assert result.value == {"items_checked": 2, "items_repaired": 1}
        assert cache_of(drifted) == [str(user.pk)]
        assert cache_of(clean) == [str(user.pk)]

    def test_rebuild_single_item(self, favorite_service, user, item):
        FavoriteFactory(user=user, item=item)

        result = favorite_service.rebuild_favourite_cache(item.pk)

        assert result.value == {"items_checked": 1, "items_repaired": 1}
        assert_consistent(item)

    def test_rebuild_missing_item(self, favorite_service):
        assert favorite_service.rebuild_favourite_cache(uuid.uuid4()).error == ErrorCodes.NOT_FOUND


@pytest.mark.unit
@pytest.mark.django_db
class TestMixedFavoriteSequence:
    def test_record_and_cache_agree_after_every_step(self, favorite_service, item):
        users = UserFactory.create_batch(3)
        steps = [
            (0, "toggle"),
            (1, "add"),
            (0, "add"),
            (2, "remove"),
            (1, "toggle"),
            (2, "toggle"),
            (0, "remove"),
            (2, "add"),
            (1, "remove"),
            (0, "toggle"),
            (2, "toggle"),
            (1, "add"),
        ]
        operations = {
            "toggle": favorite_service.toggle_favorite,
            "add": favorite_service.add_favorite,
            "remove": favorite_service.remove_favorite,
        }
        expected = set()

        for index, op in steps:
            user = users[index]
            result = operations[op](user, item.pk)

            if op == "add" and user.pk in expected:
                assert result.error == ErrorCodes.CONFLICT
            else:
                assert result.ok is True
                if op == "remove" or (op == "toggle" and user.pk in expected):
                    expected.discard(user.pk)
                else:
                    expected.add(user.pk)
                assert result.value == {"isFavorited": user.pk in expected}

            assert_consistent(item)
            assert set(cache_of(item)) == {str(pk) for pk in expected}
