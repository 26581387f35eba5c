from unittest.mock import MagicMock, patch

import pytest

from infrastructure.store import Store, StoreUnavailable
from marketplace.models import Item
from marketplace.tests.factories import ItemFactory


@pytest.mark.django_db
class TestStore:
    def test_open_and_ping(self):
        store = Store()

        assert store.open() is store
        assert store.is_open is True
        assert store.ping() is True

    def test_manager_is_bound_to_alias(self):
        item = ItemFactory()
        store = Store(alias="default")

        assert store.manager(Item).filter(pk=item.pk).exists()
        assert store.manager(Item).db == "default"

    def test_atomic_rolls_back_on_error(self):
        store = Store()
        item = ItemFactory(title="Before")

        with pytest.raises(RuntimeError):
            with store.atomic():
                store.manager(Item).filter(pk=item.pk).update(title="After")
                raise RuntimeError("boom")

        item.refresh_from_db()
        assert item.title == "Before"


class TestStoreLifecycle:
    @patch("infrastructure.store.connections")
    def test_open_failure_raises_store_unavailable(self, mock_connections):
        mock_connections.__getitem__.return_value.ensure_connection.side_effect = Exception("refused")
        store = Store()

        with pytest.raises(StoreUnavailable):
            store.open()
        assert store.is_open is False

    @patch("infrastructure.store.connections")
    def test_close_closes_connection(self, mock_connections):
        connection = MagicMock()
        mock_connections.__getitem__.return_value = connection
        store = Store().open()

        store.close()

        connection.close.assert_called_once()
        assert store.is_open is False

    @patch("infrastructure.store.connections")
    def test_ping_reports_failure(self, mock_connections):
        mock_connections.__getitem__.return_value.cursor.side_effect = Exception("gone")

        assert Store().ping() is False
