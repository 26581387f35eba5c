"""
Persistence handle
==================

Explicit handle on the persistence collaborator. Services receive a Store at
construction and route every query and transaction through it instead of
reaching for Django's default connection implicitly.

Usage:
    store = Store(alias="default")
    store.open()                      # process start: fail fast if the DB is unreachable

    with store.atomic():
        item = store.manager(Item).select_for_update().get(pk=item_id)
        ...

    store.close()                     # shutdown
"""

import logging

from django.db import connections, transaction

logger = logging.getLogger(__name__)


class StoreUnavailable(Exception):
    """Raised when the store cannot be opened."""

    pass


class Store:
    """
    Handle bound to one Django database alias.

    The handle carries no connection state of its own: Django keeps one
    connection per thread per alias. ``open``/``close`` give the process an
    explicit lifecycle around that pool.
    """

    def __init__(self, alias: str = "default"):
        self.alias = alias
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> "Store":
        """Verify connectivity for the current thread's connection."""
        try:
            connections[self.alias].ensure_connection()
        except Exception as e:
            logger.error(f"Store '{self.alias}' could not be opened: {e}")
            raise StoreUnavailable(f"Database '{self.alias}' is unavailable") from e
        self._opened = True
        logger.info(f"Store '{self.alias}' opened")
        return self

    def close(self) -> None:
        connections[self.alias].close()
        if self._opened:
            logger.info(f"Store '{self.alias}' closed")
        self._opened = False

    def ping(self) -> bool:
        """Readiness check: True if a trivial query succeeds."""
        try:
            with connections[self.alias].cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
            return True
        except Exception as e:
            logger.error(f"Store '{self.alias}' health check failed: {e}")
            return False

    def atomic(self, savepoint: bool = True):
        """Transaction on this store's alias (usable as context manager or decorator)."""
        return transaction.atomic(using=self.alias, savepoint=savepoint)

    def manager(self, model):
        """Default manager of ``model`` bound to this store's alias."""
        return model._default_manager.db_manager(self.alias)

    def __repr__(self):
        return f"Store(alias={self.alias!r}, open={self._opened})"
