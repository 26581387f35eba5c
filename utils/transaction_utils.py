"""
Transaction utilities
=====================

Retry helpers for read-modify-write cycles that run under row locks.

Usage:
    @retry_on_lock_conflict()
    def _decide(self, ...):
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().get(pk=item_id)
            ...

The retried callable must open its own transaction: a retry re-runs the whole
atomic block, never a fragment of it.
"""

import logging
import time
from functools import wraps

from django.db import OperationalError

logger = logging.getLogger(__name__)

# Substrings identifying transient lock failures across backends
# (MySQL 1213 deadlock, PostgreSQL deadlock / lock_timeout, SQLite busy).
LOCK_CONFLICT_MARKERS = (
    "deadlock",
    "1213",
    "could not obtain lock",
    "lock timeout",
    "canceling statement due to lock timeout",
    "database is locked",
    "database table is locked",
)


class TransactionError(Exception):
    """Raised when a transaction cannot be committed after retries."""

    pass


class LockConflictError(TransactionError):
    """Raised when lock contention persists past the retry budget."""

    pass


def is_lock_conflict(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in LOCK_CONFLICT_MARKERS)


def retry_on_lock_conflict(max_retries=3, delay=0.05, backoff=2.0):
    """
    Decorator retrying an atomic operation on deadlock / lock timeout.

    Args:
        max_retries (int): Maximum number of retry attempts
        delay (float): Initial delay between retries in seconds
        backoff (float): Backoff multiplier for delay

    Non-lock OperationalErrors propagate unchanged.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except OperationalError as e:
                    if not is_lock_conflict(e):
                        raise
                    if attempt >= max_retries:
                        logger.error(f"{func.__name__}: lock conflict persisted after {max_retries} retries: {e}")
                        raise LockConflictError(f"Lock conflict in {func.__name__}: {e}") from e
                    logger.warning(
                        f"{func.__name__}: lock conflict, retrying in {current_delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(current_delay)
                    current_delay *= backoff

        return wrapper

    return decorator
