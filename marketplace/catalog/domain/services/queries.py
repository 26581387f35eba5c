"""Shared lookups for the catalog services."""

import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.db.models import Prefetch

from marketplace.catalog.domain.models import Item, Offer

# Largest value a DecimalField(max_digits=10, decimal_places=2) can hold
MAX_MONEY = Decimal("99999999.99")
CENTS = Decimal("0.01")


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    """UUID from a path/body value, or None if malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return None


def parse_money(value: Any) -> Optional[Decimal]:
    """
    Exact Decimal, or None for missing/non-numeric/non-finite input.

    Not rounded: minimum checks must see the value as sent, so "9.999" stays
    below 10. Round with ``to_cents`` once the checks pass.
    """
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        amount = Decimal(str(value))
        if not amount.is_finite() or abs(amount) > MAX_MONEY:
            return None
        return amount
    except (InvalidOperation, ValueError):
        return None


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS)


def item_queryset(store):
    """Items with seller and offer buyers resolved, offers in insertion order."""
    return (
        store.manager(Item)
        .select_related("seller")
        .prefetch_related(
            Prefetch("offers", queryset=store.manager(Offer).select_related("buyer").order_by("created_at", "id"))
        )
    )
