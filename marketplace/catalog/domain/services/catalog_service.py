"""
CatalogService - Item CRUD & listings

Items are the root aggregate: each one owns its offers (reverse FK, kept in
insertion order) and a ``favourited_by`` cache maintained by FavoriteService.

Validation and ownership checks run before any write. Update and delete take
a row lock on the item so they serialize with offer decisions and favorite
toggles on the same item.
"""

from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model

from marketplace.catalog.domain.models import ITEM_TYPES, MIN_ITEM_PRICE, Favorite, Item
from marketplace.infra.observability import metrics
from utils.ownership import require_owner
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.tracing import get_tracer
from utils.transaction_utils import LockConflictError, retry_on_lock_conflict

from .queries import item_queryset, parse_money, parse_uuid, to_cents

User = get_user_model()
tracer = get_tracer(__name__)

PATCHABLE_FIELDS = ("title", "type", "price", "images", "description", "location")
TEXT_FIELDS = ("description", "location")


class CatalogService(BaseService):
    """
    Service for managing the item catalog.

    Responsibilities:
    - Create items for an authenticated seller
    - Item detail and catalog listings (optionally by seller / by offer buyer)
    - Update and delete items (seller only)

    All operations return ServiceResult.
    """

    def __init__(self, store):
        """
        Args:
            store: Persistence handle (injected via DI container)
        """
        super().__init__()
        self.store = store

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _clean_fields(data: Dict[str, Any], partial: bool) -> ServiceResult[Dict[str, Any]]:
        """Validate item attributes; returns the cleaned subset of PATCHABLE_FIELDS."""
        cleaned: Dict[str, Any] = {}

        if not partial:
            missing = [field for field in ("title", "type", "price") if data.get(field) in (None, "")]
            if missing:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Missing required fields: {', '.join(missing)}")

        if "title" in data:
            title = data["title"]
            if not isinstance(title, str) or not title.strip():
                return service_err(ErrorCodes.VALIDATION_ERROR, "Please provide a title.")
            if len(title.strip()) > 200:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Title must be at most 200 characters.")
            cleaned["title"] = title.strip()

        if "type" in data:
            if data["type"] not in ITEM_TYPES:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"'{data['type']}' is not a valid item type.")
            cleaned["type"] = data["type"]

        if "price" in data:
            price = parse_money(data["price"])
            if price is None:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Price must be a number.")
            if price < MIN_ITEM_PRICE:
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Price must be at least {MIN_ITEM_PRICE}.")
            cleaned["price"] = to_cents(price)

        if "images" in data:
            images = data["images"] if data["images"] is not None else []
            if not isinstance(images, list) or not all(isinstance(uri, str) for uri in images):
                return service_err(ErrorCodes.VALIDATION_ERROR, "Images must be a list of URLs.")
            cleaned["images"] = images

        for field in TEXT_FIELDS:
            if field in data:
                value = data[field] if data[field] is not None else ""
                if not isinstance(value, str):
                    return service_err(ErrorCodes.VALIDATION_ERROR, f"{field.capitalize()} must be text.")
                cleaned[field] = value

        return service_ok(cleaned)

    def _fetch(self, item_id) -> Optional[Item]:
        pk = parse_uuid(item_id)
        if pk is None:
            return None
        return item_queryset(self.store).filter(pk=pk).first()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_item(self, seller, data: Dict[str, Any]) -> ServiceResult[Item]:
        """
        List a new item for ``seller``.

        Errors: VALIDATION_ERROR (missing/invalid attributes, unknown type,
        price < 1), NOT_FOUND (seller does not exist).
        """
        with tracer.start_as_current_span("catalog.create_item") as span:
            cleaned = self._clean_fields(data or {}, partial=False)
            if not cleaned.ok:
                return cleaned

            seller_id = getattr(seller, "pk", None)
            if seller_id is None or not self.store.manager(User).filter(pk=seller_id).exists():
                return service_err(ErrorCodes.NOT_FOUND, "Seller not found")

            try:
                with self.store.atomic():
                    item = self.store.manager(Item).create(seller_id=seller_id, favourited_by=[], **cleaned.value)
            except Exception as e:
                return self.internal_error("creating item", e)

            span.set_attribute("item.id", str(item.pk))
            metrics.items_created_total.inc()
            metrics.item_price.observe(float(item.price))
            self.logger.info(f"Item {item.pk} ({item.type}) listed by {seller_id}")
            return service_ok(self._fetch(item.pk))

    @BaseService.log_performance
    def get_item(self, item_id) -> ServiceResult[Item]:
        """Item with seller and offer buyers resolved. NOT_FOUND if absent or malformed id."""
        try:
            item = self._fetch(item_id)
        except Exception as e:
            return self.internal_error(f"loading item {item_id}", e)
        if item is None:
            return service_err(ErrorCodes.NOT_FOUND, "Item not found")
        return service_ok(item)

    @BaseService.log_performance
    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> ServiceResult[List[Item]]:
        """
        Full catalog, newest first.

        Filters:
            seller: only items listed by this user id
            offers_by: only items holding at least one offer from this user id
        """
        filters = filters or {}
        with tracer.start_as_current_span("catalog.list_items") as span:
            queryset = item_queryset(self.store).order_by("-created_at", "-pk")

            if filters.get("seller") is not None:
                seller_id = parse_uuid(filters["seller"])
                if seller_id is None:
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid seller id")
                queryset = queryset.filter(seller_id=seller_id)
                span.set_attribute("filter.seller", str(seller_id))

            if filters.get("offers_by") is not None:
                buyer_id = parse_uuid(filters["offers_by"])
                if buyer_id is None:
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid buyer id")
                queryset = queryset.filter(offers__buyer_id=buyer_id).distinct()
                span.set_attribute("filter.offers_by", str(buyer_id))

            try:
                items = list(queryset)
            except Exception as e:
                return self.internal_error("listing items", e)

            span.set_attribute("result.count", len(items))
            return service_ok(items)

    @BaseService.log_performance
    def update_item(self, item_id, caller, patch: Dict[str, Any]) -> ServiceResult[Item]:
        """
        Apply ``patch`` to an item owned by ``caller``.

        ``seller``, ``offers``, ``favourited_by`` and ``id`` are not patchable
        and are ignored. Errors: NOT_FOUND, FORBIDDEN, VALIDATION_ERROR.
        """
        pk = parse_uuid(item_id)
        if pk is None:
            return service_err(ErrorCodes.NOT_FOUND, "Item not found")

        changes = {field: value for field, value in (patch or {}).items() if field in PATCHABLE_FIELDS}
        cleaned = self._clean_fields(changes, partial=True)

        try:
            result = self._apply_patch(pk, caller, cleaned)
        except LockConflictError:
            metrics.lock_conflicts_total.labels(operation="update_item").inc()
            return service_err(ErrorCodes.CONFLICT, "Item is being modified, please retry")
        except Exception as e:
            return self.internal_error(f"updating item {item_id}", e)

        if not result.ok:
            return result
        self.logger.info(f"Item {pk} updated fields {sorted(cleaned.value.keys())}")
        return service_ok(self._fetch(pk))

    @retry_on_lock_conflict()
    def _apply_patch(self, pk, caller, cleaned: ServiceResult) -> ServiceResult[None]:
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().filter(pk=pk).first()
            if item is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")

            denied = require_owner(item, caller, "seller", "You can only edit your own items")
            if denied:
                return denied
            if not cleaned.ok:
                return cleaned

            for field, value in cleaned.value.items():
                setattr(item, field, value)
            if cleaned.value:
                item.save(update_fields=[*cleaned.value.keys(), "updated_at"])
            return service_ok(None)

    @BaseService.log_performance
    def delete_item(self, item_id, caller) -> ServiceResult[Dict[str, int]]:
        """
        Delete an item owned by ``caller``.

        Every Favorite record pointing at the item is removed in the same
        transaction; offers go with the item.
        """
        pk = parse_uuid(item_id)
        if pk is None:
            return service_err(ErrorCodes.NOT_FOUND, "Item not found")

        try:
            result = self._delete_locked(pk, caller)
        except LockConflictError:
            metrics.lock_conflicts_total.labels(operation="delete_item").inc()
            return service_err(ErrorCodes.CONFLICT, "Item is being modified, please retry")
        except Exception as e:
            return self.internal_error(f"deleting item {item_id}", e)

        if result.ok:
            metrics.items_deleted_total.inc()
            self.logger.info(f"Item {pk} deleted ({result.value['favorites_removed']} favorites removed)")
        return result

    @retry_on_lock_conflict()
    def _delete_locked(self, pk, caller) -> ServiceResult[Dict[str, int]]:
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().filter(pk=pk).first()
            if item is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")

            denied = require_owner(item, caller, "seller", "You can only delete your own items")
            if denied:
                return denied

            favorites_removed, _ = self.store.manager(Favorite).filter(item_id=pk).delete()
            item.delete()
            return service_ok({"favorites_removed": favorites_removed})

    def list_types(self) -> ServiceResult[List[str]]:
        """The closed set of item categories."""
        return service_ok(list(ITEM_TYPES))
