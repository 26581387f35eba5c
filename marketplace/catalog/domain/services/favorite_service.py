"""
FavoriteService - favorite tracking

Favorite records are the system of record for "user U favorited item I".
``Item.favourited_by`` is a read cache of the same fact. Every mutation
(toggle, legacy add, legacy remove, account cleanup) goes through
``_set_membership``, which:

1. locks the item row (SELECT ... FOR UPDATE),
2. reads the Favorite record to learn the current membership,
3. writes the record and the cache inside the same transaction.

Two racing calls on the same item therefore serialize, and a failure between
the two writes rolls both back. While it holds the lock the primitive also
rewrites a drifted cache entry for that user. ``rebuild_favourite_cache``
recomputes whole caches from the records.
"""

from typing import Any, Dict, List

from marketplace.catalog.domain.models import Favorite, Item
from marketplace.infra.observability import metrics
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.tracing import get_tracer
from utils.transaction_utils import LockConflictError, retry_on_lock_conflict

from .queries import item_queryset, parse_uuid

tracer = get_tracer(__name__)

MODE_TOGGLE = "toggle"
MODE_ADD = "add"
MODE_REMOVE = "remove"
MODES = (MODE_TOGGLE, MODE_ADD, MODE_REMOVE)


def _merge_cache(current: List[str], user_key: str, member: bool) -> List[str]:
    """Cache with exactly one ``user_key`` entry if ``member``, none otherwise. Other entries keep their order."""
    cache = []
    for entry in current:
        if entry != user_key:
            cache.append(entry)
        elif member and user_key not in cache:
            cache.append(entry)
    if member and user_key not in cache:
        cache.append(user_key)
    return cache


class FavoriteService(BaseService):
    def __init__(self, store):
        super().__init__()
        self.store = store

    def _favorites(self):
        return self.store.manager(Favorite)

    # ------------------------------------------------------------------
    # Write primitive
    # ------------------------------------------------------------------

    def _set_membership(self, user, item_id, mode: str) -> ServiceResult[Dict[str, Any]]:
        """
        Single write path for favorite membership.

        Modes:
            toggle: flip the current membership
            add: become a member; CONFLICT if already one
            remove: stop being a member; no-op if not one
        """
        if mode not in MODES:
            raise ValueError(f"Unknown favorite mode: {mode}")

        pk = parse_uuid(item_id)
        if pk is None:
            return service_err(ErrorCodes.NOT_FOUND, "Item not found")

        with tracer.start_as_current_span("favorites.set_membership") as span:
            span.set_attribute("favorite.mode", mode)
            span.set_attribute("item.id", str(pk))
            try:
                result = self._write_membership(user, pk, mode)
            except LockConflictError:
                metrics.lock_conflicts_total.labels(operation=f"favorite_{mode}").inc()
                return service_err(ErrorCodes.CONFLICT, "Item is busy, please retry")
            except Exception as e:
                return self.internal_error(f"writing favorite ({mode}) for item {pk}", e)

            if result.ok:
                metrics.favorite_writes_total.labels(action=result.value["action"]).inc()
                if result.value["repaired"]:
                    metrics.favorite_cache_repairs_total.inc()
                    self.logger.warning(f"Repaired drifted favourited_by cache on item {pk} for user {user.pk}")
            return result

    @retry_on_lock_conflict()
    def _write_membership(self, user, item_pk, mode: str) -> ServiceResult[Dict[str, Any]]:
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().filter(pk=item_pk).first()
            if item is None:
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")

            user_key = str(user.pk)
            record = self._favorites().filter(user_id=user.pk, item_id=item_pk).first()
            present = record is not None

            if mode == MODE_ADD and present:
                return service_err(ErrorCodes.CONFLICT, "Item already in favorites")

            member = (not present) if mode == MODE_TOGGLE else (mode == MODE_ADD)

            if present and not member:
                record.delete()
                action = "removed"
            elif member and not present:
                self._favorites().create(user_id=user.pk, item_id=item_pk)
                action = "added"
            else:
                action = "unchanged"

            current = list(item.favourited_by or [])
            repaired = current.count(user_key) != (1 if present else 0)
            cache = _merge_cache(current, user_key, member)
            if cache != current:
                item.favourited_by = cache
                item.save(update_fields=["favourited_by"])

            return service_ok({"isFavorited": member, "action": action, "repaired": repaired})

    @staticmethod
    def _public(result: ServiceResult) -> ServiceResult[Dict[str, bool]]:
        if not result.ok:
            return result
        return service_ok({"isFavorited": result.value["isFavorited"]})

    # ------------------------------------------------------------------
    # Public mutations
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def toggle_favorite(self, user, item_id) -> ServiceResult[Dict[str, bool]]:
        """Flip membership; returns ``{"isFavorited": <new state>}``."""
        return self._public(self._set_membership(user, item_id, MODE_TOGGLE))

    @BaseService.log_performance
    def add_favorite(self, user, item_id) -> ServiceResult[Dict[str, bool]]:
        """Legacy add: CONFLICT if already favorited."""
        return self._public(self._set_membership(user, item_id, MODE_ADD))

    @BaseService.log_performance
    def remove_favorite(self, user, item_id) -> ServiceResult[Dict[str, bool]]:
        """Legacy remove: no-op if not favorited."""
        return self._public(self._set_membership(user, item_id, MODE_REMOVE))

    @BaseService.log_performance
    def clear_user_favorites(self, user) -> ServiceResult[int]:
        """Remove every favorite of ``user`` through the write primitive. Returns how many were removed."""
        item_ids = list(self._favorites().filter(user_id=user.pk).values_list("item_id", flat=True))
        removed = 0
        try:
            with self.store.atomic():
                for item_id in item_ids:
                    result = self._set_membership(user, item_id, MODE_REMOVE)
                    if not result.ok:
                        if result.error == ErrorCodes.NOT_FOUND:
                            # Item deleted meanwhile; its favorites went with it
                            continue
                        raise RuntimeError(result.error_detail)
                    removed += 1
        except Exception as e:
            return self.internal_error(f"clearing favorites of user {user.pk}", e)
        return service_ok(removed)

    # ------------------------------------------------------------------
    # Queries (Favorite records are authoritative)
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def is_favorited(self, user, item_id) -> ServiceResult[Dict[str, bool]]:
        pk = parse_uuid(item_id)
        if pk is None or not self.store.manager(Item).filter(pk=pk).exists():
            return service_err(ErrorCodes.NOT_FOUND, "Item not found")
        exists = self._favorites().filter(user_id=user.pk, item_id=pk).exists()
        return service_ok({"isFavorited": exists})

    @BaseService.log_performance
    def list_favorites_for_user(self, user) -> ServiceResult[List[Item]]:
        """Favorited items, most recently favorited first, each flagged ``is_favorited = True``."""
        try:
            item_ids = list(
                self._favorites().filter(user_id=user.pk).order_by("-created_at", "-id").values_list("item_id", flat=True)
            )
            items_by_id = item_queryset(self.store).in_bulk(item_ids)
        except Exception as e:
            return self.internal_error(f"listing favorites of user {user.pk}", e)

        items = []
        for item_id in item_ids:
            item = items_by_id.get(item_id)
            if item is not None:
                item.is_favorited = True
                items.append(item)
        return service_ok(items)

    @BaseService.log_performance
    def list_items_with_favorite_flag(self, user) -> ServiceResult[List[Item]]:
        """Whole catalog, newest first, each item flagged for ``user``. The flag is never persisted."""
        try:
            favorite_ids = set(self._favorites().filter(user_id=user.pk).values_list("item_id", flat=True))
            items = list(item_queryset(self.store).order_by("-created_at", "-pk"))
        except Exception as e:
            return self.internal_error(f"listing items with favorite flag for user {user.pk}", e)

        for item in items:
            item.is_favorited = item.pk in favorite_ids
        return service_ok(items)

    # ------------------------------------------------------------------
    # Repair
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def rebuild_favourite_cache(self, item_id=None) -> ServiceResult[Dict[str, int]]:
        """
        Recompute ``favourited_by`` from Favorite records.

        Args:
            item_id: Rebuild one item; all items when None
        """
        if item_id is not None:
            pk = parse_uuid(item_id)
            if pk is None or not self.store.manager(Item).filter(pk=pk).exists():
                return service_err(ErrorCodes.NOT_FOUND, "Item not found")
            item_pks = [pk]
        else:
            item_pks = list(self.store.manager(Item).values_list("pk", flat=True))

        repaired = 0
        try:
            for pk in item_pks:
                if self._rebuild_one(pk):
                    repaired += 1
        except LockConflictError:
            metrics.lock_conflicts_total.labels(operation="rebuild_favourite_cache").inc()
            return service_err(ErrorCodes.CONFLICT, "Item is busy, please retry")
        except Exception as e:
            return self.internal_error("rebuilding favourite cache", e)

        if repaired:
            metrics.favorite_cache_repairs_total.inc(repaired)
        self.logger.info(f"Favourite cache rebuild: {len(item_pks)} items checked, {repaired} repaired")
        return service_ok({"items_checked": len(item_pks), "items_repaired": repaired})

    @retry_on_lock_conflict()
    def _rebuild_one(self, item_pk) -> bool:
        with self.store.atomic():
            item = self.store.manager(Item).select_for_update().filter(pk=item_pk).first()
            if item is None:
                return False

            members = [
                str(user_id)
                for user_id in self._favorites()
                .filter(item_id=item_pk)
                .order_by("created_at", "id")
                .values_list("user_id", flat=True)
            ]
            current = list(item.favourited_by or [])
            member_set = set(members)

            cache = []
            for entry in current:
                if entry in member_set and entry not in cache:
                    cache.append(entry)
            for user_key in members:
                if user_key not in cache:
                    cache.append(user_key)

            if cache == current:
                return False
            item.favourited_by = cache
            item.save(update_fields=["favourited_by"])
            return True
