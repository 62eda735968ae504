"""Shopping List Store: the single owner of one user's ShoppingList.

Every operation on a store goes through one re-entrant lock, so merges never
interleave. Each mutation bumps the list version, publishes an event and
hands a snapshot to the repository. Saving happens after the lock is released
and only ever moves the persisted version forward; when it fails, the in-memory
list stays authoritative and the unsaved version is retried on the next
mutation or on flush().
"""
from contextlib import contextmanager
import logging
import threading
from typing import Iterable, List, Optional, Tuple

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import parse_scale
from basket.domain.ShoppingList import EntryView, ShoppingList
from basket.domain.errors import EntryNotFound, PersistenceFailure
from basket.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from basket.events.event_helpers import (
    publish_list_changed, publish_list_cleared, publish_persistence_failed
)
from basket.logic.pantry.pantry_filter import PantryConfig
from basket.logic.shopping import aggregator
from basket.logic.shopping.categorizer import AisleConfig, categorize
from basket.logic.shopping.view import ShoppingListView, build_view
from basket.utilities.constants import MAX_APPLIED_REQUESTS

logger = logging.getLogger(__name__)

__all__ = ["ShoppingListStore"]


class ShoppingListStore:
    def __init__(self, user: str = "default", repository=None, aisle_config: Optional[AisleConfig] = None,
                 bus: Optional[EventBus] = None, shopping_list: Optional[ShoppingList] = None):
        self.user = user
        self._repository = repository
        self._aisle_config = aisle_config
        self._event_bus = bus or GLOBAL_EVENT_BUS
        self._list = shopping_list if shopping_list is not None else ShoppingList()
        if aisle_config is not None and aisle_config.order:
            self._list.aisle_order = list(aisle_config.order)
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()
        self._saved_version = self._list.version
        self._pending_version: Optional[int] = None
        self._last_error: Optional[PersistenceFailure] = None

    @classmethod
    def open(cls, user: str, repository, aisle_config: Optional[AisleConfig] = None,
             bus: Optional[EventBus] = None) -> "ShoppingListStore":
        '''Creates a store from whatever the repository holds (empty list when nothing was saved).

        Raises PersistenceFailure when the stored list cannot be read.
        '''
        loaded = repository.load() if repository is not None else None
        return cls(user, repository, aisle_config, bus, loaded)

    # --- Mutations ---------------------------------------------------------
    def add_contribution(self, ingredient_ref: IngredientRef, note: Optional[str] = None) -> Tuple[EntryView, bool]:
        '''Merges one ingredient line. Returns (entry view, is_new_entry).'''
        with self._lock:
            entry, is_new = aggregator.add_contribution(self._list, ingredient_ref, note, self._aisle_config)
            result = (EntryView(entry), is_new)
            snapshot = self._mutated("add", [entry.key])
        self._persist(snapshot)
        return result

    def add_recipe(self, recipe_id: str, ingredient_refs: Iterable[IngredientRef], scale=1,
                   request_id: Optional[str] = None) -> List[Tuple[EntryView, bool]]:
        '''Adds all lines of a recipe under one lock acquisition.

        A request_id that was already applied makes the call a no-op (returns []),
        so retried requests do not double-count.
        '''
        factor = parse_scale(scale)
        refs = list(ingredient_refs)
        with self._lock:
            if request_id and request_id in self._list.applied_requests:
                logger.info("Ignoring replayed request %s for recipe '%s'", request_id, recipe_id)
                return []
            merged = aggregator.add_recipe(self._list, recipe_id, refs, factor, self._aisle_config)
            if not merged:
                return []
            if request_id:
                self._remember_request(request_id)
            result = [(EntryView(entry), is_new) for entry, is_new in merged]
            snapshot = self._mutated("add_recipe", [entry.key for entry, _ in merged])
        logger.info("Added recipe '%s' x%s to %s's list: %s lines, %s new entries",
                    recipe_id, factor, self.user, len(refs), sum(1 for _, new in result if new))
        self._persist(snapshot)
        return result

    def remove_contribution(self, key: str, recipe_id: str) -> Optional[EntryView]:
        '''Removes one contribution of a recipe from an entry. Returns None when the entry is gone.'''
        with self._lock:
            entry = aggregator.remove_contribution(self._list, key, recipe_id)
            result = EntryView(entry) if entry is not None else None
            snapshot = self._mutated("remove", [key])
        self._persist(snapshot)
        return result

    def remove_recipe(self, recipe_id: str) -> List[str]:
        '''Removes one contribution of a recipe from every entry. Returns the affected keys.'''
        with self._lock:
            keys = aggregator.remove_recipe(self._list, recipe_id)
            if not keys:
                return []
            snapshot = self._mutated("remove_recipe", keys)
        self._persist(snapshot)
        return keys

    def toggle(self, key: str) -> bool:
        '''Flips the completed flag of an entry and returns the new state.'''
        with self._lock:
            entry = self._list.entries.get(key)
            if entry is None:
                raise EntryNotFound(key)
            entry.completed = not entry.completed
            completed = entry.completed
            snapshot = self._mutated("toggle", [key])
        self._persist(snapshot)
        return completed

    def set_completed(self, key: str, completed: bool) -> bool:
        '''Sets the completed flag explicitly. Returns True when the flag changed.'''
        with self._lock:
            entry = self._list.entries.get(key)
            if entry is None:
                raise EntryNotFound(key)
            if entry.completed == bool(completed):
                return False
            entry.completed = bool(completed)
            snapshot = self._mutated("toggle", [key])
        self._persist(snapshot)
        return True

    def clear(self) -> int:
        '''Removes every entry and contribution. Returns the number of entries removed.'''
        with self._lock:
            removed = len(self._list.entries)
            self._list.entries.clear()
            version = self._list.bump_version()
            snapshot = self._list.to_dict()
        logger.info("Cleared %s's shopping list (%s entries, version %s)", self.user, removed, version)
        publish_list_cleared(self.user, version, removed, bus=self._event_bus)
        self._persist(snapshot)
        return removed

    def set_aisle_config(self, aisle_config: Optional[AisleConfig]) -> bool:
        '''Swaps the aisle mapping and re-categorizes entries. Returns True when any entry moved.'''
        with self._lock:
            self._aisle_config = aisle_config
            moved = []
            for entry in self._list.entries.values():
                aisle = categorize(entry, aisle_config)
                if entry.aisle != aisle:
                    entry.aisle = aisle
                    moved.append(entry.key)
            order = list(aisle_config.order) if aisle_config is not None else []
            if not moved and order == self._list.aisle_order:
                return False
            self._list.aisle_order = order
            snapshot = self._mutated("recategorize", moved)
        self._persist(snapshot)
        return True

    @contextmanager
    def batch(self):
        '''Holds the lock across several aggregator calls on the raw list; saves once at the end.

            with store.batch() as shopping_list:
                aggregator.add_contribution(shopping_list, ref_a)
                aggregator.add_contribution(shopping_list, ref_b)

        If the block raises, the list is restored to its state before the batch
        and the exception propagates; nothing is published or saved.
        '''
        snapshot = None
        with self._lock:
            before = self._list.to_dict()
            try:
                yield self._list
            except BaseException:
                self._list = ShoppingList.from_dict(before)
                logger.warning("Batch on %s's shopping list failed; rolled back to version %s",
                               self.user, self._list.version)
                raise
            if self._list.to_dict() != before:
                snapshot = self._mutated("batch", [])
        if snapshot is not None:
            self._persist(snapshot)

    # --- Reads -------------------------------------------------------------
    def is_empty(self) -> bool:
        with self._lock:
            return self._list.is_empty()

    def snapshot(self) -> ShoppingList:
        '''Deep copy of the current list (for persistence, tests and exports).'''
        with self._lock:
            return self._list.copy()

    def get(self, key: str) -> EntryView:
        with self._lock:
            entry = self._list.entries.get(key)
            if entry is None:
                raise EntryNotFound(key)
            return EntryView(entry)

    def view(self, pantry: Optional[PantryConfig] = None, pantry_mode: Optional[str] = None) -> ShoppingListView:
        '''Categorized, pantry-annotated read view.'''
        with self._lock:
            return build_view(self._list, self._aisle_config, pantry, pantry_mode)

    @property
    def version(self) -> int:
        with self._lock:
            return self._list.version

    @property
    def item_count(self) -> int:
        with self._lock:
            return len(self._list.entries)

    @property
    def completed_count(self) -> int:
        with self._lock:
            return sum(1 for e in self._list.entries.values() if e.completed)

    @property
    def aisle_config(self) -> Optional[AisleConfig]:
        return self._aisle_config

    # --- Persistence -------------------------------------------------------
    @property
    def pending_version(self) -> Optional[int]:
        '''Version that is newer than what storage holds because the last save failed (None when in sync).'''
        return self._pending_version

    @property
    def last_error(self) -> Optional[PersistenceFailure]:
        return self._last_error

    def flush(self) -> int:
        '''Saves the current list now. Raises PersistenceFailure if storage is unavailable.'''
        with self._lock:
            snapshot = self._list.to_dict()
        self._persist(snapshot, raise_errors=True)
        return snapshot["version"]

    def _remember_request(self, request_id: str):
        self._list.applied_requests.append(request_id)
        overflow = len(self._list.applied_requests) - MAX_APPLIED_REQUESTS
        if overflow > 0:
            del self._list.applied_requests[:overflow]

    def _mutated(self, operation: str, keys: List[str]) -> dict:
        # Caller holds self._lock
        version = self._list.bump_version()
        logger.debug("%s: %s %s -> version %s", self.user, operation, keys, version)
        publish_list_changed(self.user, version, operation, keys, bus=self._event_bus)
        return self._list.to_dict()

    def _persist(self, snapshot: dict, raise_errors: bool = False):
        if self._repository is None:
            return
        version = snapshot["version"]
        with self._save_lock:
            if version < self._saved_version or (version == self._saved_version and self._pending_version is None
                                                 and not raise_errors):
                return
            try:
                self._repository.save(ShoppingList.from_dict(snapshot))
            except PersistenceFailure as e:
                self._pending_version = version
                self._last_error = e
                logger.error("Could not save %s's shopping list (version %s); keeping it in memory: %s",
                             self.user, version, e)
                publish_persistence_failed(self.user, version, e, bus=self._event_bus)
                if raise_errors:
                    raise
                return
            self._saved_version = version
            self._pending_version = None
            self._last_error = None

    def __repr__(self) -> str:
        return f"ShoppingListStore(user={self.user!r}, version={self._list.version}, entries={len(self._list)})"
