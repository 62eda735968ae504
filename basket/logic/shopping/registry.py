"""Per-user ownership of shopping list stores.

The application holds one StoreRegistry; every request resolves its user's
store through it. Stores are opened lazily (one load per user) and live as
long as the registry.
"""
import logging
import threading
from typing import Callable, Dict, Optional

from basket.domain.errors import PersistenceFailure
from basket.events.Event_Bus import EventBus
from basket.logic.shopping.categorizer import AisleConfig
from basket.logic.shopping.store import ShoppingListStore

logger = logging.getLogger(__name__)

__all__ = ["StoreRegistry"]


class StoreRegistry:
    def __init__(self, repository_factory: Callable[[str], object], aisle_config: Optional[AisleConfig] = None,
                 bus: Optional[EventBus] = None):
        self._repository_factory = repository_factory
        self._aisle_config = aisle_config
        self._bus = bus
        self._stores: Dict[str, ShoppingListStore] = {}
        self._lock = threading.Lock()

    def get(self, user: str) -> ShoppingListStore:
        '''Returns the user's store, loading it from storage on first use.

        Raises PersistenceFailure when the saved list cannot be read; nothing
        is cached in that case so the next call tries again.
        '''
        with self._lock:
            store = self._stores.get(user)
            if store is None:
                store = ShoppingListStore.open(user, self._repository_factory(user), self._aisle_config, self._bus)
                self._stores[user] = store
                logger.info("Opened shopping list for user '%s' (version %s)", user, store.version)
            return store

    def set_aisle_config(self, aisle_config: Optional[AisleConfig]):
        '''Applies a new aisle mapping to every open store and to stores opened later.'''
        with self._lock:
            self._aisle_config = aisle_config
            stores = list(self._stores.values())
        for store in stores:
            store.set_aisle_config(aisle_config)

    def users(self):
        with self._lock:
            return sorted(self._stores)

    def flush_all(self) -> Dict[str, Optional[str]]:
        '''Saves every open store. Returns user -> error message (None when saved).'''
        results: Dict[str, Optional[str]] = {}
        with self._lock:
            stores = list(self._stores.items())
        for user, store in stores:
            try:
                store.flush()
                results[user] = None
            except PersistenceFailure as e:
                results[user] = str(e)
        return results
