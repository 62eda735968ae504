"""Event helper utilities.

Helpers for publishing shopping list events on a bus (the global one by default).

Quick import:
    from basket.events.event_helpers import (
        publish_list_changed, publish_list_cleared, publish_persistence_failed
    )
"""
from __future__ import annotations
from typing import Iterable, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    SHOPPING_LIST_CHANGED, SHOPPING_LIST_CLEARED, SHOPPING_LIST_PERSISTENCE_FAILED
)

__all__ = ['publish_list_changed', 'publish_list_cleared', 'publish_persistence_failed']


def publish_list_changed(user: str, version: int, operation: str, keys: Iterable[str] = (),
                         bus: Optional[EventBus] = None):
    """Publish a shopping_list.changed event."""
    (bus or GLOBAL_EVENT_BUS).publish(SHOPPING_LIST_CHANGED, {
        'user': user,
        'version': version,
        'operation': operation,
        'keys': list(keys),
    })


def publish_list_cleared(user: str, version: int, removed: int, bus: Optional[EventBus] = None):
    """Publish a shopping_list.cleared event."""
    (bus or GLOBAL_EVENT_BUS).publish(SHOPPING_LIST_CLEARED, {
        'user': user,
        'version': version,
        'removed': removed,
    })


def publish_persistence_failed(user: str, version: int, error: Exception, bus: Optional[EventBus] = None):
    """Publish a shopping_list.persistence_failed event."""
    (bus or GLOBAL_EVENT_BUS).publish(SHOPPING_LIST_PERSISTENCE_FAILED, {
        'user': user,
        'version': version,
        'error': str(error),
    })
