"""Web-facing observers for shopping list events.

This module subscribes to an event bus for:
  - shopping_list.changed
  - shopping_list.cleared
  - shopping_list.persistence_failed

and stores a lightweight in-memory ring buffer of recent events that the API
exposes for polling, so an open page can refresh when another tab or device
changed the same list.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; it is per-process.
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock
from weakref import WeakSet
from datetime import datetime, timezone
import logging

from basket.utilities.constants import MAX_EVENTS
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    SHOPPING_LIST_CHANGED, SHOPPING_LIST_CLEARED, SHOPPING_LIST_PERSISTENCE_FAILED
)

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
_started_buses: "WeakSet[EventBus]" = WeakSet()

_OBSERVED = (SHOPPING_LIST_CHANGED, SHOPPING_LIST_CLEARED, SHOPPING_LIST_PERSISTENCE_FAILED)


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            for k in ('user', 'version', 'operation', 'keys', 'removed', 'error'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start(bus: Optional[EventBus] = None):
    """Idempotent start: subscribe observers once per bus."""
    bus = bus or GLOBAL_EVENT_BUS
    with _lock:
        if bus in _started_buses:
            return
        _started_buses.add(bus)
    for name in _OBSERVED:
        bus.subscribe(name, _record)
    logger.debug("Web observers subscribed to %s", bus)


def get_events(since: int | None = None, user: str | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive), optionally only one user's.

    If since is None, returns the last N (up to MAX_EVENTS) events.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    if user is not None:
        data = [e for e in data if e.get('user') == user]
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events']
