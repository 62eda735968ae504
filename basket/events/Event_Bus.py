"""Simple Event Bus / Observer implementation for shopping list notifications.

Event names used so far:
  shopping_list.changed -> payload {"user": str, "version": int, "operation": str, "keys": [str]}
  shopping_list.cleared -> payload {"user": str, "version": int, "removed": int}
  shopping_list.persistence_failed -> payload {"user": str, "version": int, "error": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
from collections import defaultdict
import logging
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
SHOPPING_LIST_CHANGED = "shopping_list.changed"
SHOPPING_LIST_CLEARED = "shopping_list.cleared"
SHOPPING_LIST_PERSISTENCE_FAILED = "shopping_list.persistence_failed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def subscriber_count(self, event_name: str) -> int:
		return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %s", event_name, cb)


# Shared bus for listeners that do not care which list published
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS',
	'SHOPPING_LIST_CHANGED', 'SHOPPING_LIST_CLEARED', 'SHOPPING_LIST_PERSISTENCE_FAILED'
]
