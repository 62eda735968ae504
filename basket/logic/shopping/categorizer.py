"""Aisle categorization of shopping list entries.

Entries are looked up in a name -> aisle mapping built from an aisle.conf file:

    [produce]
    potatoes
    green onion|scallion
    [dairy]
    milk

Section order gives the aisle priority. Names are normalized on load so they
match entry keys. Anything unmapped goes to the default aisle.
"""
from collections import defaultdict
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from basket.domain.ShoppingList import ShoppingListEntry
from basket.logic.normalize.normalizer import normalize
from basket.utilities.constants import DEFAULT_AISLE

logger = logging.getLogger(__name__)

__all__ = ["AisleConfig", "parse_aisle_conf", "categorize", "order_aisles"]


class AisleConfig:
    """Name -> aisle mapping plus aisle priority order."""

    def __init__(self, mapping: Optional[Dict[str, str]] = None, order: Optional[List[str]] = None,
                 default_aisle: str = DEFAULT_AISLE):
        self.mapping: Dict[str, str] = {}
        for name, aisle in (mapping or {}).items():
            self.add(name, aisle)
        self.order = list(order or [])
        self.default_aisle = default_aisle

    def add(self, name: str, aisle: str):
        '''Maps an ingredient name (normalized here) to an aisle. First mapping wins.'''
        key = normalize(name)
        if key in self.mapping and self.mapping[key] != aisle:
            logger.warning("Ingredient '%s' listed in aisles '%s' and '%s'; keeping the first",
                           name, self.mapping[key], aisle)
            return
        self.mapping.setdefault(key, aisle)

    def lookup(self, key: str) -> Optional[str]:
        return self.mapping.get(key)

    def __bool__(self) -> bool:
        return bool(self.mapping or self.order)

    def __repr__(self) -> str:
        return f"AisleConfig({len(self.mapping)} names, order={self.order})"


def parse_aisle_conf(text: str, default_aisle: str = DEFAULT_AISLE) -> AisleConfig:
    """Parse the aisle.conf format into an AisleConfig.

    Raises ValueError for an ingredient line that appears before any [aisle] header.
    """
    config = AisleConfig(default_aisle=default_aisle)
    current: Optional[str] = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('[') and line.endswith(']'):
            current = line[1:-1].strip()
            if not current:
                raise ValueError(f"Empty aisle name on line {lineno}")
            if current not in config.order:
                config.order.append(current)
            continue
        if current is None:
            raise ValueError(f"Ingredient outside of an aisle section on line {lineno}: {line!r}")
        for name in line.split('|'):
            if name.strip():
                config.add(name.strip(), current)
    return config


def categorize(entry: ShoppingListEntry, aisle_config: Optional[AisleConfig]) -> str:
    """Return the aisle of an entry: by key, then by normalized display name, else the default aisle."""
    if not aisle_config:
        return aisle_config.default_aisle if aisle_config is not None else DEFAULT_AISLE
    aisle = aisle_config.lookup(entry.key)
    if aisle is None and entry.display_name:
        try:
            aisle = aisle_config.lookup(normalize(entry.display_name))
        except ValueError:
            aisle = None
    return aisle or aisle_config.default_aisle


def _aisle_sort_key(aisle: str, priority: Dict[str, int], default_aisle: str) -> Tuple[int, int, str]:
    if aisle in priority:
        return (0, priority[aisle], '')
    if aisle == default_aisle:
        return (2, 0, '')
    return (1, 0, aisle.casefold())


def entry_sort_key(entry) -> Tuple[str, str]:
    return (entry.display_name.casefold(), entry.key)


def order_aisles(entries: Iterable, aisle_order: Sequence[str] = (),
                 default_aisle: str = DEFAULT_AISLE) -> List[Tuple[str, List]]:
    """Group entries by their `aisle` attribute and order aisles and entries deterministically.

    Listed aisles come first in the given order, unlisted ones alphabetically
    after them, and the default aisle last unless it is listed. Entries are
    alphabetical by display name inside an aisle. Empty aisles are omitted.
    """
    groups: Dict[str, List] = defaultdict(list)
    for entry in entries:
        groups[entry.aisle or default_aisle].append(entry)
    priority = {name: idx for idx, name in enumerate(aisle_order)}
    ordered = sorted(groups, key=lambda a: _aisle_sort_key(a, priority, default_aisle))
    return [(aisle, sorted(groups[aisle], key=entry_sort_key)) for aisle in ordered]
