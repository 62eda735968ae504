"""Pantry filter: hide or mark shopping list entries the user already has at home.

Matching is exact canonical-key membership, never fuzzy, so suppression stays
predictable. The filter produces views only; the store is never touched.
"""
from __future__ import annotations
from typing import Iterable, List, Optional

from basket.domain.ShoppingList import EntryView, ShoppingList, ShoppingListEntry
from basket.logic.normalize.normalizer import normalize
from basket.utilities.constants import PANTRY_MODES, PANTRY_MODE_HIDE, PANTRY_MODE_MARK

__all__ = ["PantryConfig", "apply_pantry_filter"]


class PantryConfig:
    """Typed pantry inventory: a frozen set of canonical keys plus the display mode."""

    def __init__(self, keys: Iterable[str] = (), mode: str = PANTRY_MODE_MARK):
        mode = (mode or "").strip().lower()
        if mode not in PANTRY_MODES:
            raise ValueError(f"Pantry mode must be one of {', '.join(PANTRY_MODES)}: {mode!r}")
        self.keys = frozenset(keys)
        self.mode = mode

    @classmethod
    def from_names(cls, names: Iterable[str], mode: str = PANTRY_MODE_MARK) -> "PantryConfig":
        '''Builds a config from free-form ingredient names (normalized to canonical keys).'''
        return cls((normalize(n) for n in names if isinstance(n, str) and n.strip()), mode)

    def with_mode(self, mode: str) -> "PantryConfig":
        return PantryConfig(self.keys, mode)

    def has(self, key: str) -> bool:
        return key in self.keys

    def __contains__(self, key) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    def __repr__(self) -> str:
        return f"PantryConfig({sorted(self.keys)}, mode={self.mode!r})"


def _as_views(source) -> List[EntryView]:
    if isinstance(source, ShoppingList):
        source = source.entries.values()
    return [EntryView(item) if isinstance(item, ShoppingListEntry) else item for item in source]


def apply_pantry_filter(source, pantry: Optional[PantryConfig],
                        mode: Optional[str] = None) -> List[EntryView]:
    """Return views of a list (or of entries/views) with pantry entries omitted (hide) or flagged (mark).

    `mode` overrides the config's own mode. With no pantry config every entry
    is returned unmarked.
    """
    views = _as_views(source)
    if pantry is None:
        return [v.flagged(False) if v.is_pantry_item else v for v in views]
    mode = (mode or pantry.mode).lower()
    if mode not in PANTRY_MODES:
        raise ValueError(f"Pantry mode must be one of {', '.join(PANTRY_MODES)}: {mode!r}")
    result: List[EntryView] = []
    for view in views:
        in_pantry = pantry.has(view.key)
        if in_pantry and mode == PANTRY_MODE_HIDE:
            continue
        result.append(view.flagged(in_pantry))
    return result
