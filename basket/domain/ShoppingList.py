"""ShoppingList aggregate: merged entries keyed by canonical ingredient, with contribution provenance."""
from fractions import Fraction
from typing import Dict, List, Optional

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity, parse_scale


class Contribution:
    """One recipe-at-a-scale's input into one entry (may hold several lines of that recipe)."""

    def __init__(self, recipe_id: str, scale=1, lines: Optional[List[IngredientRef]] = None):
        self.recipe_id = str(recipe_id)
        self.scale: Fraction = parse_scale(scale)
        self.lines = lines[:] if lines else []

    @property
    def identity(self):
        return (self.recipe_id, self.scale)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Contribution):
            return NotImplemented
        return self.identity == other.identity and self.lines == other.lines

    def __str__(self) -> str:
        return f"{self.recipe_id} x{self.scale}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        recipe_id = d.get("recipe_id", "")
        scale = d.get("scale", 1)
        lines = [IngredientRef.from_dict(line) for line in d.get("lines", [])]
        return Contribution(recipe_id, scale, lines)

    def to_dict(self):
        return {
            "recipe_id": self.recipe_id,
            "scale": str(self.scale),
            "lines": [line.to_dict() for line in self.lines],
        }


class ShoppingListEntry:
    """A merged shopping list item: one per canonical ingredient key."""

    def __init__(self, key: str, display_name: str = "", quantities: Optional[List[Quantity]] = None,
                 completed: bool = False, aisle: Optional[str] = None,
                 contributions: Optional[List[Contribution]] = None, notes: Optional[List[str]] = None,
                 is_pantry_item: bool = False):
        self.key = key
        self.display_name = display_name or key
        self.quantities = quantities[:] if quantities else []
        self.completed = completed
        self.aisle = aisle
        self.contributions = contributions[:] if contributions else []
        self.notes = notes[:] if notes else []
        self.is_pantry_item = is_pantry_item

    @property
    def recipe_ids(self) -> List[str]:
        '''Distinct contributing recipes, in first contribution order.'''
        seen: List[str] = []
        for c in self.contributions:
            if c.recipe_id not in seen:
                seen.append(c.recipe_id)
        return seen

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShoppingListEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        amounts = ", ".join(q.display() for q in self.quantities)
        check = "x" if self.completed else " "
        text = f"[{check}] {self.display_name}"
        return f"{text} - {amounts}" if amounts else text

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an entry from a dictionary produced by to_dict.'''
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingListEntry(
            key=d.get("key", ""),
            display_name=d.get("display_name", ""),
            quantities=[Quantity.from_dict(q) for q in d.get("quantities", [])],
            completed=bool(d.get("completed", False)),
            aisle=d.get("aisle"),
            contributions=[Contribution.from_dict(c) for c in d.get("contributions", [])],
            notes=list(d.get("notes", [])),
            is_pantry_item=bool(d.get("is_pantry_item", False)),
        )

    def to_dict(self):
        return {
            "key": self.key,
            "display_name": self.display_name,
            "quantities": [q.to_dict() for q in self.quantities],
            "completed": self.completed,
            "aisle": self.aisle,
            "contributions": [c.to_dict() for c in self.contributions],
            "notes": self.notes,
            "is_pantry_item": self.is_pantry_item,
        }


class EntryView:
    """Read-only projection of an entry for presentation (never written back to the store)."""

    __slots__ = ("key", "display_name", "quantities", "completed", "aisle", "recipes", "notes",
                 "is_pantry_item")

    def __init__(self, entry: ShoppingListEntry, aisle: Optional[str] = None, is_pantry_item: bool = False):
        self.key = entry.key
        self.display_name = entry.display_name
        self.quantities = tuple(entry.quantities)
        self.completed = entry.completed
        self.aisle = aisle if aisle is not None else entry.aisle
        self.recipes = tuple(entry.recipe_ids)
        self.notes = tuple(entry.notes)
        self.is_pantry_item = is_pantry_item

    def flagged(self, is_pantry_item: bool) -> "EntryView":
        view = EntryView.__new__(EntryView)
        for name in EntryView.__slots__:
            setattr(view, name, getattr(self, name))
        view.is_pantry_item = is_pantry_item
        return view

    def __repr__(self) -> str:
        return f"EntryView({self.display_name!r}, aisle={self.aisle!r}, pantry={self.is_pantry_item})"

    def to_dict(self):
        return {
            "key": self.key,
            "name": self.display_name,
            "quantities": [dict(q.to_dict(), display=q.display()) for q in self.quantities],
            "completed": self.completed,
            "aisle": self.aisle,
            "recipes": list(self.recipes),
            "notes": list(self.notes),
            "is_pantry_item": self.is_pantry_item,
        }


class ShoppingList:
    """The persisted shopping list of one user/session."""

    def __init__(self, entries: Optional[Dict[str, ShoppingListEntry]] = None,
                 aisle_order: Optional[List[str]] = None, version: int = 0,
                 applied_requests: Optional[List[str]] = None):
        self.entries: Dict[str, ShoppingListEntry] = dict(entries) if entries else {}
        self.aisle_order = aisle_order[:] if aisle_order else []
        self.version = version
        # Most recent idempotency tokens, oldest first
        self.applied_requests = applied_requests[:] if applied_requests else []

    def bump_version(self) -> int:
        self.version += 1
        return self.version

    def is_empty(self) -> bool:
        return not self.entries

    def get(self, key: str) -> Optional[ShoppingListEntry]:
        return self.entries.get(key)

    def copy(self) -> "ShoppingList":
        '''Deep copy through the persistence form, so snapshots never share state.'''
        return ShoppingList.from_dict(self.to_dict())

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShoppingList):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(e) for e in self.entries.values())
        return f"Shopping List v{self.version}:\n\t{items_str}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a ShoppingList from its persisted dictionary form.'''
        d = dict(data) if isinstance(data, dict) else {}
        entries = {}
        for raw in d.get("entries", []):
            entry = ShoppingListEntry.from_dict(raw)
            entries[entry.key] = entry
        return ShoppingList(
            entries=entries,
            aisle_order=list(d.get("aisle_order", [])),
            version=int(d.get("version", 0)),
            applied_requests=list(d.get("applied_requests", [])),
        )

    def to_dict(self):
        '''Converts the list to a dictionary for JSON persistence (entries sorted by key).'''
        return {
            "version": self.version,
            "aisle_order": self.aisle_order,
            "applied_requests": self.applied_requests,
            "entries": [self.entries[k].to_dict() for k in sorted(self.entries)],
        }
