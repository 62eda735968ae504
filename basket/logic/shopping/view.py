"""Categorized, pantry-annotated read view of a shopping list (the presentation boundary)."""
from typing import List, Optional, Tuple

from basket.domain.ShoppingList import EntryView, ShoppingList
from basket.logic.pantry.pantry_filter import PantryConfig, apply_pantry_filter
from basket.logic.shopping.categorizer import AisleConfig, categorize, order_aisles
from basket.utilities.constants import DEFAULT_AISLE

__all__ = ["ShoppingListView", "build_view"]


class ShoppingListView:
    """Ordered aisles -> ordered entry views. Plain data, safe to hand to any front end."""

    def __init__(self, aisles: List[Tuple[str, List[EntryView]]], version: int = 0, hidden: int = 0):
        self.aisles = aisles
        self.version = version
        self.hidden = hidden

    @property
    def entries(self) -> List[EntryView]:
        return [view for _, views in self.aisles for view in views]

    @property
    def count(self) -> int:
        return sum(len(views) for _, views in self.aisles)

    @property
    def completed_count(self) -> int:
        return sum(1 for view in self.entries if view.completed)

    def is_empty(self) -> bool:
        return self.count == 0

    def aisle_names(self) -> List[str]:
        return [name for name, _ in self.aisles]

    def names_in(self, aisle: str) -> List[str]:
        for name, views in self.aisles:
            if name == aisle:
                return [v.display_name for v in views]
        return []

    def to_dict(self):
        return {
            "version": self.version,
            "count": self.count,
            "completed": self.completed_count,
            "hidden": self.hidden,
            "aisles": [
                {"name": name, "items": [v.to_dict() for v in views]}
                for name, views in self.aisles
            ],
        }


def build_view(shopping_list: ShoppingList, aisle_config: Optional[AisleConfig] = None,
               pantry: Optional[PantryConfig] = None, pantry_mode: Optional[str] = None) -> ShoppingListView:
    """Categorize every entry, apply the pantry filter and order the result.

    Aisle priority comes from the config, falling back to the list's own
    aisle_order. Without any configuration everything lands in one 'Other' aisle.
    """
    default_aisle = aisle_config.default_aisle if aisle_config is not None else DEFAULT_AISLE
    views = [EntryView(entry, aisle=categorize(entry, aisle_config)) for entry in shopping_list.entries.values()]
    visible = apply_pantry_filter(views, pantry, pantry_mode)
    order = (aisle_config.order if aisle_config is not None and aisle_config.order
             else shopping_list.aisle_order)
    aisles = order_aisles(visible, order, default_aisle)
    return ShoppingListView(aisles, version=shopping_list.version, hidden=len(views) - len(visible))
