"""Shopping list aggregation.

Merges recipe ingredient lines into a ShoppingList: one entry per canonical
ingredient key, quantities summed per unit family, provenance recorded as
contributions. Removal re-derives an entry from its remaining contributions
instead of subtracting.
"""
from collections import OrderedDict
import logging
from typing import Iterable, List, Optional, Tuple

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity, family_sort_key, merge, parse_scale
from basket.domain.ShoppingList import Contribution, ShoppingList, ShoppingListEntry
from basket.domain.errors import EntryNotFound
from basket.logic.normalize.normalizer import normalize
from basket.logic.shopping.categorizer import AisleConfig, categorize

logger = logging.getLogger(__name__)

__all__ = [
    "add_contribution", "add_recipe", "remove_contribution", "remove_recipe",
    "merge_quantity", "derive_entry", "better_display_name",
]


def merge_quantity(quantities: List[Quantity], q: Optional[Quantity]) -> List[Quantity]:
    """Merge q into the first quantity of the same unit family, or append it as its own record.

    The result holds at most one Quantity per family, ordered by family.
    """
    result = list(quantities)
    if q is None:
        return result
    for idx, existing in enumerate(result):
        outcome = merge(existing, q)
        if outcome.merged:
            result[idx] = outcome.quantity
            break
    else:
        result.append(q)
    result.sort(key=lambda item: family_sort_key(item.family))
    return result


def better_display_name(current: Optional[str], candidate: str) -> str:
    """Prefer the longest (most specific) raw name; ties go to the alphabetically first."""
    if not current:
        return candidate
    if len(candidate) != len(current):
        return candidate if len(candidate) > len(current) else current
    return min(current, candidate, key=lambda n: (n.casefold(), n))


def _add_note(notes: List[str], note: Optional[str]):
    if note and note not in notes:
        notes.append(note)


def derive_entry(entry: ShoppingListEntry):
    """Recompute quantities, notes and display name from the entry's contributions."""
    quantities: List[Quantity] = []
    notes: List[str] = []
    display_name = None
    for contribution in entry.contributions:
        for line in contribution.lines:
            quantities = merge_quantity(quantities, line.effective_quantity())
            _add_note(notes, line.note)
            display_name = better_display_name(display_name, line.raw_name)
    entry.quantities = quantities
    entry.notes = notes
    if display_name:
        entry.display_name = display_name


def _apply(shopping_list: ShoppingList, key: str, contribution: Contribution,
           aisle_config: Optional[AisleConfig]) -> Tuple[ShoppingListEntry, bool]:
    entry = shopping_list.entries.get(key)
    is_new = entry is None
    if is_new:
        entry = ShoppingListEntry(key=key, display_name=contribution.lines[0].raw_name)
        shopping_list.entries[key] = entry
    for line in contribution.lines:
        entry.quantities = merge_quantity(entry.quantities, line.effective_quantity())
        _add_note(entry.notes, line.note)
        entry.display_name = better_display_name(entry.display_name, line.raw_name)
    entry.contributions.append(contribution)
    # completed is preserved across merges
    if aisle_config is not None:
        entry.aisle = categorize(entry, aisle_config)
    logger.debug("Merged %s into '%s' (new=%s): %s", contribution, key, is_new,
                 ", ".join(str(q) for q in entry.quantities))
    return entry, is_new


def add_contribution(shopping_list: ShoppingList, ingredient_ref: IngredientRef, note: Optional[str] = None,
                     aisle_config: Optional[AisleConfig] = None) -> Tuple[ShoppingListEntry, bool]:
    """Merge one ingredient line into the list.

    Returns (entry, is_new_entry). Every call records a new contribution
    instance, so adding the same recipe line twice counts it twice.
    """
    if note and not ingredient_ref.note:
        ingredient_ref = IngredientRef(ingredient_ref.raw_name, ingredient_ref.quantity, note,
                                       ingredient_ref.source_recipe_id, ingredient_ref.source_scale)
    key = normalize(ingredient_ref.raw_name)
    contribution = Contribution(ingredient_ref.source_recipe_id, ingredient_ref.source_scale, [ingredient_ref])
    return _apply(shopping_list, key, contribution, aisle_config)


def add_recipe(shopping_list: ShoppingList, recipe_id: str, ingredient_refs: Iterable[IngredientRef], scale=1,
               aisle_config: Optional[AisleConfig] = None) -> List[Tuple[ShoppingListEntry, bool]]:
    """Merge a whole recipe at a scale.

    Lines are re-attributed to (recipe_id, scale) and grouped by canonical key,
    so a recipe listing an ingredient twice makes one contribution holding both
    lines. The scale is validated before anything is touched.
    """
    factor = parse_scale(scale)
    groups: "OrderedDict[str, List[IngredientRef]]" = OrderedDict()
    for ref in ingredient_refs:
        attributed = ref.with_source(recipe_id, factor)
        groups.setdefault(normalize(attributed.raw_name), []).append(attributed)
    results = []
    for key, lines in groups.items():
        results.append(_apply(shopping_list, key, Contribution(recipe_id, factor, lines), aisle_config))
    return results


def remove_contribution(shopping_list: ShoppingList, key: str, recipe_id: str) -> Optional[ShoppingListEntry]:
    """Remove the most recent contribution of a recipe from an entry.

    Deletes the entry when it was the last contribution (returns None),
    otherwise re-derives it from what remains and returns it.
    """
    entry = shopping_list.entries.get(key)
    if entry is None:
        raise EntryNotFound(key)
    recipe_id = str(recipe_id)
    for idx in range(len(entry.contributions) - 1, -1, -1):
        if entry.contributions[idx].recipe_id == recipe_id:
            del entry.contributions[idx]
            break
    else:
        raise EntryNotFound(key, recipe_id)
    if not entry.contributions:
        del shopping_list.entries[key]
        logger.debug("Removed '%s' (last contribution from '%s')", key, recipe_id)
        return None
    derive_entry(entry)
    return entry


def remove_recipe(shopping_list: ShoppingList, recipe_id: str) -> List[str]:
    """Remove one contribution instance of a recipe from every entry it touched. Returns the affected keys."""
    recipe_id = str(recipe_id)
    affected = [key for key, entry in shopping_list.entries.items()
                if any(c.recipe_id == recipe_id for c in entry.contributions)]
    for key in affected:
        remove_contribution(shopping_list, key, recipe_id)
    return affected
