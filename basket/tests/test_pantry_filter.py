import unittest

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity
from basket.domain.ShoppingList import ShoppingList
from basket.logic.pantry.pantry_filter import PantryConfig, apply_pantry_filter
from basket.logic.shopping import aggregator
from basket.logic.shopping.view import build_view


class TestPantryFilter(unittest.TestCase):

    def setUp(self):
        self.shopping_list = ShoppingList()
        aggregator.add_recipe(self.shopping_list, "Pasta", [
            IngredientRef("Spaghetti", Quantity(400, "g")),
            IngredientRef("Kosher salt", Quantity(1, "tsp")),
            IngredientRef("Olive oil", Quantity(2, "tbsp")),
        ])
        self.pantry = PantryConfig.from_names(["Salt", "olive oil"])

    def test_names_are_normalized(self):
        self.assertIn("salt", self.pantry)
        self.assertEqual(len(self.pantry), 2)

    def test_mark_flags_without_hiding(self):
        views = apply_pantry_filter(self.shopping_list, self.pantry, "mark")
        flags = {v.key: v.is_pantry_item for v in views}
        self.assertEqual(flags, {"spaghetti": False, "salt": True, "olive oil": True})

    def test_hide_omits_from_view_only(self):
        views = apply_pantry_filter(self.shopping_list, self.pantry.with_mode("hide"))
        self.assertEqual([v.key for v in views], ["spaghetti"])
        # the underlying list is untouched
        self.assertIn("salt", self.shopping_list.entries)
        self.assertFalse(self.shopping_list.get("salt").is_pantry_item)

    def test_no_pantry_returns_everything_unmarked(self):
        views = apply_pantry_filter(self.shopping_list, None)
        self.assertEqual(len(views), 3)
        self.assertFalse(any(v.is_pantry_item for v in views))

    def test_matching_is_exact(self):
        pantry = PantryConfig.from_names(["oil"])
        views = apply_pantry_filter(self.shopping_list, pantry)
        self.assertFalse(any(v.is_pantry_item for v in views))

    def test_invalid_mode(self):
        with self.assertRaises(ValueError):
            PantryConfig(["salt"], "ignore")
        with self.assertRaises(ValueError):
            apply_pantry_filter(self.shopping_list, self.pantry, "ignore")

    def test_view_counts_hidden(self):
        view = build_view(self.shopping_list, pantry=self.pantry, pantry_mode="hide")
        self.assertEqual(view.count, 1)
        self.assertEqual(view.hidden, 2)
