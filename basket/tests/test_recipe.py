from fractions import Fraction
import unittest

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity
from basket.domain.Recipe import Recipe
from basket.domain.errors import InvalidScale


class TestRecipe(unittest.TestCase):

    def setUp(self):
        self.recipe_pancakes = Recipe.from_dict({
            "name": "Pancakes",
            "servings": 4,
            "ingredients": [
                {"name": "Flour", "quantity": 200, "unit": "grams"},
                {"name": "Milk", "quantity": "1 1/4", "unit": "cups"},
                {"name": "Salt", "quantity": None, "note": "a pinch"},
            ],
            "steps": ["Mix ingredients", "Cook on skillet"],
            "tags": ["breakfast", "vegetarian"],
        })

    def test_from_dict(self):
        self.assertEqual(self.recipe_pancakes.recipe_id, "Pancakes")
        flour, milk, salt = self.recipe_pancakes.ingredients
        self.assertEqual(flour.quantity, Quantity(200, "g"))
        self.assertEqual(milk.quantity, Quantity(Fraction(5, 4), "cup"))
        self.assertIsNone(salt.quantity)
        self.assertEqual(salt.note, "a pinch")

    def test_contributions_are_attributed(self):
        refs = self.recipe_pancakes.contributions("1/2")
        self.assertTrue(all(r.source_recipe_id == "Pancakes" for r in refs))
        self.assertEqual(refs[0].effective_quantity(), Quantity(100, "g"))

    def test_scaled_dict(self):
        data = self.recipe_pancakes.scaled_dict(2)
        self.assertEqual(data["servings"], 8)
        self.assertEqual(data["ingredients"][1]["display"], "2 1/2 cup")
        self.assertEqual(data["ingredients"][2]["quantity"], None)
        self.assertEqual(self.recipe_pancakes.scaled_dict("1/8")["servings"], "1/2")

    def test_scaled_dict_rejects_bad_scale(self):
        with self.assertRaises(InvalidScale):
            self.recipe_pancakes.scaled_dict(0)

    def test_round_trip(self):
        again = Recipe.from_dict(self.recipe_pancakes.to_dict())
        self.assertEqual(again.ingredients, self.recipe_pancakes.ingredients)


class TestIngredientRef(unittest.TestCase):

    def test_empty_name_rejected(self):
        with self.assertRaises(ValueError):
            IngredientRef("  ")

    def test_effective_quantity_applies_scale(self):
        ref = IngredientRef("Rice", Quantity(2, "cup"), source_recipe_id="Bowl", source_scale=3)
        self.assertEqual(ref.effective_quantity(), Quantity(6, "cup"))

    def test_persisted_form(self):
        ref = IngredientRef("Rice", Quantity("1/3", "cup"), "rinsed", "Bowl", "3/2")
        self.assertEqual(IngredientRef.from_dict(ref.to_dict()), ref)

    def test_immutable(self):
        ref = IngredientRef("Rice")
        with self.assertRaises(AttributeError):
            ref.raw_name = "Beans"
