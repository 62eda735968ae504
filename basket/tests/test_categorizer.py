import unittest

from basket.domain.ShoppingList import ShoppingList, ShoppingListEntry
from basket.logic.shopping.categorizer import AisleConfig, parse_aisle_conf, categorize, order_aisles
from basket.logic.shopping.view import build_view
from basket.logic.shopping import aggregator
from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity

AISLE_CONF = """
# store layout
[Produce]
scallions|spring onion
tomatoes

[Dairy]
eggs
milk

[Baking]
flour
"""


class TestParseAisleConf(unittest.TestCase):

    def test_sections_and_order(self):
        config = parse_aisle_conf(AISLE_CONF)
        self.assertEqual(config.order, ["Produce", "Dairy", "Baking"])
        self.assertEqual(config.lookup("green onion"), "Produce")
        self.assertEqual(config.lookup("egg"), "Dairy")
        self.assertEqual(config.lookup("all-purpose flour"), "Baking")

    def test_first_mapping_wins(self):
        config = parse_aisle_conf("[Dairy]\nbutter\n[Baking]\nbutter\n")
        self.assertEqual(config.lookup("butter"), "Dairy")

    def test_line_outside_section_is_rejected(self):
        with self.assertRaises(ValueError):
            parse_aisle_conf("butter\n[Dairy]\nmilk\n")

    def test_empty_config_is_falsy(self):
        self.assertFalse(AisleConfig())
        self.assertTrue(parse_aisle_conf(AISLE_CONF))


class TestCategorize(unittest.TestCase):

    def setUp(self):
        self.config = parse_aisle_conf(AISLE_CONF)

    def test_lookup_by_key(self):
        self.assertEqual(categorize(ShoppingListEntry("egg", "Eggs"), self.config), "Dairy")

    def test_unmapped_goes_to_default(self):
        self.assertEqual(categorize(ShoppingListEntry("saffron", "Saffron"), self.config), "Other")

    def test_no_config(self):
        self.assertEqual(categorize(ShoppingListEntry("egg", "Eggs"), None), "Other")


class TestOrdering(unittest.TestCase):

    def _list(self, *names):
        shopping_list = ShoppingList()
        for name in names:
            aggregator.add_contribution(shopping_list, IngredientRef(name, Quantity(1)))
        return shopping_list

    def test_grouping_follows_aisle_order(self):
        config = parse_aisle_conf(AISLE_CONF)
        view = build_view(self._list("Milk", "Flour", "Eggs"), config)
        self.assertEqual(view.aisle_names(), ["Dairy", "Baking"])
        self.assertEqual(view.names_in("Dairy"), ["Eggs", "Milk"])
        self.assertEqual(view.names_in("Baking"), ["Flour"])

    def test_unlisted_aisles_alphabetical_then_default(self):
        entries = [
            ShoppingListEntry("saffron", "Saffron", aisle="Other"),
            ShoppingListEntry("tofu", "Tofu", aisle="Chilled"),
            ShoppingListEntry("egg", "Eggs", aisle="Dairy"),
            ShoppingListEntry("bread", "Bread", aisle="Bakery"),
        ]
        ordered = order_aisles(entries, ["Dairy"])
        self.assertEqual([aisle for aisle, _ in ordered], ["Dairy", "Bakery", "Chilled", "Other"])

    def test_listed_default_aisle_keeps_its_place(self):
        entries = [
            ShoppingListEntry("saffron", "Saffron", aisle="Other"),
            ShoppingListEntry("egg", "Eggs", aisle="Dairy"),
        ]
        ordered = order_aisles(entries, ["Other", "Dairy"])
        self.assertEqual([aisle for aisle, _ in ordered], ["Other", "Dairy"])

    def test_without_config_single_aisle(self):
        view = build_view(self._list("Milk", "Eggs"))
        self.assertEqual(view.aisle_names(), ["Other"])
        self.assertEqual(view.names_in("Other"), ["Eggs", "Milk"])
