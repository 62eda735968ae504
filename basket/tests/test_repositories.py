import json

import pytest

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity
from basket.domain.ShoppingList import ShoppingList
from basket.domain.errors import PersistenceFailure
from basket.infra.Aisle_Repository import reading_aisle_config
from basket.infra.Pantry_Repository import reading_pantry_config
from basket.infra.Recipe_Repository import find_recipe, reading_from_recipes, search_recipes
from basket.infra.ShoppingList_Repository import ShoppingListRepository
from basket.infra.paths import shopping_list_file
from basket.logic.shopping import aggregator
from basket.logic.shopping.categorizer import parse_aisle_conf


def _sample_list():
    shopping_list = ShoppingList(aisle_order=["Dairy"])
    aggregator.add_recipe(shopping_list, "Pancakes", [
        IngredientRef("Milk", Quantity("1/3", "cup")),
        IngredientRef("Eggs", Quantity(2)),
        IngredientRef("Salt", None, "a pinch"),
    ], scale="1.5", aisle_config=parse_aisle_conf("[Dairy]\nmilk\n"))
    shopping_list.get("egg").completed = True
    shopping_list.applied_requests.append("req-1")
    shopping_list.bump_version()
    return shopping_list


def test_round_trip_reproduces_identical_list(tmp_path):
    repo = ShoppingListRepository(tmp_path / "lists" / "alice.json")
    original = _sample_list()
    repo.save(original)
    loaded = repo.load()
    assert loaded == original
    assert loaded.get("milk").quantities == [Quantity("1/2", "cup")]
    assert loaded.get("milk").aisle == "Dairy"
    assert loaded.get("egg").completed is True
    assert loaded.applied_requests == ["req-1"]
    # no temp files left behind
    assert [p.name for p in (tmp_path / "lists").iterdir()] == ["alice.json"]


def test_load_missing_file_returns_none(tmp_path):
    assert ShoppingListRepository(tmp_path / "nope.json").load() is None


def test_load_corrupt_file_raises(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceFailure):
        ShoppingListRepository(path).load()


def test_save_to_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    repo = ShoppingListRepository(blocker / "alice.json")
    with pytest.raises(PersistenceFailure):
        repo.save(ShoppingList())


def test_delete(tmp_path):
    repo = ShoppingListRepository(tmp_path / "alice.json")
    assert repo.delete() is False
    repo.save(ShoppingList())
    assert repo.delete() is True


def test_shopping_list_file_sanitizes_user(tmp_path):
    assert shopping_list_file("alice", tmp_path) == tmp_path / "alice.json"
    assert shopping_list_file("../etc/passwd", tmp_path).parent == tmp_path
    assert shopping_list_file("", tmp_path).name == "default.json"


def test_reading_recipes(tmp_path):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps([
        {"name": "Pancakes", "servings": 4, "ingredients": [
            {"name": "Flour", "quantity": 200, "unit": "g"},
            {"name": "Eggs", "quantity": "2"},
        ]},
        {"name": "", "servings": 1, "ingredients": [{"name": "", "quantity": 1}]},
    ]), encoding="utf-8")
    recipes = reading_from_recipes(path)
    assert [r.name for r in recipes] == ["Pancakes"]
    assert recipes[0].ingredients[1].quantity == Quantity(2)
    assert find_recipe("pancakes", path).name == "Pancakes"
    assert find_recipe("waffles", path) is None
    assert [r.name for r in search_recipes("FLOUR", path)] == ["Pancakes"]
    assert search_recipes("cake", path)[0].name == "Pancakes"
    assert search_recipes("  ", path) == []


def test_reading_recipes_missing_or_invalid(tmp_path):
    assert reading_from_recipes(tmp_path / "missing.json") == []
    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")
    assert reading_from_recipes(bad) == []


def test_reading_aisle_config(tmp_path):
    path = tmp_path / "aisle.conf"
    path.write_text("[Produce]\ntomatoes\n[Dairy]\nmilk|whole milk\n", encoding="utf-8")
    config = reading_aisle_config(path)
    assert config.order == ["Produce", "Dairy"]
    assert config.lookup("tomato") == "Produce"
    assert not reading_aisle_config(tmp_path / "missing.conf")


def test_reading_pantry_config_shapes(tmp_path):
    path = tmp_path / "pantry.json"
    path.write_text(json.dumps({"mode": "hide", "items": ["Salt", "Olive oil"]}), encoding="utf-8")
    config = reading_pantry_config(path)
    assert config.mode == "hide"
    assert "salt" in config

    path.write_text(json.dumps([
        {"name": "Rice", "default_quantity": 500, "unit": "g"},
        {"name": "Sugar", "default_quantity": 0, "unit": "g"},
    ]), encoding="utf-8")
    config = reading_pantry_config(path)
    assert config.mode == "mark"
    assert "rice" in config
    assert "sugar" not in config

    assert reading_pantry_config(tmp_path / "missing.json") is None
