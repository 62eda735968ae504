import json
import logging
from pathlib import Path
from typing import List, Optional

from basket.domain.Recipe import Recipe
from basket.infra.paths import RECIPES_FILE

logger = logging.getLogger(__name__)


def reading_from_recipes(path=None) -> List[Recipe]:
    """Read recipes from JSON file with proper error handling."""
    path = Path(path) if path else RECIPES_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            recipes_data = json.load(f)
        if not isinstance(recipes_data, list):
            logger.error(f"Recipes file must hold a list of recipes: {path}")
            return []
        recipes = []
        for entry in recipes_data:
            try:
                recipes.append(Recipe.from_dict(entry))
            except ValueError as e:
                logger.warning(f"Skipping invalid recipe {entry.get('name', '?') if isinstance(entry, dict) else entry!r}: {e}")
        return recipes
    except FileNotFoundError:
        logger.warning(f"Recipes file not found: {path}. Returning empty list.")
        return []
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in recipes file: {e}")
        return []


def find_recipe(name: str, path=None) -> Optional[Recipe]:
    """Case-insensitive lookup of one recipe by name."""
    wanted = (name or '').strip().lower()
    for recipe in reading_from_recipes(path):
        if recipe.name.lower() == wanted:
            return recipe
    return None


def search_recipes(query: str, path=None) -> List[Recipe]:
    """Recipes whose name or any ingredient name contains the query (case-insensitive)."""
    wanted = (query or '').strip().lower()
    if not wanted:
        return []
    matches = []
    for recipe in reading_from_recipes(path):
        if wanted in recipe.name.lower() or any(wanted in ing.raw_name.lower() for ing in recipe.ingredients):
            matches.append(recipe)
    return matches
