from fastapi import APIRouter, HTTPException, Query, Request

from basket.domain.errors import InvalidScale
from basket.infra.Recipe_Repository import find_recipe, reading_from_recipes, search_recipes

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def load_recipes(request: Request):
    return reading_from_recipes(request.app.state.recipes_file)


def lookup_recipe(request: Request, name: str):
    return find_recipe(name, request.app.state.recipes_file)


@router.get("")
@router.get("/")
def list_recipes(request: Request):
    """Return all recipe names with servings and tags."""
    recipes = load_recipes(request)
    return {
        "recipes": [
            {"name": r.name, "servings": r.servings, "tags": r.tags, "ingredients": len(r.ingredients)}
            for r in recipes
        ],
        "count": len(recipes),
    }


@router.get("/search")
def recipe_search(request: Request, q: str = Query(..., min_length=1)):
    """Recipes whose name or ingredients contain q (case-insensitive)."""
    matches = search_recipes(q, request.app.state.recipes_file)
    return {
        "query": q,
        "results": [{"name": r.name, "servings": r.servings, "tags": r.tags} for r in matches],
        "count": len(matches),
    }


@router.get("/{name}")
def recipe_detail(request: Request, name: str, scale: str = Query(default="1")):
    """One recipe with ingredient quantities multiplied by scale."""
    recipe = lookup_recipe(request, name)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe '{name}' not found")
    try:
        return recipe.scaled_dict(scale)
    except InvalidScale as e:
        raise HTTPException(status_code=400, detail=str(e))
