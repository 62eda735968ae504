from fastapi import APIRouter, Header, HTTPException, Query, Request, Response
from typing import Optional
import logging

from basket.domain.errors import EntryNotFound, InvalidScale, PersistenceFailure
from basket.events.web_observers import get_events as get_web_events
from basket.infra.pdf_utils import generate_pdf_for_shopping_list
from basket.infra.Recipe_Repository import find_recipe
from basket.logic.shopping.store import ShoppingListStore
from basket.utilities.constants import PANTRY_MODES, USER_HEADER
from basket.utilities.validators import AddItemsInput, AddRecipeInput, CompletionInput

router = APIRouter(prefix="/api/shopping-list", tags=["shopping-list"])
logger = logging.getLogger(__name__)

PANTRY_OFF = "off"


def _user(request: Request, x_basket_user: Optional[str]) -> str:
    user = (x_basket_user or "").strip()
    return user or request.app.state.default_user


def _store(request: Request, x_basket_user: Optional[str]) -> ShoppingListStore:
    user = _user(request, x_basket_user)
    try:
        return request.app.state.registry.get(user)
    except PersistenceFailure as e:
        logger.error("Could not load shopping list for '%s': %s", user, e)
        raise HTTPException(status_code=503, detail=str(e))


def _pantry(request: Request, mode: Optional[str]):
    pantry = request.app.state.pantry_config
    if mode is None:
        if request.app.state.default_pantry_mode == PANTRY_OFF:
            return None
        return pantry
    mode = mode.strip().lower()
    if mode == PANTRY_OFF:
        return None
    if mode not in PANTRY_MODES:
        raise HTTPException(status_code=400, detail=f"pantry must be one of: hide, mark, off (got '{mode}')")
    return pantry.with_mode(mode) if pantry is not None else None


def _summary(store: ShoppingListStore, **extra):
    data = {
        "user": store.user,
        "version": store.version,
        "count": store.item_count,
        "completed": store.completed_count,
        "saved": store.pending_version is None,
    }
    data.update(extra)
    return data


@router.get("")
@router.get("/")
def shopping_list(request: Request, pantry: Optional[str] = Query(default=None),
                  x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    """Categorized shopping list; pantry=hide|mark|off controls staple handling."""
    store = _store(request, x_basket_user)
    view = store.view(_pantry(request, pantry))
    data = view.to_dict()
    data["user"] = store.user
    return data


@router.post("/recipes")
def add_recipe(request: Request, payload: AddRecipeInput, x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    """Add every ingredient of a known recipe at a scale."""
    recipe = find_recipe(payload.recipe, request.app.state.recipes_file)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe '{payload.recipe}' not found")
    store = _store(request, x_basket_user)
    try:
        merged = store.add_recipe(recipe.recipe_id, recipe.ingredients, payload.scale, payload.request_id)
    except InvalidScale as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _summary(
        store,
        recipe=recipe.recipe_id,
        added=len(merged),
        new_entries=[view.key for view, is_new in merged if is_new],
    )


@router.post("/items")
def add_items(request: Request, payload: AddItemsInput, x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    """Add already parsed ingredient lines attributed to a recipe id."""
    store = _store(request, x_basket_user)
    try:
        refs = [line.to_ref(payload.recipe_id, 1) for line in payload.ingredients]
        merged = store.add_recipe(payload.recipe_id, refs, payload.scale, payload.request_id)
    except InvalidScale as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _summary(
        store,
        recipe=payload.recipe_id,
        added=len(merged),
        new_entries=[view.key for view, is_new in merged if is_new],
    )


@router.delete("/recipes/{recipe_id}")
def remove_recipe(request: Request, recipe_id: str, x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    """Remove one addition of a recipe from every entry it contributed to."""
    store = _store(request, x_basket_user)
    keys = store.remove_recipe(recipe_id)
    if not keys:
        raise HTTPException(status_code=404, detail=f"Recipe '{recipe_id}' is not on the shopping list")
    return _summary(store, recipe=recipe_id, affected=keys)


@router.delete("/items/{key}")
def remove_item_contribution(request: Request, key: str, recipe_id: str = Query(...),
                             x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    store = _store(request, x_basket_user)
    try:
        remaining = store.remove_contribution(key, recipe_id)
    except EntryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _summary(store, key=key, entry=remaining.to_dict() if remaining is not None else None)


@router.post("/items/{key}/toggle")
def toggle_item(request: Request, key: str, x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    store = _store(request, x_basket_user)
    try:
        completed = store.toggle(key)
    except EntryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _summary(store, key=key, item_completed=completed)


@router.put("/items/{key}/completed")
def set_item_completed(request: Request, key: str, payload: CompletionInput,
                       x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    store = _store(request, x_basket_user)
    try:
        changed = store.set_completed(key, payload.completed)
    except EntryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _summary(store, key=key, item_completed=payload.completed, changed=changed)


@router.post("/clear")
def clear_list(request: Request, x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    store = _store(request, x_basket_user)
    removed = store.clear()
    return _summary(store, removed=removed)


@router.post("/flush")
def flush_list(request: Request, x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    """Persist now; 503 while storage is unavailable (the list stays in memory)."""
    store = _store(request, x_basket_user)
    try:
        store.flush()
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _summary(store)


@router.get("/pdf")
def export_pdf(request: Request, pantry: Optional[str] = Query(default=None),
               x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    store = _store(request, x_basket_user)
    view = store.view(_pantry(request, pantry))
    pdf_bytes = generate_pdf_for_shopping_list(view, title=f"Shopping List ({store.user})")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=shopping_list_{store.user}.pdf"},
    )


@router.get("/events")
def list_events(request: Request, since: Optional[int] = Query(default=None),
                x_basket_user: Optional[str] = Header(default=None, alias=USER_HEADER)):
    """Poll recent shopping list events for the current user."""
    return get_web_events(since=since, user=_user(request, x_basket_user))
