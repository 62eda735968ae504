from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from contextlib import asynccontextmanager
from pathlib import Path
import logging

from basket.domain.errors import EntryNotFound, InvalidScale, PersistenceFailure
from basket.events.Event_Bus import GLOBAL_EVENT_BUS, EventBus
from basket.events.web_observers import start as start_event_observers
from basket.infra.Aisle_Repository import reading_aisle_config
from basket.infra.Pantry_Repository import reading_pantry_config
from basket.infra.ShoppingList_Repository import ShoppingListRepository
from basket.infra.paths import AISLE_FILE, PANTRY_FILE, RECIPES_FILE, SHOPPING_LISTS_DIR, shopping_list_file
from basket.logic.shopping.registry import StoreRegistry
from basket.utilities.config import DEFAULT_PANTRY_MODE, DEFAULT_USER
from basket.utilities.constants import PANTRY_MODES, PANTRY_MODE_MARK

# Routers
from basket.api.routes import recipes, shopping_list

# Logging
logger = logging.getLogger("basket_app")


def _data_files(data_dir):
    if data_dir is None:
        return RECIPES_FILE, AISLE_FILE, PANTRY_FILE, SHOPPING_LISTS_DIR
    data_dir = Path(data_dir)
    return (data_dir / 'recipes.json', data_dir / 'aisle.conf', data_dir / 'pantry.json',
            data_dir / 'shopping_lists')


def load_configuration(app: FastAPI):
    """(Re)read aisle and pantry files into app.state and push the aisle mapping to open stores."""
    pantry_default = DEFAULT_PANTRY_MODE if DEFAULT_PANTRY_MODE in PANTRY_MODES else PANTRY_MODE_MARK
    app.state.aisle_config = reading_aisle_config(app.state.aisle_file)
    app.state.pantry_config = reading_pantry_config(app.state.pantry_file, default_mode=pantry_default)
    app.state.registry.set_aisle_config(app.state.aisle_config)


def create_app(data_dir=None, bus: EventBus = None) -> FastAPI:
    """Build the API around one store registry. data_dir overrides the configured data directory."""
    recipes_file, aisle_file, pantry_file, lists_dir = _data_files(data_dir)
    bus = bus or GLOBAL_EVENT_BUS

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        start_event_observers(bus)
        logger.info("Web observers for shopping list events started")
        yield
        for user, error in app.state.registry.flush_all().items():
            if error:
                logger.error("Shopping list for '%s' not saved on shutdown: %s", user, error)

    app = FastAPI(title="Basket Shopping List API", lifespan=lifespan)
    app.state.recipes_file = recipes_file
    app.state.aisle_file = aisle_file
    app.state.pantry_file = pantry_file
    app.state.default_user = DEFAULT_USER
    app.state.default_pantry_mode = DEFAULT_PANTRY_MODE
    app.state.bus = bus
    app.state.registry = StoreRegistry(
        lambda user: ShoppingListRepository(shopping_list_file(user, lists_dir)),
        bus=bus,
    )
    load_configuration(app)

    app.include_router(recipes.router)
    app.include_router(shopping_list.router)

    @app.exception_handler(EntryNotFound)
    async def _entry_not_found(request: Request, exc: EntryNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidScale)
    async def _invalid_scale(request: Request, exc: InvalidScale):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(PersistenceFailure)
    async def _persistence_failure(request: Request, exc: PersistenceFailure):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.post("/api/reload")
    def reload_configuration():
        """Re-read aisle.conf and pantry.json without restarting."""
        load_configuration(app)
        pantry = app.state.pantry_config
        return {
            "aisles": app.state.aisle_config.order,
            "pantry_items": len(pantry) if pantry is not None else 0,
            "pantry_mode": pantry.mode if pantry is not None else None,
        }

    @app.get("/api/health")
    def health():
        return {"status": "ok", "users": app.state.registry.users()}

    return app


# Initialize FastAPI app
app = create_app()
