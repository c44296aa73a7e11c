"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from diet_manager.api.models import (
    LogMealRequest,
    MealCreate,
    ProductCreate,
    UserCreate,
)
from diet_manager.app_logging import configure_logging
from diet_manager.containers import AppContainer
from diet_manager.domain.models import DailyLog, Meal, MealItem, Product, User
from diet_manager.domain.nutrition import NutrientTotals
from diet_manager.errors import InvalidFieldError, NotFoundError, StorageError
from diet_manager.services.catalog import ProductCatalog
from diet_manager.services.daily_logs import aggregate
from diet_manager.services.meals import create_custom_meal
from diet_manager.services.nutrition import item_contributions, meal_totals


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.flush()
        logger.info("Saved all collections on shutdown")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message}
        )

    @app.exception_handler(InvalidFieldError)
    async def invalid_field(request: Request, exc: InvalidFieldError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StorageError)
    async def storage_failed(request: Request, exc: StorageError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/users", status_code=status.HTTP_201_CREATED)
    async def register_user(
        payload: UserCreate, request: Request
    ) -> dict[str, object]:
        """Register a user, replacing one with the same name."""
        state_container: AppContainer = request.app.state.container
        user = state_container.user_service.register(
            name=payload.name,
            age=payload.age,
            sex=payload.sex,
            height=payload.height,
            weight=payload.weight,
        )
        return _user_payload(user)

    @app.get("/users/{name}")
    async def get_user(name: str, request: Request) -> dict[str, object]:
        """Look a user up by name."""
        state_container: AppContainer = request.app.state.container
        return _user_payload(_require_user(state_container, name))

    @app.post("/products", status_code=status.HTTP_201_CREATED)
    async def add_product(
        payload: ProductCreate, request: Request
    ) -> dict[str, object]:
        """Insert or overwrite a product."""
        state_container: AppContainer = request.app.state.container
        product = state_container.catalog.add_product(
            name=payload.name,
            unit=payload.unit,
            calories=payload.calories,
            proteins=payload.proteins,
            minerals=payload.minerals,
        )
        return _product_payload(product)

    @app.get("/products")
    async def list_products(request: Request) -> dict[str, object]:
        """Return every product."""
        state_container: AppContainer = request.app.state.container
        return {
            "products": [
                _product_payload(product)
                for product in state_container.catalog.list_products()
            ]
        }

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(payload: MealCreate, request: Request) -> dict[str, object]:
        """Compose and store a reusable meal."""
        state_container: AppContainer = request.app.state.container
        items = _resolve_items(state_container.catalog, payload)
        meal = state_container.composer.add_meal(
            payload.name, items, payload.servings
        )
        return _meal_payload(meal, state_container.catalog)

    @app.get("/meals")
    async def list_meals(request: Request) -> dict[str, object]:
        """Return stored meals with per-item breakdowns."""
        state_container: AppContainer = request.app.state.container
        return {
            "meals": [
                _meal_payload(meal, state_container.catalog)
                for meal in state_container.composer.list_meals()
            ]
        }

    @app.post("/users/{name}/logs", status_code=status.HTTP_201_CREATED)
    async def log_meal(
        name: str, payload: LogMealRequest, request: Request
    ) -> dict[str, object]:
        """Log a stored or custom meal for a user."""
        state_container: AppContainer = request.app.state.container
        user = _require_user(state_container, name)
        meal = _select_meal(state_container, payload)
        log = state_container.log_store.log_meal(user.name, meal, day=payload.day)
        return _log_payload(log, state_container.catalog)

    @app.get("/users/{name}/logs")
    async def list_logs(name: str, request: Request) -> dict[str, object]:
        """Return a user's daily logs, most recent first."""
        state_container: AppContainer = request.app.state.container
        user = _require_user(state_container, name)
        return {
            "logs": [
                _log_payload(log, state_container.catalog)
                for log in state_container.log_store.query(user.name)
            ]
        }

    return app


def _require_user(container: AppContainer, name: str) -> User:
    user = container.user_service.find(name)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def _resolve_items(catalog: ProductCatalog, payload: MealCreate) -> list[MealItem]:
    names = [item.product.strip() for item in payload.items]
    missing = catalog.missing(names)
    if missing:
        raise NotFoundError(
            f"Product not found: {', '.join(missing)}. Please add the product first."
        )
    return [
        MealItem(product_name=name, quantity=item.quantity)
        for name, item in zip(names, payload.items, strict=True)
    ]


def _select_meal(container: AppContainer, payload: LogMealRequest) -> Meal:
    if payload.custom_meal is not None:
        items = _resolve_items(container.catalog, payload.custom_meal)
        return create_custom_meal(
            payload.custom_meal.name, items, payload.custom_meal.servings
        )
    if payload.meal_index is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid choice."
        )
    meal = container.composer.get_meal(payload.meal_index)
    if meal is None:
        raise NotFoundError("Invalid meal selection.")
    return meal


def _user_payload(user: User) -> dict[str, object]:
    return {
        "name": user.name,
        "age": user.age,
        "sex": user.sex,
        "height": user.height,
        "weight": user.weight,
    }


def _product_payload(product: Product) -> dict[str, object]:
    return {
        "name": product.name,
        "unit": product.unit,
        "calories": product.calories,
        "proteins": product.proteins,
        "minerals": product.minerals,
    }


def _totals_payload(totals: NutrientTotals) -> dict[str, float]:
    return {
        "calories": totals.calories,
        "proteins": totals.proteins,
        "minerals": totals.minerals,
    }


def _meal_payload(meal: Meal, catalog: ProductCatalog) -> dict[str, object]:
    items = [
        {
            "product": contribution.item.product_name,
            "quantity": contribution.scaled_quantity,
            "unit": contribution.unit,
            **_totals_payload(contribution.totals),
        }
        for contribution in item_contributions(meal, catalog)
        if contribution.found
    ]
    return {
        "name": meal.name,
        "servings": meal.servings,
        "items": items,
        "totals": _totals_payload(meal_totals(meal, catalog)),
    }


def _log_payload(log: DailyLog, catalog: ProductCatalog) -> dict[str, object]:
    return {
        "date": log.day.isoformat(),
        "meals": [_meal_payload(meal, catalog) for meal in log.meals],
        "totals": _totals_payload(aggregate(log, catalog)),
    }
