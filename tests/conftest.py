"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from diet_manager.config import Settings
from diet_manager.containers import AppContainer
from diet_manager.domain.models import DailyLog, Meal, Product, User
from diet_manager.services.catalog import ProductCatalog, ProductRepository
from diet_manager.services.daily_logs import DailyLogRepository, DailyLogStore
from diet_manager.services.meals import MealComposer, MealRepository
from diet_manager.services.users import UserRepository, UserService


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    stored: dict[str, User] = field(default_factory=dict)
    saves: int = 0

    def load_all(self) -> dict[str, User]:
        return dict(self.stored)

    def save_all(self, users: dict[str, User]) -> None:
        self.stored = dict(users)
        self.saves += 1


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product repository for tests."""

    stored: dict[str, Product] = field(default_factory=dict)
    saves: int = 0

    def load_all(self) -> dict[str, Product]:
        return dict(self.stored)

    def save_all(self, products: dict[str, Product]) -> None:
        self.stored = dict(products)
        self.saves += 1


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    stored: list[Meal] = field(default_factory=list)
    saves: int = 0

    def load_all(self) -> list[Meal]:
        return list(self.stored)

    def save_all(self, meals: list[Meal]) -> None:
        self.stored = list(meals)
        self.saves += 1


@dataclass
class InMemoryDailyLogRepository(DailyLogRepository):
    """In-memory daily log repository for tests."""

    stored: dict[tuple[str, date], DailyLog] = field(default_factory=dict)
    saves: int = 0

    def load_all(self) -> dict[tuple[str, date], DailyLog]:
        return dict(self.stored)

    def save_all(self, logs: dict[tuple[str, date], DailyLog]) -> None:
        self.stored = dict(logs)
        self.saves += 1


EGG = Product(name="egg", unit="g", calories=155, proteins=13, minerals=1)
TOAST = Product(name="toast", unit="slice", calories=80, proteins=3, minerals=0.5)


@pytest.fixture
def catalog() -> ProductCatalog:
    return ProductCatalog(
        InMemoryProductRepository(),
        products={EGG.name: EGG, TOAST.name: TOAST},
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=tmp_path, timezone="UTC")


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    user_service = UserService(InMemoryUserRepository())
    catalog = ProductCatalog(InMemoryProductRepository())
    composer = MealComposer(InMemoryMealRepository())
    log_store = DailyLogStore(
        InMemoryDailyLogRepository(), timezone_name=settings.timezone
    )

    def flush() -> None:
        user_service.save()
        catalog.save()
        composer.save()
        log_store.save()

    return AppContainer(
        settings=settings,
        user_service=user_service,
        catalog=catalog,
        composer=composer,
        log_store=log_store,
        flush=flush,
    )
