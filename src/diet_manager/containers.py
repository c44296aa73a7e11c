"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from diet_manager.adapters.file_daily_log_repository import FileDailyLogRepository
from diet_manager.adapters.file_meal_repository import FileMealRepository
from diet_manager.adapters.file_product_repository import FileProductRepository
from diet_manager.adapters.file_user_repository import FileUserRepository
from diet_manager.adapters.text_file_storage import TextFileStorage
from diet_manager.config import Settings
from diet_manager.services.catalog import ProductCatalog
from diet_manager.services.daily_logs import DailyLogStore
from diet_manager.services.meals import MealComposer
from diet_manager.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide state and services."""

    settings: Settings
    user_service: UserService
    catalog: ProductCatalog
    composer: MealComposer
    log_store: DailyLogStore
    flush: Callable[[], None]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default container and load every collection from disk."""
    resolved_settings = settings or Settings()
    storage = TextFileStorage(resolved_settings.data_dir)
    user_service = UserService(
        FileUserRepository(storage, resolved_settings.users_file)
    )
    catalog = ProductCatalog(
        FileProductRepository(storage, resolved_settings.products_file)
    )
    composer = MealComposer(
        FileMealRepository(storage, resolved_settings.meals_file)
    )
    log_store = DailyLogStore(
        FileDailyLogRepository(
            storage,
            resolved_settings.daily_logs_file,
            grouped=resolved_settings.daily_log_format == "grouped",
        ),
        timezone_name=resolved_settings.timezone,
    )
    user_service.load()
    catalog.load()
    composer.load()
    log_store.load()

    def flush() -> None:
        user_service.save()
        catalog.save()
        composer.save()
        log_store.save()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        catalog=catalog,
        composer=composer,
        log_store=log_store,
        flush=flush,
    )
