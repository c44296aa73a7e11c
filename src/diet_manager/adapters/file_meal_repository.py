"""Text-file repository for meal definitions."""

from dataclasses import dataclass

from diet_manager.adapters.flat_records import decode_meals, encode_meals
from diet_manager.adapters.text_file_storage import TextFileStorage
from diet_manager.domain.models import Meal
from diet_manager.services.meals import MealRepository


@dataclass
class FileMealRepository(MealRepository):
    """Stores meal definitions in ``meals.txt``."""

    storage: TextFileStorage
    file_name: str = "meals.txt"

    def load_all(self) -> list[Meal]:
        """Return all meals in file order."""
        return decode_meals(self.storage.read_text(self.file_name), self.file_name)

    def save_all(self, meals: list[Meal]) -> None:
        """Rewrite the meals file."""
        self.storage.write_text(self.file_name, encode_meals(meals))
