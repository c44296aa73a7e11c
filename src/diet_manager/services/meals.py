"""Meal composition service."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from diet_manager.domain.models import Meal, MealItem, check_field
from diet_manager.domain.nutrition import normalize_servings

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for reusable meal definitions."""

    def load_all(self) -> list[Meal]:
        """Return all stored meals in order."""

    def save_all(self, meals: list[Meal]) -> None:
        """Replace the persisted meals with the given list."""


@dataclass
class MealComposer:
    """Service that composes and stores reusable meals.

    Items are not checked against the product catalog here; callers reject
    unknown products before composing.
    """

    repository: MealRepository
    meals: list[Meal] = field(default_factory=list)

    def load(self) -> None:
        """Replace the in-memory meals with the persisted ones."""
        self.meals = self.repository.load_all()

    def add_meal(
        self, name: str, items: Iterable[MealItem], servings: float
    ) -> Meal:
        """Append a meal and persist every meal.

        The in-memory meals change only after the file is rewritten.
        """
        meal = create_custom_meal(name, items, servings)
        meals = [*self.meals, meal]
        self.repository.save_all(meals)
        self.meals = meals
        _logger.info(
            "Stored meal: name=%s items=%s servings=%s",
            meal.name,
            len(meal.items),
            meal.servings,
        )
        return meal

    def list_meals(self) -> list[Meal]:
        """Return stored meals in insertion order."""
        return list(self.meals)

    def get_meal(self, index: int) -> Meal | None:
        """Return the meal at a 1-based menu position, if it exists."""
        if 0 < index <= len(self.meals):
            return self.meals[index - 1]
        return None

    def save(self) -> None:
        """Persist every meal."""
        self.repository.save_all(self.meals)


def create_custom_meal(
    name: str, items: Iterable[MealItem], servings: float
) -> Meal:
    """Build a meal value without storing it.

    Raises:
        InvalidFieldError: if the meal name contains a line break or a
            product name contains a comma or line break.
    """
    return Meal(
        name=check_field(name, "meal name", allow_commas=True),
        items=[
            MealItem(
                product_name=check_field(item.product_name, "product"),
                quantity=item.quantity,
            )
            for item in items
        ],
        servings=normalize_servings(servings),
    )
