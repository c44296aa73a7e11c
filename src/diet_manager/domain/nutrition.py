"""Nutrition domain models."""

from dataclasses import dataclass

from diet_manager.domain.models import MealItem


@dataclass(frozen=True)
class NutrientTotals:
    """Calories, proteins and minerals for a product portion, meal or day."""

    calories: float = 0.0
    proteins: float = 0.0
    minerals: float = 0.0

    def plus(self, other: "NutrientTotals") -> "NutrientTotals":
        """Return the field-wise sum with another total."""
        return NutrientTotals(
            calories=self.calories + other.calories,
            proteins=self.proteins + other.proteins,
            minerals=self.minerals + other.minerals,
        )


@dataclass(frozen=True)
class ItemContribution:
    """Resolved contribution of a single meal item.

    ``found`` is False when the product is missing from the catalog; the
    totals are then zero and ``unit`` is None.
    """

    item: MealItem
    servings: float
    unit: str | None
    totals: NutrientTotals
    found: bool

    @property
    def scaled_quantity(self) -> float:
        """Quantity multiplied by the meal's servings."""
        return self.item.quantity * self.servings


def normalize_servings(servings: float) -> float:
    """Return servings, replacing non-positive values (and NaN) with 1."""
    if servings > 0:
        return servings
    return 1.0
