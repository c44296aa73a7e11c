"""Nutrient scaling and per-meal totals."""

from typing import Protocol

from diet_manager.domain.models import Meal, MealItem, Product
from diet_manager.domain.nutrition import ItemContribution, NutrientTotals


class ProductLookup(Protocol):
    """Anything that resolves a product name to its facts."""

    def lookup(self, name: str) -> Product | None:
        """Return a product by name, if present."""


def resolve_item(
    item: MealItem, servings: float, catalog: ProductLookup
) -> ItemContribution:
    """Scale one item's per-unit nutrients by quantity and servings.

    A product missing from the catalog resolves to a zero contribution.
    """
    product = catalog.lookup(item.product_name)
    if product is None:
        return ItemContribution(
            item=item,
            servings=servings,
            unit=None,
            totals=NutrientTotals(),
            found=False,
        )
    return ItemContribution(
        item=item,
        servings=servings,
        unit=product.unit,
        totals=NutrientTotals(
            calories=product.calories * item.quantity * servings,
            proteins=product.proteins * item.quantity * servings,
            minerals=product.minerals * item.quantity * servings,
        ),
        found=True,
    )


def item_contributions(meal: Meal, catalog: ProductLookup) -> list[ItemContribution]:
    """Return the resolved contribution of every item in a meal."""
    return [resolve_item(item, meal.servings, catalog) for item in meal.items]


def meal_totals(meal: Meal, catalog: ProductLookup) -> NutrientTotals:
    """Return a meal's total contribution, looking products up now."""
    total = NutrientTotals()
    for contribution in item_contributions(meal, catalog):
        total = total.plus(contribution.totals)
    return total


def compute_total_calories(meal: Meal, catalog: ProductLookup) -> float:
    """Return the calories of a meal."""
    return meal_totals(meal, catalog).calories


def compute_total_proteins(meal: Meal, catalog: ProductLookup) -> float:
    """Return the proteins of a meal."""
    return meal_totals(meal, catalog).proteins


def compute_total_minerals(meal: Meal, catalog: ProductLookup) -> float:
    """Return the minerals of a meal."""
    return meal_totals(meal, catalog).minerals
