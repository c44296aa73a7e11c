"""Domain models for the diet manager."""

from dataclasses import dataclass, field
from datetime import date

from diet_manager.errors import InvalidFieldError

_LINE_BREAKS = ("\n", "\r")


@dataclass(frozen=True)
class User:
    """Represents a registered user."""

    name: str
    age: int
    sex: str
    height: float
    weight: float


@dataclass(frozen=True)
class Product:
    """Nutritional facts for one unit of a product."""

    name: str
    unit: str
    calories: float
    proteins: float
    minerals: float


@dataclass(frozen=True)
class MealItem:
    """Quantity of a product inside a meal."""

    product_name: str
    quantity: float


@dataclass(frozen=True)
class Meal:
    """Named composition of product quantities with a serving multiplier."""

    name: str
    items: list[MealItem]
    servings: float = 1.0


@dataclass
class DailyLog:
    """Meals a user logged on one calendar day."""

    username: str
    day: date
    meals: list[Meal] = field(default_factory=list)


def check_field(value: str, field_name: str, *, allow_commas: bool = False) -> str:
    """Return ``value`` stripped, rejecting record and field separators.

    Raises:
        InvalidFieldError: if the value contains a line break, or a comma
            when ``allow_commas`` is False.
    """
    separators = _LINE_BREAKS if allow_commas else (",", *_LINE_BREAKS)
    if any(separator in value for separator in separators):
        raise InvalidFieldError(field_name, value)
    return value.strip()
