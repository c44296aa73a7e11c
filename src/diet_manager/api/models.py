"""Pydantic request models for the HTTP API.

Numeric fields accept numbers or numeric strings. Values that cannot be
parsed fall back to 0, or 1 for servings, instead of failing validation.
"""

from datetime import date

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from diet_manager.adapters.flat_records import parse_or_default
from diet_manager.domain.models import check_field
from diet_manager.errors import InvalidFieldError


def _to_float(value: object, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        return parse_or_default(value, default, float)
    return default


def _plain_text(value: str, field_name: str, *, allow_commas: bool = False) -> str:
    try:
        return check_field(value, field_name, allow_commas=allow_commas)
    except InvalidFieldError as exc:
        raise ValueError(str(exc)) from exc


def _to_int(value: object, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return parse_or_default(value, default, int)
    return default


class UserCreate(BaseModel):
    """Registration payload."""

    name: str = Field(min_length=1)
    age: int = 0
    sex: str = ""
    height: float = 0.0
    weight: float = 0.0

    @field_validator("name", "sex")
    @classmethod
    def _check_text(cls, value: str, info: ValidationInfo) -> str:
        return _plain_text(value, info.field_name)

    @field_validator("age", mode="before")
    @classmethod
    def _coerce_age(cls, value: object) -> int:
        return _to_int(value, 0)

    @field_validator("height", "weight", mode="before")
    @classmethod
    def _coerce_measure(cls, value: object) -> float:
        return _to_float(value, 0.0)


class ProductCreate(BaseModel):
    """Product payload with nutrients per one unit."""

    name: str = Field(min_length=1)
    unit: str = ""
    calories: float = 0.0
    proteins: float = 0.0
    minerals: float = 0.0

    @field_validator("name", "unit")
    @classmethod
    def _check_text(cls, value: str, info: ValidationInfo) -> str:
        return _plain_text(value, info.field_name)

    @field_validator("calories", "proteins", "minerals", mode="before")
    @classmethod
    def _coerce_nutrient(cls, value: object) -> float:
        return _to_float(value, 0.0)


class MealItemIn(BaseModel):
    """Product quantity inside a meal payload."""

    product: str
    quantity: float = 0.0

    @field_validator("product")
    @classmethod
    def _check_product(cls, value: str) -> str:
        return _plain_text(value, "product")

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: object) -> float:
        return _to_float(value, 0.0)


class MealCreate(BaseModel):
    """Meal composition payload."""

    name: str = ""
    items: list[MealItemIn] = Field(default_factory=list)
    servings: float = 1.0

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _plain_text(value, "meal name", allow_commas=True)

    @field_validator("servings", mode="before")
    @classmethod
    def _coerce_servings(cls, value: object) -> float:
        return _to_float(value, 1.0)


class LogMealRequest(BaseModel):
    """Log either a stored meal by 1-based position or a custom meal."""

    meal_index: int | None = None
    custom_meal: MealCreate | None = None
    day: date | None = None
