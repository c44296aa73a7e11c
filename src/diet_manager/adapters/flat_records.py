"""Line-oriented flat-record encoding for users, products, meals and logs.

Every collection is stored as comma-separated text, one record per line:

* users: ``name,age,sex,height,weight``
* products: ``name,unit,calories,proteins,minerals``
* meals: a meal name line, ``product,quantity`` lines, then a blank line
* daily logs: ``username,date,servings,product,quantity`` (legacy) or
  ``username,date,servings,product,quantity,entry,meal name`` (grouped)

Lines with an unexpected field count are skipped. Numeric fields that fail to
parse fall back to defaults. An unparseable date aborts the load.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypeVar

from diet_manager.domain.models import DailyLog, Meal, MealItem, Product, User
from diet_manager.errors import CorruptRecordError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DATE_FORMAT = "%Y-%m-%d"
LOADED_MEAL_NAME = "Loaded Meal"

_USER_FIELDS = 5
_PRODUCT_FIELDS = 5
_MEAL_ITEM_FIELDS = 2
_LEGACY_LOG_FIELDS = 5
_GROUPED_LOG_FIELDS = 7


def parse_or_default(raw: str, default: T, kind: Callable[[str], T]) -> T:
    """Parse a field with ``kind``, returning ``default`` when it fails."""
    try:
        return kind(raw.strip())
    except ValueError:
        return default


def format_number(value: float) -> str:
    """Format a number the way the data files store it (``155``, ``2.5``)."""
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def encode_users(users: Iterable[User]) -> str:
    """Encode users, one line each."""
    return "".join(
        ",".join(
            [
                user.name,
                str(user.age),
                user.sex,
                format_number(user.height),
                format_number(user.weight),
            ]
        )
        + "\n"
        for user in users
    )


def decode_users(text: str, source: str = "users") -> dict[str, User]:
    """Decode users keyed by name; later lines win on duplicate names."""
    users: dict[str, User] = {}
    for number, line in enumerate(_lines(text), start=1):
        parts = line.split(",")
        if len(parts) != _USER_FIELDS:
            _skip(source, number, len(parts))
            continue
        user = User(
            name=parts[0],
            age=parse_or_default(parts[1], 0, int),
            sex=parts[2],
            height=parse_or_default(parts[3], 0.0, float),
            weight=parse_or_default(parts[4], 0.0, float),
        )
        users[user.name] = user
    return users


def encode_products(products: Iterable[Product]) -> str:
    """Encode products, one line each."""
    return "".join(
        ",".join(
            [
                product.name,
                product.unit,
                format_number(product.calories),
                format_number(product.proteins),
                format_number(product.minerals),
            ]
        )
        + "\n"
        for product in products
    )


def decode_products(text: str, source: str = "products") -> dict[str, Product]:
    """Decode products keyed by name."""
    products: dict[str, Product] = {}
    for number, line in enumerate(_lines(text), start=1):
        parts = line.split(",")
        if len(parts) != _PRODUCT_FIELDS:
            _skip(source, number, len(parts))
            continue
        product = Product(
            name=parts[0],
            unit=parts[1],
            calories=parse_or_default(parts[2], 0.0, float),
            proteins=parse_or_default(parts[3], 0.0, float),
            minerals=parse_or_default(parts[4], 0.0, float),
        )
        products[product.name] = product
    return products


def encode_meals(meals: Iterable[Meal]) -> str:
    """Encode meal definitions as blank-line separated blocks.

    Servings are not stored.
    """
    chunks: list[str] = []
    for meal in meals:
        chunks.append(meal.name + "\n")
        for item in meal.items:
            chunks.append(f"{item.product_name},{format_number(item.quantity)}\n")
        chunks.append("\n")
    return "".join(chunks)


def decode_meals(text: str, source: str = "meals") -> list[Meal]:
    """Decode meal definitions; every meal comes back with one serving."""
    meals: list[Meal] = []
    lines = iter(enumerate(_lines(text), start=1))
    for _, meal_name in lines:
        items: list[MealItem] = []
        for number, line in lines:
            if not line:
                break
            parts = line.split(",")
            if len(parts) != _MEAL_ITEM_FIELDS:
                _skip(source, number, len(parts))
                continue
            items.append(
                MealItem(
                    product_name=parts[0],
                    quantity=parse_or_default(parts[1], 0.0, float),
                )
            )
        meals.append(Meal(name=meal_name, items=items, servings=1.0))
    return meals


def encode_daily_logs(logs: Iterable[DailyLog], *, grouped: bool = True) -> str:
    """Encode daily logs with one line per logged meal item.

    The legacy layout keeps neither meal names nor which items belonged to
    the same meal. The grouped layout appends a per-day meal index and the
    meal name so both survive a reload. Meals without items produce no line.
    """
    lines: list[str] = []
    for log in sorted(logs, key=lambda entry: (entry.username, entry.day)):
        day = log.day.strftime(DATE_FORMAT)
        for entry, meal in enumerate(log.meals):
            for item in meal.items:
                fields = [
                    log.username,
                    day,
                    format_number(meal.servings),
                    item.product_name,
                    format_number(item.quantity),
                ]
                if grouped:
                    fields.extend([str(entry), meal.name])
                lines.append(",".join(fields) + "\n")
    return "".join(lines)


@dataclass
class _PendingMeal:
    name: str
    servings: float
    items: list[MealItem] = field(default_factory=list)


def decode_daily_logs(
    text: str, source: str = "daily_logs"
) -> dict[tuple[str, date], DailyLog]:
    """Decode daily logs keyed by (username, day).

    Legacy lines each become a one-item meal named ``Loaded Meal``. Grouped
    lines sharing a user, day and entry index are merged back into one meal.
    Lines whose sixth field is not an entry index are skipped.

    Raises:
        CorruptRecordError: if a date field cannot be parsed.
    """
    pending: dict[tuple[str, date], list[_PendingMeal]] = {}
    grouped: dict[tuple[str, date, str], _PendingMeal] = {}
    for number, line in enumerate(_lines(text), start=1):
        parts = line.split(",", _GROUPED_LOG_FIELDS - 1)
        if len(parts) not in {_LEGACY_LOG_FIELDS, _GROUPED_LOG_FIELDS} or (
            len(parts) == _GROUPED_LOG_FIELDS and not parts[5].strip().isdigit()
        ):
            _skip(source, number, len(parts))
            continue
        username = parts[0]
        day = _parse_day(parts[1], source, number)
        servings = parse_or_default(parts[2], 1.0, float)
        item = MealItem(
            product_name=parts[3],
            quantity=parse_or_default(parts[4], 0.0, float),
        )
        meals = pending.setdefault((username, day), [])
        if len(parts) == _LEGACY_LOG_FIELDS:
            meals.append(_PendingMeal(LOADED_MEAL_NAME, servings, [item]))
            continue
        entry_key = (username, day, parts[5].strip())
        meal = grouped.get(entry_key)
        if meal is None:
            meal = _PendingMeal(parts[6], servings)
            grouped[entry_key] = meal
            meals.append(meal)
        meal.items.append(item)

    return {
        (username, day): DailyLog(
            username=username,
            day=day,
            meals=[
                Meal(name=meal.name, items=meal.items, servings=meal.servings)
                for meal in meals
            ],
        )
        for (username, day), meals in pending.items()
    }


def _parse_day(raw: str, source: str, line_number: int) -> date:
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError as exc:
        raise CorruptRecordError(source, line_number, f"invalid date {raw!r}") from exc


def _lines(text: str) -> list[str]:
    """Split text into lines on ``\\n``, dropping ``\\r`` and the final newline."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _skip(source: str, line_number: int, field_count: int) -> None:
    _logger.debug(
        "Skipping record: source=%s line=%s fields=%s",
        source,
        line_number,
        field_count,
    )
