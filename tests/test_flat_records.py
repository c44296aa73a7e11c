"""Tests for the flat-record codec."""

from datetime import date

import pytest

from diet_manager.adapters.flat_records import (
    LOADED_MEAL_NAME,
    decode_daily_logs,
    decode_meals,
    decode_products,
    decode_users,
    encode_daily_logs,
    encode_meals,
    encode_products,
    encode_users,
    format_number,
    parse_or_default,
)
from diet_manager.domain.models import DailyLog, Meal, MealItem, Product, User
from diet_manager.errors import CorruptRecordError
from diet_manager.services.daily_logs import aggregate
from diet_manager.services.nutrition import meal_totals
from tests.conftest import EGG, TOAST


def test_parse_or_default_falls_back_on_garbage() -> None:
    assert parse_or_default("2.5", 0.0, float) == 2.5
    assert parse_or_default(" 7 ", 0, int) == 7
    assert parse_or_default("abc", 0.0, float) == 0.0
    assert parse_or_default("", 1.0, float) == 1.0
    assert parse_or_default("1.5", 0, int) == 0


def test_format_number_drops_integral_fraction() -> None:
    assert format_number(155.0) == "155"
    assert format_number(2.5) == "2.5"
    assert format_number(30) == "30"
    assert format_number(0.1) == "0.1"


def test_products_round_trip() -> None:
    products = {EGG, TOAST}

    decoded = decode_products(encode_products(products))

    assert set(decoded.values()) == products


def test_users_round_trip() -> None:
    users = {
        User(name="alice", age=30, sex="F", height=165.5, weight=60),
        User(name="bob", age=41, sex="M", height=180, weight=82.3),
    }

    decoded = decode_users(encode_users(users))

    assert set(decoded.values()) == users


def test_products_line_format() -> None:
    assert encode_products([EGG]) == "egg,g,155,13,1\n"


def test_short_product_line_is_skipped() -> None:
    text = "egg,g,155,13\ntoast,slice,80,3,0.5\n"

    decoded = decode_products(text)

    assert list(decoded) == ["toast"]


def test_bad_numbers_default_to_zero() -> None:
    decoded = decode_users("carol,old,F,tall,60\n")

    user = decoded["carol"]
    assert user.age == 0
    assert user.height == 0
    assert user.weight == 60


def test_meals_round_trip_resets_servings() -> None:
    meals = [
        Meal(name="Breakfast", items=[MealItem("egg", 2), MealItem("toast", 1)]),
        Meal(name="Empty", items=[], servings=4),
    ]

    text = encode_meals(meals)
    decoded = decode_meals(text)

    assert text == "Breakfast\negg,2\ntoast,1\n\nEmpty\n\n"
    assert [meal.name for meal in decoded] == ["Breakfast", "Empty"]
    assert decoded[0].items == meals[0].items
    assert all(meal.servings == 1 for meal in decoded)


def test_meal_item_with_wrong_field_count_is_skipped() -> None:
    decoded = decode_meals("Lunch\negg,2\nbroken\ntoast,1,extra\n\n")

    assert decoded[0].items == [MealItem("egg", 2)]


def _breakfast_log() -> DailyLog:
    return DailyLog(
        username="alice",
        day=date(2024, 1, 1),
        meals=[
            Meal(
                name="Breakfast",
                items=[MealItem("egg", 2), MealItem("toast", 1)],
                servings=3,
            )
        ],
    )


def test_legacy_daily_logs_split_meals(catalog) -> None:
    log = _breakfast_log()

    text = encode_daily_logs([log], grouped=False)
    decoded = decode_daily_logs(text)

    assert text == (
        "alice,2024-01-01,3,egg,2\n"
        "alice,2024-01-01,3,toast,1\n"
    )
    reloaded = decoded[("alice", date(2024, 1, 1))]
    assert [meal.name for meal in reloaded.meals] == [LOADED_MEAL_NAME] * 2
    assert [meal.items for meal in reloaded.meals] == [
        [MealItem("egg", 2)],
        [MealItem("toast", 1)],
    ]
    assert all(meal.servings == 3 for meal in reloaded.meals)
    assert aggregate(reloaded, catalog) == aggregate(log, catalog)


def test_grouped_daily_logs_keep_meal_structure(catalog) -> None:
    log = _breakfast_log()
    log.meals.append(Meal(name="Tea, biscuits", items=[MealItem("toast", 2)]))

    decoded = decode_daily_logs(encode_daily_logs([log]))

    reloaded = decoded[("alice", date(2024, 1, 1))]
    assert reloaded.meals == log.meals
    assert meal_totals(reloaded.meals[0], catalog).calories == 1170


def test_mixed_legacy_and_grouped_lines() -> None:
    text = (
        "alice,2024-01-01,1,egg,1\n"
        "alice,2024-01-01,2,toast,1,0,Lunch\n"
        "alice,2024-01-01,2,egg,1,0,Lunch\n"
    )

    reloaded = decode_daily_logs(text)[("alice", date(2024, 1, 1))]

    assert [meal.name for meal in reloaded.meals] == [LOADED_MEAL_NAME, "Lunch"]
    assert reloaded.meals[1].items == [MealItem("toast", 1), MealItem("egg", 1)]


def test_daily_log_line_with_wrong_field_count_is_skipped() -> None:
    text = "alice,2024-01-01,1\nalice,2024-01-02,1,egg,1\n"

    decoded = decode_daily_logs(text)

    assert list(decoded) == [("alice", date(2024, 1, 2))]


def test_daily_log_line_without_entry_index_is_skipped() -> None:
    text = "alice,2024-01-01,1,egg,1,x,y,z\nalice,2024-01-02,1,egg,1,0,Lunch, late\n"

    decoded = decode_daily_logs(text)

    assert list(decoded) == [("alice", date(2024, 1, 2))]
    assert decoded[("alice", date(2024, 1, 2))].meals[0].name == "Lunch, late"


def test_daily_log_bad_servings_defaults_to_one() -> None:
    decoded = decode_daily_logs("alice,2024-01-01,lots,egg,x\n")

    [meal] = decoded[("alice", date(2024, 1, 1))].meals
    assert meal.servings == 1
    assert meal.items == [MealItem("egg", 0)]


def test_unparseable_date_aborts_load() -> None:
    with pytest.raises(CorruptRecordError) as excinfo:
        decode_daily_logs("alice,2024-01-01,1,egg,1\nalice,yesterday,1,egg,1\n")

    assert excinfo.value.line_number == 2


def test_crlf_line_endings_are_accepted() -> None:
    decoded = decode_products("egg,g,155,13,1\r\n")

    assert decoded["egg"] == Product(
        name="egg", unit="g", calories=155, proteins=13, minerals=1
    )
