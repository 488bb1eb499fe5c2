"""Tests for meal log service."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from calorie_cam.domain.nutrition import FoodQueryResult
from calorie_cam.errors import AuthenticationError, NotFoundError, PersistenceError
from calorie_cam.services.meals import (
    MealLogService,
    build_new_meal_log,
    round_calories,
    round_macro,
)
from tests.conftest import USER_ID, InMemoryMealLogRepository, make_meal


def _food(name: str, **nutrients: float | None) -> FoodQueryResult:
    return FoodQueryResult(food_name=name, **nutrients)


def test_build_new_meal_log_rounds_and_defaults() -> None:
    logged_at = datetime(2024, 1, 1, 8, tzinfo=UTC)
    food = FoodQueryResult(
        food_name="pizza",
        serving_qty=None,
        serving_unit=None,
        nf_calories=284.5,
        nf_protein=12.3456,
        nf_total_carbohydrate=None,
    )

    meal = build_new_meal_log(USER_ID, food, image_uri=None, logged_at=logged_at)

    assert meal.calories == 285
    assert meal.protein == 12.35
    assert meal.carbs == 0
    assert meal.fat == 0
    assert meal.serving_qty == 1.0
    assert meal.serving_unit == "serving"
    assert meal.logged_at == logged_at


def test_rounding_helpers() -> None:
    assert round_calories(None) == 0
    assert round_calories(99.4) == 99
    assert round_calories(-3) == 0
    assert round_macro(0.125) == 0.13
    assert round_macro(float("nan")) == 0


def test_save_foods_persists_in_order() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)

    saved = service.save_foods(
        USER_ID,
        [_food("egg", nf_calories=72), _food("toast", nf_calories=80)],
        image_uri="file://breakfast.jpg",
    )

    assert [meal.food_name for meal in saved] == ["egg", "toast"]
    assert [meal.item_index for meal in saved] == [0, 1]
    assert saved[0].logged_at == saved[1].logged_at
    assert all(meal.image_uri == "file://breakfast.jpg" for meal in saved)


def test_save_foods_requires_user() -> None:
    repo = InMemoryMealLogRepository()

    with pytest.raises(AuthenticationError, match="User not authenticated"):
        MealLogService(repo).save_foods(None, [_food("egg")])

    assert repo.inserts == []


def test_save_foods_stops_at_first_failure() -> None:
    repo = InMemoryMealLogRepository(fail_on={"toast"})
    foods = [_food("egg"), _food("toast"), _food("jam")]

    with pytest.raises(PersistenceError) as excinfo:
        MealLogService(repo).save_foods(USER_ID, foods)

    assert excinfo.value.food_name == "toast"
    assert excinfo.value.saved_count == 1
    assert str(excinfo.value) == "Failed to save toast: insert rejected"
    assert [meal.food_name for meal in repo.inserts] == ["egg", "toast"]


def test_retry_with_submission_id_skips_saved_items() -> None:
    repo = InMemoryMealLogRepository(fail_on={"toast"})
    service = MealLogService(repo)
    submission_id = uuid4()
    foods = [_food("egg"), _food("toast")]

    with pytest.raises(PersistenceError):
        service.save_foods(USER_ID, foods, submission_id=submission_id)
    repo.fail_on = set()
    saved = service.save_foods(USER_ID, foods, submission_id=submission_id)

    assert [meal.food_name for meal in saved] == ["toast"]
    assert [meal.food_name for meal in repo.meals] == ["egg", "toast"]


def test_delete_meal() -> None:
    meal = make_meal(datetime(2024, 1, 1, tzinfo=UTC))
    repo = InMemoryMealLogRepository(meals=[meal])
    service = MealLogService(repo)

    service.delete_meal(USER_ID, meal.id)

    assert repo.meals == []
    with pytest.raises(NotFoundError):
        service.delete_meal(USER_ID, meal.id)


def test_delete_meal_of_other_user_is_not_found() -> None:
    meal = make_meal(datetime(2024, 1, 1, tzinfo=UTC), user_id=uuid4())
    repo = InMemoryMealLogRepository(meals=[meal])

    with pytest.raises(NotFoundError):
        MealLogService(repo).delete_meal(USER_ID, meal.id)

    assert repo.meals == [meal]
