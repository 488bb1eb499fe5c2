"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol
from uuid import UUID

from calorie_cam.domain.meals import MealLog, NewMealLog
from calorie_cam.domain.nutrition import FoodQueryResult
from calorie_cam.errors import AuthenticationError, NotFoundError, PersistenceError

_logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")


class MealLogRepository(Protocol):
    """Persistence interface for meal logs."""

    def insert_meal_log(self, meal: NewMealLog) -> MealLog:
        """Insert a meal log row and return it with its id."""

    def list_meal_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealLog]:
        """Return the user's meal logs in the range, newest first."""

    def list_submission_items(self, user_id: UUID, submission_id: UUID) -> set[int]:
        """Return item indexes already stored for a submission."""

    def delete_meal_log(self, user_id: UUID, meal_log_id: UUID) -> bool:
        """Delete a meal log owned by the user; return False when absent."""


@dataclass
class MealLogService:
    """Service that converts lookup results into persisted meal logs."""

    repository: MealLogRepository

    def save_foods(
        self,
        user_id: UUID | None,
        foods: list[FoodQueryResult],
        image_uri: str | None = None,
        submission_id: UUID | None = None,
    ) -> list[MealLog]:
        """Persist one meal log per food, in order, stopping at the first failure.

        Rows already stored for ``submission_id`` are skipped, so a failed
        batch can be retried with the same id without duplicating meals.
        """
        if user_id is None:
            raise AuthenticationError("User not authenticated")
        logged_at = datetime.now(tz=UTC)
        already_saved: set[int] = set()
        if submission_id is not None:
            already_saved = self.repository.list_submission_items(
                user_id, submission_id
            )

        saved: list[MealLog] = []
        for index, food in enumerate(foods):
            if index in already_saved:
                continue
            new_meal = build_new_meal_log(
                user_id=user_id,
                food=food,
                image_uri=image_uri,
                logged_at=logged_at,
                submission_id=submission_id,
                item_index=index,
            )
            try:
                saved.append(self.repository.insert_meal_log(new_meal))
            except Exception as exc:
                _logger.exception(
                    "Failed to insert meal log",
                    extra={"user_id": str(user_id), "food_name": food.food_name},
                )
                raise PersistenceError(
                    food.food_name, str(exc), saved_count=len(saved)
                ) from exc
        return saved

    def delete_meal(self, user_id: UUID, meal_log_id: UUID) -> None:
        """Delete a meal log owned by the user."""
        if not self.repository.delete_meal_log(user_id, meal_log_id):
            raise NotFoundError("Meal not found")


def build_new_meal_log(  # noqa: PLR0913
    user_id: UUID,
    food: FoodQueryResult,
    image_uri: str | None,
    logged_at: datetime,
    submission_id: UUID | None = None,
    item_index: int = 0,
) -> NewMealLog:
    """Apply rounding and defaulting rules to a lookup result."""
    return NewMealLog(
        user_id=user_id,
        food_name=food.food_name,
        serving_qty=food.serving_qty,
        serving_unit=food.serving_unit,
        calories=round_calories(food.nf_calories),
        protein=round_macro(food.nf_protein),
        carbs=round_macro(food.nf_total_carbohydrate),
        fat=round_macro(food.nf_total_fat),
        fiber=round_macro(food.nf_dietary_fiber),
        sugar=round_macro(food.nf_sugars),
        sodium=round_macro(food.nf_sodium),
        image_uri=image_uri,
        logged_at=logged_at,
        submission_id=submission_id,
        item_index=item_index,
    )


def round_calories(value: float | None) -> int:
    """Round calories half-up to a non-negative integer."""
    rounded = int(_to_decimal(value).quantize(_UNITS, rounding=ROUND_HALF_UP))
    return max(rounded, 0)


def round_macro(value: float | None) -> float:
    """Round a macro half-up to two decimals; missing becomes 0."""
    return float(_to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _to_decimal(value: float | None) -> Decimal:
    if value is None:
        return Decimal(0)
    decimal = Decimal(str(value))
    if not decimal.is_finite():
        return Decimal(0)
    return decimal
