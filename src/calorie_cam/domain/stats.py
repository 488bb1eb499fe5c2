"""Domain models for history and dashboard aggregates."""

from dataclasses import dataclass, field
from datetime import date

from calorie_cam.domain.meals import MealLog


@dataclass
class DayHistory:
    """Meals logged on one local calendar day with summed macros."""

    day: date
    meals: list[MealLog] = field(default_factory=list)
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0


@dataclass(frozen=True)
class DashboardTotals:
    """Today's totals."""

    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int
