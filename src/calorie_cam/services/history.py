"""History and dashboard aggregation for meal logs."""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from enum import Enum
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_cam.domain.meals import MealLog
from calorie_cam.domain.stats import DashboardTotals, DayHistory

JANUARY = 1
DECEMBER = 12


class HistoryPeriod(Enum):
    """Relative window used to filter history queries."""

    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class HistoryRepository(Protocol):
    """Read interface for meal logs."""

    def list_meal_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealLog]:
        """Return meal logs within an inclusive range, newest first."""


@dataclass
class HistoryService:
    """Service for per-day history and today's dashboard in a user's timezone."""

    repository: HistoryRepository

    def get_history(
        self, user_id: UUID, period: HistoryPeriod, timezone_name: str
    ) -> dict[date, DayHistory]:
        """Return meals grouped by local day, most recent day first."""
        start = period_start(period, datetime.now(tz=UTC))
        meals = self.repository.list_meal_logs(user_id, start=start)
        return group_meals_by_day(meals, ZoneInfo(timezone_name))

    def get_dashboard(
        self, user_id: UUID, timezone_name: str
    ) -> tuple[DashboardTotals, list[MealLog]]:
        """Return today's totals and meal logs."""
        tz = ZoneInfo(timezone_name)
        now = datetime.now(tz=tz)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1) - timedelta(microseconds=1)
        meals = self.repository.list_meal_logs(
            user_id, start=start.astimezone(UTC), end=end.astimezone(UTC)
        )
        return summarize_dashboard(meals), meals


def period_start(period: HistoryPeriod, now: datetime) -> datetime | None:
    """Return the inclusive lower bound for a history period."""
    if period is HistoryPeriod.WEEK:
        return now - timedelta(days=7)
    if period is HistoryPeriod.MONTH:
        return _one_month_before(now)
    return None


def group_meals_by_day(
    meals: Iterable[MealLog], tz: ZoneInfo
) -> dict[date, DayHistory]:
    """Group meals by local calendar date, keeping first-seen date order."""
    grouped: dict[date, DayHistory] = {}
    for meal in meals:
        day = meal.logged_at.astimezone(tz).date()
        entry = grouped.get(day)
        if entry is None:
            entry = DayHistory(day=day)
            grouped[day] = entry
        entry.meals.append(meal)
        entry.total_calories += meal.calories or 0
        entry.total_protein += meal.protein or 0
        entry.total_carbs += meal.carbs or 0
        entry.total_fat += meal.fat or 0
    return grouped


def summarize_dashboard(meals: Iterable[MealLog]) -> DashboardTotals:
    """Sum macros and count meals; all zeros for an empty day."""
    calories = protein = carbs = fat = 0.0
    count = 0
    for meal in meals:
        calories += meal.calories or 0
        protein += meal.protein or 0
        carbs += meal.carbs or 0
        fat += meal.fat or 0
        count += 1
    return DashboardTotals(
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fat=fat,
        meal_count=count,
    )


def _one_month_before(moment: datetime) -> datetime:
    if moment.month == JANUARY:
        year, month = moment.year - 1, DECEMBER
    else:
        year, month = moment.year, moment.month - 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
