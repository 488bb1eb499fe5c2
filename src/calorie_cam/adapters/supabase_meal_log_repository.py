"""Supabase repository for meal logs."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_cam.domain.meals import MealLog, NewMealLog
from calorie_cam.services.history import HistoryRepository
from calorie_cam.services.meals import MealLogRepository

_COLUMNS = (
    "id, user_id, food_name, serving_qty, serving_unit, calories, protein, carbs, "
    "fat, fiber, sugar, sodium, image_uri, logged_at, submission_id, item_index"
)


@dataclass
class SupabaseMealLogRepository(MealLogRepository, HistoryRepository):
    """Supabase implementation for meal logs."""

    client: Client

    def insert_meal_log(self, meal: NewMealLog) -> MealLog:
        """Insert a meal log row and return it."""
        response = (
            self.client.table("meal_logs")
            .insert(
                {
                    "user_id": str(meal.user_id),
                    "food_name": meal.food_name,
                    "serving_qty": meal.serving_qty,
                    "serving_unit": meal.serving_unit,
                    "calories": meal.calories,
                    "protein": meal.protein,
                    "carbs": meal.carbs,
                    "fat": meal.fat,
                    "fiber": meal.fiber,
                    "sugar": meal.sugar,
                    "sodium": meal.sodium,
                    "image_uri": meal.image_uri,
                    "logged_at": meal.logged_at.isoformat(),
                    "submission_id": (
                        str(meal.submission_id) if meal.submission_id else None
                    ),
                    "item_index": meal.item_index,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal log")
        return _parse_row(response.data[0])

    def list_meal_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealLog]:
        """Return meal logs in the inclusive range, newest first."""
        query = (
            self.client.table("meal_logs")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("logged_at", start.isoformat())
        if end is not None:
            query = query.lte("logged_at", end.isoformat())
        response = query.order("logged_at", desc=True).execute()
        return [_parse_row(row) for row in response.data or []]

    def list_submission_items(self, user_id: UUID, submission_id: UUID) -> set[int]:
        """Return item indexes already stored for a submission."""
        response = (
            self.client.table("meal_logs")
            .select("item_index")
            .eq("user_id", str(user_id))
            .eq("submission_id", str(submission_id))
            .execute()
        )
        return {int(row.get("item_index", 0)) for row in response.data or []}

    def delete_meal_log(self, user_id: UUID, meal_log_id: UUID) -> bool:
        """Delete a meal log owned by the user."""
        response = (
            self.client.table("meal_logs")
            .delete()
            .eq("id", str(meal_log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> MealLog:
    submission_id = row.get("submission_id")
    return MealLog(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        food_name=str(row.get("food_name", "")),
        serving_qty=float(row.get("serving_qty") or 1),
        serving_unit=str(row.get("serving_unit") or "serving"),
        calories=int(row.get("calories") or 0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        fiber=float(row.get("fiber") or 0.0),
        sugar=float(row.get("sugar") or 0.0),
        sodium=float(row.get("sodium") or 0.0),
        image_uri=row.get("image_uri"),
        logged_at=_parse_timestamp(row.get("logged_at")),
        submission_id=UUID(submission_id) if submission_id else None,
        item_index=int(row.get("item_index") or 0),
    )


def _parse_timestamp(raw: object) -> datetime:
    if not isinstance(raw, str) or not raw:
        return datetime.min.replace(tzinfo=UTC)
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
