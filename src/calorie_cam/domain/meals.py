"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class NewMealLog:
    """Insert payload for a meal log row."""

    user_id: UUID
    food_name: str
    serving_qty: float
    serving_unit: str
    calories: int
    protein: float
    carbs: float
    fat: float
    fiber: float
    sugar: float
    sodium: float
    image_uri: str | None
    logged_at: datetime
    submission_id: UUID | None = None
    item_index: int = 0


@dataclass(frozen=True)
class MealLog:
    """Persisted record of one food item tied to a user and a timestamp."""

    id: UUID
    user_id: UUID
    food_name: str
    serving_qty: float
    serving_unit: str
    calories: int
    protein: float
    carbs: float
    fat: float
    fiber: float
    sugar: float
    sodium: float
    image_uri: str | None
    logged_at: datetime
    submission_id: UUID | None = None
    item_index: int = 0
