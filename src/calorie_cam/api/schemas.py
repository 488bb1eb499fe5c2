"""Pydantic models for HTTP request and response payloads."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from calorie_cam.domain.stats import DayHistory


class SignUpRequest(BaseModel):
    """Registration payload."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    display_name: str | None = None


class SignInRequest(BaseModel):
    """Email and password sign-in payload."""

    email: str
    password: str


class AuthResponse(BaseModel):
    """Identity and tokens issued by the auth backend."""

    state: str
    user_id: UUID | None = None
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None


class PhotoMealRequest(BaseModel):
    """Photo capture payload; the image travels base64-encoded."""

    image_base64: str = Field(min_length=1)
    image_uri: str | None = None
    submission_id: UUID | None = None


class TextMealRequest(BaseModel):
    """Typed meal description payload."""

    query: str
    submission_id: UUID | None = None


class MealLogOut(BaseModel):
    """Persisted meal log."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
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


class IngestionResponse(BaseModel):
    """Result of a photo or text submission."""

    outcome: str
    message: str
    next_step: str
    submission_id: UUID
    query: str | None = None
    suggestion: str | None = None
    meals: list[MealLogOut] = []


class DayHistoryOut(BaseModel):
    """Meals and totals for one local day."""

    day: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meals: list[MealLogOut]

    @classmethod
    def from_day(cls, entry: DayHistory) -> "DayHistoryOut":
        """Build the response model from an aggregated day."""
        return cls(
            day=entry.day,
            total_calories=entry.total_calories,
            total_protein=entry.total_protein,
            total_carbs=entry.total_carbs,
            total_fat=entry.total_fat,
            meals=[MealLogOut.model_validate(meal) for meal in entry.meals],
        )


class HistoryResponse(BaseModel):
    """History grouped by day, most recent first."""

    period: str
    days: list[DayHistoryOut]


class DashboardTotalsOut(BaseModel):
    """Today's totals."""

    model_config = ConfigDict(from_attributes=True)

    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int


class DashboardResponse(BaseModel):
    """Today's totals with the meals they were summed from."""

    totals: DashboardTotalsOut
    meals: list[MealLogOut]


class ProfileOut(BaseModel):
    """User profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: str | None
    email: str | None
    created_at: datetime | None
    updated_at: datetime | None


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields."""

    display_name: str | None = None


class ProfileStatsOut(BaseModel):
    """Lifetime tracking statistics."""

    model_config = ConfigDict(from_attributes=True)

    total_meals: int
    avg_calories_per_day: int
    days_tracking: int
    favorite_food: str
