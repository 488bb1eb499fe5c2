"""Domain models for user profiles."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Profile:
    """Profile row owned by an authenticated user."""

    id: UUID
    display_name: str | None
    email: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class ProfileStats:
    """Lifetime tracking statistics shown on the profile."""

    total_meals: int
    avg_calories_per_day: int
    days_tracking: int
    favorite_food: str
