"""Profile lifecycle and lifetime tracking stats."""

from collections import Counter
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_cam.domain.models import AuthIdentity
from calorie_cam.domain.profiles import Profile, ProfileStats
from calorie_cam.services.history import HistoryRepository
from calorie_cam.services.meals import round_calories


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    def create_profile(
        self, user_id: UUID, display_name: str | None, email: str | None
    ) -> Profile:
        """Create and return a profile."""

    def update_profile(self, user_id: UUID, display_name: str | None) -> Profile:
        """Update the display name and return the profile."""


@dataclass
class ProfileService:
    """Application service for profile actions."""

    repository: ProfileRepository
    meal_repository: HistoryRepository

    def get_or_create_profile(self, identity: AuthIdentity) -> Profile:
        """Return the user's profile, creating a default one if missing."""
        existing = self.repository.get_profile(identity.user_id)
        if existing:
            return existing
        display_name = identity.email.split("@")[0] if identity.email else None
        return self.repository.create_profile(
            identity.user_id, display_name, identity.email
        )

    def update_display_name(self, user_id: UUID, display_name: str | None) -> Profile:
        """Set the display name; a blank name clears it."""
        cleaned = display_name.strip() if display_name else ""
        return self.repository.update_profile(user_id, cleaned or None)

    def get_stats(self, user_id: UUID, timezone_name: str) -> ProfileStats:
        """Return lifetime totals across all of the user's meals."""
        meals = self.meal_repository.list_meal_logs(user_id)
        tz = ZoneInfo(timezone_name)
        total_calories = sum(meal.calories or 0 for meal in meals)
        days = {meal.logged_at.astimezone(tz).date() for meal in meals}
        counts = Counter(meal.food_name for meal in meals)
        return ProfileStats(
            total_meals=len(meals),
            avg_calories_per_day=(
                round_calories(total_calories / len(days)) if days else 0
            ),
            days_tracking=len(days),
            favorite_food=_most_frequent(counts),
        )


def _most_frequent(counts: Counter[str]) -> str:
    """Return the most logged food; ties go to the name seen last."""
    favorite = "None"
    best = 0
    for name, count in counts.items():
        if count >= best:
            favorite, best = name, count
    return favorite
