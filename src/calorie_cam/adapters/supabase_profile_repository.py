"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_cam.domain.profiles import Profile
from calorie_cam.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("id, display_name, email, created_at, updated_at")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_profile(response.data[0])
        return None

    def create_profile(
        self, user_id: UUID, display_name: str | None, email: str | None
    ) -> Profile:
        """Create a new profile row and return it."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("profiles")
            .insert(
                {
                    "id": str(user_id),
                    "display_name": display_name,
                    "email": email,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return _parse_profile(response.data[0])

    def update_profile(self, user_id: UUID, display_name: str | None) -> Profile:
        """Update the display name and refresh updated_at."""
        response = (
            self.client.table("profiles")
            .update(
                {
                    "display_name": display_name,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update profile in Supabase")
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> Profile:
    return Profile(
        id=UUID(row["id"]),
        display_name=row.get("display_name"),
        email=row.get("email"),
        created_at=_parse_optional_timestamp(row.get("created_at")),
        updated_at=_parse_optional_timestamp(row.get("updated_at")),
    )


def _parse_optional_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
