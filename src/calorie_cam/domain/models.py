"""Domain models for authenticated users."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthIdentity:
    """Authenticated user and the tokens that prove it."""

    user_id: UUID
    email: str | None
    access_token: str | None = None
    refresh_token: str | None = None
