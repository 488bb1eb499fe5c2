"""Supabase Auth gateway."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_cam.domain.models import AuthIdentity
from calorie_cam.errors import AuthenticationError
from calorie_cam.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway backed by Supabase Auth.

    Password flows run on a fresh anon-key client per call so one user's
    session never leaks into another request. Token checks and revocation go
    through the service-key client.
    """

    client_factory: Callable[[], Client]
    admin_client: Client

    def sign_up(
        self, email: str, password: str, display_name: str | None
    ) -> AuthIdentity | None:
        """Register with email and password (no email confirmation step)."""
        try:
            response = self.client_factory().auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"display_name": display_name}},
                }
            )
        except Exception as exc:
            raise AuthenticationError(f"Sign up failed: {exc}") from exc
        if response.user is None:
            return None
        return _to_identity(response.user, response.session)

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        """Sign in with email and password."""
        try:
            response = self.client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise AuthenticationError(f"Sign in failed: {exc}") from exc
        if response.user is None:
            raise AuthenticationError("Sign in failed: no user returned")
        return _to_identity(response.user, response.session)

    def sign_out(self, access_token: str | None) -> None:
        """Revoke all sessions issued for the access token's user."""
        if not access_token:
            return
        try:
            self.admin_client.auth.admin.sign_out(access_token)
        except Exception as exc:
            raise AuthenticationError(f"Sign out failed: {exc}") from exc

    def get_user(self, access_token: str) -> AuthIdentity | None:
        """Resolve an access token, returning None when it is not valid."""
        try:
            response = self.admin_client.auth.get_user(access_token)
        except Exception as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return AuthIdentity(
            user_id=UUID(str(response.user.id)),
            email=response.user.email,
            access_token=access_token,
        )


def _to_identity(user: object, session: object | None) -> AuthIdentity:
    return AuthIdentity(
        user_id=UUID(str(user.id)),
        email=getattr(user, "email", None),
        access_token=getattr(session, "access_token", None),
        refresh_token=getattr(session, "refresh_token", None),
    )
