"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from fastapi import Depends, Header, Request

from calorie_cam.config import parse_timezone
from calorie_cam.domain.models import AuthIdentity
from calorie_cam.services.auth import AuthSession

if TYPE_CHECKING:
    from calorie_cam.containers import AppContainer


def current_session(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Iterator[AuthSession]:
    """Yield an auth session restored from the bearer token, then dispose it."""
    container: AppContainer = request.app.state.container
    session = container.new_auth_session()
    session.restore(_bearer_token(authorization))
    try:
        yield session
    finally:
        session.dispose()


def current_user(session: AuthSession = Depends(current_session)) -> AuthIdentity:
    """Return the authenticated identity or fail with 401."""
    return session.require_user()


def resolve_timezone(request: Request, timezone: str | None = None) -> str:
    """Return the requested timezone, or the configured default."""
    container: AppContainer = request.app.state.container
    return parse_timezone(timezone, container.settings.default_timezone)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
