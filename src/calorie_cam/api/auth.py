"""Sign-up, sign-in and sign-out endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status

from calorie_cam.api.dependencies import current_session
from calorie_cam.api.schemas import AuthResponse, SignInRequest, SignUpRequest
from calorie_cam.services.auth import AuthSession  # noqa: TC001

if TYPE_CHECKING:
    from calorie_cam.containers import AppContainer
    from calorie_cam.domain.models import AuthIdentity

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(payload: SignUpRequest, request: Request) -> AuthResponse:
    """Register a user and create their profile."""
    container: AppContainer = request.app.state.container
    session = container.new_auth_session()
    try:
        identity = session.sign_up(
            payload.email, payload.password, payload.display_name
        )
        return _auth_response(session, identity)
    finally:
        session.dispose()


@router.post("/signin")
async def sign_in(payload: SignInRequest, request: Request) -> AuthResponse:
    """Authenticate with email and password."""
    container: AppContainer = request.app.state.container
    session = container.new_auth_session()
    try:
        identity = session.sign_in(payload.email, payload.password)
        return _auth_response(session, identity)
    finally:
        session.dispose()


@router.post("/signout")
async def sign_out(
    session: AuthSession = Depends(current_session),
) -> dict[str, str]:
    """Revoke the caller's session."""
    session.require_user()
    session.sign_out()
    return {"status": session.state.value}


def _auth_response(session: AuthSession, identity: AuthIdentity | None) -> AuthResponse:
    if identity is None:
        return AuthResponse(state=session.state.value)
    return AuthResponse(
        state=session.state.value,
        user_id=identity.user_id,
        email=identity.email,
        access_token=identity.access_token,
        refresh_token=identity.refresh_token,
    )
