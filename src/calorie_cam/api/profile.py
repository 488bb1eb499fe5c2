"""Profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from calorie_cam.api.dependencies import current_user, resolve_timezone
from calorie_cam.api.schemas import ProfileOut, ProfileStatsOut, ProfileUpdateRequest
from calorie_cam.domain.models import AuthIdentity  # noqa: TC001

if TYPE_CHECKING:
    from calorie_cam.containers import AppContainer

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    request: Request, user: AuthIdentity = Depends(current_user)
) -> ProfileOut:
    """Return the caller's profile, creating it on first access."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.get_or_create_profile(user)
    return ProfileOut.model_validate(profile)


@router.patch("")
async def update_profile(
    payload: ProfileUpdateRequest,
    request: Request,
    user: AuthIdentity = Depends(current_user),
) -> ProfileOut:
    """Update the caller's display name."""
    container: AppContainer = request.app.state.container
    container.profile_service.get_or_create_profile(user)
    profile = container.profile_service.update_display_name(
        user.user_id, payload.display_name
    )
    return ProfileOut.model_validate(profile)


@router.get("/stats")
async def profile_stats(
    request: Request,
    timezone: str = Depends(resolve_timezone),
    user: AuthIdentity = Depends(current_user),
) -> ProfileStatsOut:
    """Return lifetime tracking statistics."""
    container: AppContainer = request.app.state.container
    stats = container.profile_service.get_stats(user.user_id, timezone)
    return ProfileStatsOut.model_validate(stats)
