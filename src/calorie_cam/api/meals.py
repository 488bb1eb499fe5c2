"""Meal capture, history and dashboard endpoints."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from calorie_cam.api.dependencies import current_user, resolve_timezone
from calorie_cam.api.schemas import (
    DashboardResponse,
    DashboardTotalsOut,
    DayHistoryOut,
    HistoryResponse,
    IngestionResponse,
    MealLogOut,
    PhotoMealRequest,
    TextMealRequest,
)
from calorie_cam.domain.models import AuthIdentity  # noqa: TC001
from calorie_cam.errors import ValidationError
from calorie_cam.services.history import HistoryPeriod

if TYPE_CHECKING:
    from calorie_cam.containers import AppContainer
    from calorie_cam.services.pipeline import IngestionResult

router = APIRouter(tags=["meals"])


@router.post("/meals/photo")
async def capture_photo(
    payload: PhotoMealRequest,
    request: Request,
    user: AuthIdentity = Depends(current_user),
) -> IngestionResponse:
    """Classify a meal photo, look up its nutrition and log it."""
    container: AppContainer = request.app.state.container
    image_bytes = _decode_image(payload.image_base64)
    result = await container.ingestion_pipeline.capture_photo(
        user.user_id,
        image_bytes,
        image_uri=payload.image_uri,
        submission_id=payload.submission_id,
    )
    return _ingestion_response(result)


@router.post("/meals/text")
async def describe_meal(
    payload: TextMealRequest,
    request: Request,
    user: AuthIdentity = Depends(current_user),
) -> IngestionResponse:
    """Look up a typed meal description and log it."""
    container: AppContainer = request.app.state.container
    result = await container.ingestion_pipeline.describe_meal(
        user.user_id, payload.query, submission_id=payload.submission_id
    )
    return _ingestion_response(result)


@router.get("/meals")
async def list_history(
    request: Request,
    period: HistoryPeriod = HistoryPeriod.WEEK,
    timezone: str = Depends(resolve_timezone),
    user: AuthIdentity = Depends(current_user),
) -> HistoryResponse:
    """Return meals grouped by day for the selected period."""
    container: AppContainer = request.app.state.container
    grouped = container.history_service.get_history(user.user_id, period, timezone)
    return HistoryResponse(
        period=period.value,
        days=[DayHistoryOut.from_day(entry) for entry in grouped.values()],
    )


@router.delete("/meals/{meal_id}")
async def delete_meal(
    meal_id: UUID,
    request: Request,
    user: AuthIdentity = Depends(current_user),
) -> dict[str, str]:
    """Delete one of the caller's meals."""
    container: AppContainer = request.app.state.container
    container.meal_log_service.delete_meal(user.user_id, meal_id)
    return {"status": "deleted"}


@router.get("/dashboard")
async def dashboard(
    request: Request,
    timezone: str = Depends(resolve_timezone),
    user: AuthIdentity = Depends(current_user),
) -> DashboardResponse:
    """Return today's totals and meals."""
    container: AppContainer = request.app.state.container
    totals, meals = container.history_service.get_dashboard(user.user_id, timezone)
    return DashboardResponse(
        totals=DashboardTotalsOut.model_validate(totals),
        meals=[MealLogOut.model_validate(meal) for meal in meals],
    )


def _decode_image(image_base64: str) -> bytes:
    """Decode a base64 image, accepting data URLs."""
    _, _, encoded = image_base64.rpartition(",")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Image is not valid base64 data.") from exc


def _ingestion_response(result: IngestionResult) -> IngestionResponse:
    return IngestionResponse(
        outcome=result.outcome.value,
        message=result.message,
        next_step=result.next_step.value,
        submission_id=result.submission_id,
        query=result.query,
        suggestion=result.suggestion,
        meals=[MealLogOut.model_validate(meal) for meal in result.meals],
    )
