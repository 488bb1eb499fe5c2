"""Nutrition lookup service for natural-language food descriptions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from calorie_cam.domain.nutrition import FoodQueryResult, NutritionLookupResponse
from calorie_cam.errors import ExternalServiceError

_logger = logging.getLogger(__name__)


class NutritionClient(Protocol):
    """Interface for the natural-language nutrition API."""

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        """Return raw nutrient data for a free-text query."""


@dataclass
class NutritionService:
    """Service that turns food descriptions into structured nutrition facts."""

    client: NutritionClient
    debug: bool = False

    async def lookup(self, query: str) -> list[FoodQueryResult]:
        """Return one result per food parsed from the query.

        An empty list means the service matched nothing; callers should ask
        for a different description instead of retrying.
        """
        payload = await self.client.natural_nutrients(query)
        foods = _parse_foods(payload)
        if self.debug:
            _logger.info("Nutrition lookup: query=%s results=%s", query, len(foods))
        return foods


def _parse_foods(payload: dict[str, object]) -> list[FoodQueryResult]:
    try:
        response = NutritionLookupResponse.model_validate(
            {"foods": payload.get("foods") or []}
        )
    except PydanticValidationError as exc:
        raise ExternalServiceError(
            "nutritionix", f"malformed foods payload: {exc.error_count()} errors"
        ) from exc
    return response.foods
