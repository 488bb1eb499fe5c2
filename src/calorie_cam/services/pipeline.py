"""Meal ingestion pipeline for photos and typed descriptions.

Photo: classify -> filter labels -> nutrition lookup -> persist.
Text: nutrition lookup -> persist.

Both entry points return an ``IngestionResult`` instead of raising for
recoverable failures, so the caller only renders ``message`` and
``next_step``. Precondition failures (no user, blank text, a submission
already in flight) raise before any network call.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4

from calorie_cam.domain.meals import MealLog
from calorie_cam.errors import (
    AuthenticationError,
    ExternalServiceError,
    PersistenceError,
    ValidationError,
)
from calorie_cam.services.guard import SubmissionGuard
from calorie_cam.services.labels import build_food_query, extract_food_labels
from calorie_cam.services.meals import MealLogService
from calorie_cam.services.nutrition import NutritionService
from calorie_cam.services.vision import VisionService

_logger = logging.getLogger(__name__)

_EXAMPLE_QUERY = "Try something like '1 apple' or '2 eggs'."


class IngestionOutcome(Enum):
    """How a submission ended."""

    SAVED = "saved"
    NO_FOOD_DETECTED = "no_food_detected"
    NO_NUTRITION_MATCH = "no_nutrition_match"
    NO_RESULTS = "no_results"
    CLASSIFICATION_FAILED = "classification_failed"
    LOOKUP_FAILED = "lookup_failed"
    SAVE_FAILED = "save_failed"


class NextStep(Enum):
    """Action offered to the user after a submission."""

    NONE = "none"
    MANUAL_ENTRY = "manual_entry"
    EDIT_WORDING = "edit_wording"
    RETRY = "retry"


@dataclass(frozen=True)
class IngestionResult:
    """Result variant returned by both pipeline entry points."""

    outcome: IngestionOutcome
    message: str
    next_step: NextStep
    submission_id: UUID
    query: str | None = None
    suggestion: str | None = None
    meals: list[MealLog] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when meals were saved."""
        return self.outcome is IngestionOutcome.SAVED


@dataclass
class MealIngestionPipeline:
    """Orchestrates classification, lookup and persistence for one user action."""

    vision_service: VisionService
    nutrition_service: NutritionService
    meal_log_service: MealLogService
    guard: SubmissionGuard = field(default_factory=SubmissionGuard)

    async def capture_photo(
        self,
        user_id: UUID | None,
        image_bytes: bytes,
        image_uri: str | None = None,
        submission_id: UUID | None = None,
    ) -> IngestionResult:
        """Log the foods visible in a photo."""
        user = _require_user(user_id)
        submission = submission_id or uuid4()
        with self.guard.hold(user):
            try:
                concepts = await self.vision_service.classify(image_bytes)
            except ExternalServiceError as exc:
                _logger.exception(
                    "Image classification failed", extra={"user_id": str(user)}
                )
                return IngestionResult(
                    outcome=IngestionOutcome.CLASSIFICATION_FAILED,
                    message=f"Analysis failed: {exc.message}.",
                    next_step=NextStep.MANUAL_ENTRY,
                    submission_id=submission,
                )

            labels = extract_food_labels(concepts)
            if not labels:
                return IngestionResult(
                    outcome=IngestionOutcome.NO_FOOD_DETECTED,
                    message="No food detected. Please describe the food manually.",
                    next_step=NextStep.MANUAL_ENTRY,
                    submission_id=submission,
                )

            query = build_food_query(labels)
            result = await self._lookup_and_save(
                user, query, image_uri=image_uri, submission_id=submission
            )
            if result.outcome is IngestionOutcome.NO_RESULTS:
                return IngestionResult(
                    outcome=IngestionOutcome.NO_NUTRITION_MATCH,
                    message=(
                        f'Found "{query}" but couldn\'t find nutrition data. '
                        "Please enter it manually."
                    ),
                    next_step=NextStep.MANUAL_ENTRY,
                    submission_id=submission,
                    query=query,
                    suggestion=query,
                )
            return result

    async def describe_meal(
        self,
        user_id: UUID | None,
        text: str,
        submission_id: UUID | None = None,
    ) -> IngestionResult:
        """Log the foods in a typed description such as '1 apple, 2 eggs'."""
        user = _require_user(user_id)
        query = text.strip() if text else ""
        if not query:
            raise ValidationError(
                "Enter a food description, e.g. '1 apple' or '2 eggs'."
            )
        with self.guard.hold(user):
            return await self._lookup_and_save(
                user, query, image_uri=None, submission_id=submission_id or uuid4()
            )

    async def _lookup_and_save(
        self,
        user_id: UUID,
        query: str,
        image_uri: str | None,
        submission_id: UUID,
    ) -> IngestionResult:
        try:
            foods = await self.nutrition_service.lookup(query)
        except ExternalServiceError as exc:
            _logger.exception(
                "Nutrition lookup failed", extra={"user_id": str(user_id)}
            )
            return IngestionResult(
                outcome=IngestionOutcome.LOOKUP_FAILED,
                message=exc.message,
                next_step=NextStep.EDIT_WORDING,
                submission_id=submission_id,
                query=query,
                suggestion=query,
            )

        if not foods:
            return IngestionResult(
                outcome=IngestionOutcome.NO_RESULTS,
                message=f"No foods found for that query. {_EXAMPLE_QUERY}",
                next_step=NextStep.EDIT_WORDING,
                submission_id=submission_id,
                query=query,
                suggestion=query,
            )

        try:
            meals = self.meal_log_service.save_foods(
                user_id, foods, image_uri=image_uri, submission_id=submission_id
            )
        except PersistenceError as exc:
            return IngestionResult(
                outcome=IngestionOutcome.SAVE_FAILED,
                message=exc.message,
                next_step=NextStep.RETRY,
                submission_id=submission_id,
                query=query,
            )

        _logger.info(
            "Saved %s meal log(s)", len(meals), extra={"user_id": str(user_id)}
        )
        return IngestionResult(
            outcome=IngestionOutcome.SAVED,
            message=f"Found and saved nutrition for: {query}",
            next_step=NextStep.NONE,
            submission_id=submission_id,
            query=query,
            meals=meals,
        )


def _require_user(user_id: UUID | None) -> UUID:
    if user_id is None:
        raise AuthenticationError("User not authenticated")
    return user_id
