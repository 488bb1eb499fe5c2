"""Image classification service."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from calorie_cam.domain.vision import VisualConcept
from calorie_cam.errors import ExternalServiceError

_logger = logging.getLogger(__name__)


class ClassificationClient(Protocol):
    """Interface for the image classification API."""

    async def predict(self, image_base64: str) -> dict[str, object]:
        """Return the raw classification payload for a base64 image."""


@dataclass
class VisionService:
    """Service that classifies images into ranked visual concepts."""

    client: ClassificationClient
    debug: bool = False

    async def classify(self, image_bytes: bytes) -> list[VisualConcept]:
        """Classify an image and return concepts in the service's order."""
        payload = await self.client.predict(_to_base64(image_bytes))
        concepts = _parse_concepts(payload)
        if self.debug:
            _logger.info(
                "Classification concepts: %s",
                ", ".join(f"{c.name}={c.confidence:.2f}" for c in concepts),
            )
        return concepts


def _to_base64(image_bytes: bytes) -> str:
    """Encode raw image bytes for JSON transport."""
    return base64.b64encode(image_bytes).decode("utf-8")


def _parse_concepts(payload: dict[str, object]) -> list[VisualConcept]:
    """Read ``outputs[0].data.concepts`` into validated concepts."""
    outputs = payload.get("outputs")
    if not isinstance(outputs, list):
        raise ExternalServiceError("clarifai", "response is missing outputs")
    if not outputs:
        return []
    first = outputs[0]
    if not isinstance(first, dict):
        raise ExternalServiceError("clarifai", "output is not an object")
    data = first.get("data")
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ExternalServiceError("clarifai", "output data is not an object")
    raw_concepts = data.get("concepts") or []
    if not isinstance(raw_concepts, list):
        raise ExternalServiceError("clarifai", "concepts is not a list")
    try:
        return [
            VisualConcept(name=concept["name"], confidence=concept["value"])
            for concept in raw_concepts
        ]
    except (KeyError, TypeError, PydanticValidationError) as exc:
        raise ExternalServiceError("clarifai", f"malformed concept: {exc}") from exc
