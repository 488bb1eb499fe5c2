"""Models for image classification results."""

from pydantic import BaseModel, Field


class VisualConcept(BaseModel):
    """Single visual concept returned by the classifier."""

    name: str
    confidence: float = Field(ge=0.0, le=1.0)
