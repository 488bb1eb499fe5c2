"""Nutrition lookup models validated at the API boundary."""

from pydantic import BaseModel, ConfigDict, field_validator


class FoodQueryResult(BaseModel):
    """One food item parsed out of a natural-language nutrition query."""

    model_config = ConfigDict(extra="ignore")

    food_name: str
    serving_qty: float = 1.0
    serving_unit: str = "serving"
    nf_calories: float | None = None
    nf_protein: float | None = None
    nf_total_carbohydrate: float | None = None
    nf_total_fat: float | None = None
    nf_dietary_fiber: float | None = None
    nf_sugars: float | None = None
    nf_sodium: float | None = None

    @field_validator("serving_qty", mode="before")
    @classmethod
    def _default_serving_qty(cls, value: object) -> object:
        if value is None or value == 0:
            return 1.0
        return value

    @field_validator("serving_unit", mode="before")
    @classmethod
    def _default_serving_unit(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "serving"
        return value


class NutritionLookupResponse(BaseModel):
    """Envelope returned by the natural-language nutrients endpoint."""

    model_config = ConfigDict(extra="ignore")

    foods: list[FoodQueryResult] = []
