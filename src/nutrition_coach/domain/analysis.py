"""Models for AI food-image analysis results."""

from pydantic import Field

from nutrition_coach.domain.base import DocumentModel


class Nutrients(DocumentModel):
    """Nutrients of a single food component."""

    protein: float = Field(ge=0.0)
    carbohydrates: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    fiber: float = Field(ge=0.0)
    sodium: float = Field(ge=0.0)
    vitamin_c: float = Field(ge=0.0)
    calcium: float = Field(ge=0.0)


class FoodComponent(DocumentModel):
    """One identified element of a meal."""

    name: str
    weight: float = Field(ge=0.0)
    calories: float = Field(ge=0.0)
    nutrients: Nutrients
    analysis: str


class AnalysisResult(DocumentModel):
    """Structured output of a food-image analysis."""

    food_name: str
    main_components: list[FoodComponent]
    total_calories: float = Field(ge=0.0)
    nutrition_tags: list[str]
    dietary_advice: list[str]
