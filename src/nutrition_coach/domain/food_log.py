"""Domain models for the persisted food log."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from nutrition_coach.domain.analysis import AnalysisResult
from nutrition_coach.domain.base import DocumentModel
from nutrition_coach.domain.profile import Profile

MealType = Literal["breakfast", "lunch", "dinner", "snack"]

MEAL_TYPES: dict[str, str] = {
    "breakfast": "Breakfast",
    "lunch": "Lunch",
    "dinner": "Dinner",
    "snack": "Snack",
}


class FoodEntry(DocumentModel):
    """One logged meal with its analysis."""

    id: str
    date: str
    meal_type: MealType
    analysis: AnalysisResult

    @property
    def day(self) -> str:
        """Calendar day portion of the ISO timestamp."""
        return self.date.split("T", maxsplit=1)[0]

    @field_validator("date")
    @classmethod
    def _iso_timestamp(cls, value: str) -> str:
        datetime.fromisoformat(value)
        return value


class UserData(DocumentModel):
    """Root document holding the profile and the food log."""

    profile: Profile | None = None
    food_log: list[FoodEntry] = Field(default_factory=list)
