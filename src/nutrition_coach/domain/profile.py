"""Domain models for the user profile."""

from typing import Literal

from pydantic import Field, field_validator

from nutrition_coach.domain.base import DocumentModel

Gender = Literal["male", "female"]
HealthGoal = Literal["weightLoss", "muscleGain", "maintenance"]

ACTIVITY_LEVELS: dict[float, str] = {
    1.2: "Sedentary (little or no exercise)",
    1.375: "Lightly active (exercise 1-3 days/week)",
    1.55: "Moderately active (exercise 3-5 days/week)",
    1.725: "Very active (exercise 6-7 days/week)",
    1.9: "Extra active (physical job or twice-daily training)",
}

HEALTH_GOALS: dict[str, str] = {
    "weightLoss": "Lose weight and body fat",
    "muscleGain": "Build muscle",
    "maintenance": "Maintain health",
}


class ProfileForm(DocumentModel):
    """Submitted profile form before derived metrics are computed."""

    age: int = Field(gt=0)
    gender: Gender
    height: float = Field(gt=0.0)
    weight: float = Field(gt=0.0)
    activity_level: float
    health_goal: HealthGoal
    dietary_preferences: str | None = None
    common_activities: str | None = None

    @field_validator("activity_level")
    @classmethod
    def _known_activity_level(cls, value: float) -> float:
        if value not in ACTIVITY_LEVELS:
            allowed = ", ".join(str(level) for level in ACTIVITY_LEVELS)
            raise ValueError(f"activity level must be one of {allowed}")
        return value

    @field_validator("dietary_preferences", "common_activities")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class Profile(ProfileForm):
    """Saved profile with derived energy metrics."""

    bmr: float
    tdee: float
    evaluation_message: str
