"""Energy expenditure model and intake targets."""

from typing import Protocol

from nutrition_coach.domain.profile import Gender
from nutrition_coach.domain.stats import RecommendedIntake

FIBER_TARGET_G = 25.0
VITAMIN_C_TARGET_MG = 90.0
CALCIUM_TARGET_MG = 1000.0

CARB_SHARE = 0.5
PROTEIN_SHARE = 0.2
FAT_SHARE = 0.3
KCAL_PER_G_CARB = 4.0
KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_FAT = 9.0

_EVALUATION_MESSAGES: dict[float, str] = {
    1.2: (
        "Your activity level is sedentary. Try adding 2-3 sessions of light "
        "exercise a week, such as brisk walking or cycling, to raise your "
        "metabolism and improve your overall health."
    ),
    1.375: (
        "You are lightly active, which is a good start! To improve further, "
        "consider exercising 3-4 times a week and adding some moderate-"
        "intensity activities."
    ),
    1.55: (
        "Your activity level is moderate, great work! Keep up the habit. "
        "Regular exercise is key to maintaining weight and cardiovascular health."
    ),
    1.725: (
        "You are very active, which benefits your health a lot. Make sure your "
        "diet provides enough energy for your training and leave room for "
        "rest and recovery."
    ),
    1.9: (
        "You have an extremely high activity level, likely an athlete or heavy "
        "physical work. Professional nutrition support and recovery strategies "
        "are essential to keep your body performing at its best."
    ),
}

FALLBACK_EVALUATION_MESSAGE = "Adjust your lifestyle according to your activity level."


class BodyMetrics(Protocol):
    """Anthropometric inputs for the BMR formula."""

    age: int
    gender: Gender
    height: float
    weight: float


def calculate_bmr(metrics: BodyMetrics) -> float:
    """Return the basal metabolic rate in kcal/day."""
    if metrics.gender == "male":
        return (
            88.362
            + 13.397 * metrics.weight
            + 4.799 * metrics.height
            - 5.677 * metrics.age
        )
    return (
        447.593 + 9.247 * metrics.weight + 3.098 * metrics.height - 4.330 * metrics.age
    )


def calculate_tdee(bmr: float, activity_level: float) -> float:
    """Return total daily energy expenditure in kcal/day."""
    return bmr * activity_level


def evaluation_message(activity_level: float) -> str:
    """Return guidance text for one of the canonical activity coefficients."""
    return _EVALUATION_MESSAGES.get(activity_level, FALLBACK_EVALUATION_MESSAGE)


def recommended_intake(tdee: float, health_goal: str) -> RecommendedIntake:
    """Return daily targets using a fixed 50/20/30 carb/protein/fat split.

    The health goal is accepted for interface stability; the split does not
    depend on it.
    """
    return RecommendedIntake(
        calories=tdee,
        carbohydrates=tdee * CARB_SHARE / KCAL_PER_G_CARB,
        protein=tdee * PROTEIN_SHARE / KCAL_PER_G_PROTEIN,
        fat=tdee * FAT_SHARE / KCAL_PER_G_FAT,
        fiber=FIBER_TARGET_G,
        vitamin_c=VITAMIN_C_TARGET_MG,
        calcium=CALCIUM_TARGET_MG,
    )
