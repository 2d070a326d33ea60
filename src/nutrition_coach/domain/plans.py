"""Models for AI recommendations and health-risk assessments."""

from typing import Literal

from nutrition_coach.domain.base import DocumentModel

RiskLevel = Literal["low", "medium", "high"]


class Recipe(DocumentModel):
    name: str
    ingredients: list[str]
    instructions: list[str]


class Meal(DocumentModel):
    name: str
    calories: float
    recipe: Recipe


class MealPlan(DocumentModel):
    """One-day meal plan."""

    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: Meal


class Exercise(DocumentModel):
    name: str
    sets: str
    reps: str
    description: str


class ExerciseDay(DocumentModel):
    day: str
    focus: str
    exercises: list[Exercise]


class ExercisePlan(DocumentModel):
    """Weekly exercise plan."""

    summary: str
    weekly_schedule: list[ExerciseDay]


class RecommendationResult(DocumentModel):
    """Personalized meal and exercise plan."""

    meal_plan: MealPlan
    exercise_plan: ExercisePlan


class PotentialRisk(DocumentModel):
    risk_name: str
    explanation: str
    recommendation: str


class HealthRiskAssessment(DocumentModel):
    """Long-term health risk assessment based on average intake."""

    overall_risk_level: RiskLevel
    summary: str
    potential_risks: list[PotentialRisk]
