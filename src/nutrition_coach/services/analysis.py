"""Request formatting and reply parsing for the external AI service."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from nutrition_coach.domain.analysis import AnalysisResult
from nutrition_coach.domain.plans import HealthRiskAssessment, RecommendationResult
from nutrition_coach.domain.profile import HEALTH_GOALS, Profile
from nutrition_coach.domain.stats import DailyTotals
from nutrition_coach.errors import AIServiceError, MalformedResponseError
from nutrition_coach.services.images import to_data_url

DEFAULT_RESPONSE_LANGUAGE = "Traditional Chinese"

_logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


def _object(properties: dict[str, object]) -> dict[str, object]:
    """Strict-mode object schema requiring every property."""
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def _string_array() -> dict[str, object]:
    return {"type": "array", "items": {"type": "string"}}


_NUTRIENTS_SCHEMA = _object(
    {
        "protein": {"type": "number", "description": "Protein in grams."},
        "carbohydrates": {"type": "number", "description": "Carbohydrates in grams."},
        "fat": {"type": "number", "description": "Fat in grams."},
        "fiber": {"type": "number", "description": "Dietary fiber in grams."},
        "sodium": {"type": "number", "description": "Sodium in milligrams."},
        "vitaminC": {"type": "number", "description": "Vitamin C in milligrams."},
        "calcium": {"type": "number", "description": "Calcium in milligrams."},
    }
)

FOOD_ANALYSIS_SCHEMA: dict[str, object] = _object(
    {
        "foodName": {"type": "string", "description": "Name of the meal."},
        "mainComponents": {
            "type": "array",
            "description": "Main food components visible in the image.",
            "items": _object(
                {
                    "name": {"type": "string"},
                    "weight": {
                        "type": "number",
                        "description": "Estimated weight in grams.",
                    },
                    "calories": {
                        "type": "number",
                        "description": "Estimated calories for this component.",
                    },
                    "nutrients": _NUTRIENTS_SCHEMA,
                    "analysis": {
                        "type": "string",
                        "description": "Brief nutritional analysis of the component.",
                    },
                }
            ),
        },
        "totalCalories": {
            "type": "number",
            "description": "Total estimated calories for the entire meal.",
        },
        "nutritionTags": {
            **_string_array(),
            "description": "Keywords such as high-protein or low-carb.",
        },
        "dietaryAdvice": {
            **_string_array(),
            "description": "Advice related to this meal.",
        },
    }
)

_MEAL_SCHEMA = _object(
    {
        "name": {"type": "string"},
        "calories": {"type": "number"},
        "recipe": _object(
            {
                "name": {"type": "string"},
                "ingredients": _string_array(),
                "instructions": _string_array(),
            }
        ),
    }
)

RECOMMENDATION_SCHEMA: dict[str, object] = _object(
    {
        "mealPlan": _object(
            {
                "breakfast": _MEAL_SCHEMA,
                "lunch": _MEAL_SCHEMA,
                "dinner": _MEAL_SCHEMA,
                "snacks": _MEAL_SCHEMA,
            }
        ),
        "exercisePlan": _object(
            {
                "summary": {"type": "string"},
                "weeklySchedule": {
                    "type": "array",
                    "items": _object(
                        {
                            "day": {"type": "string"},
                            "focus": {"type": "string"},
                            "exercises": {
                                "type": "array",
                                "items": _object(
                                    {
                                        "name": {"type": "string"},
                                        "sets": {"type": "string"},
                                        "reps": {"type": "string"},
                                        "description": {"type": "string"},
                                    }
                                ),
                            },
                        }
                    ),
                },
            }
        ),
    }
)

HEALTH_RISK_SCHEMA: dict[str, object] = _object(
    {
        "overallRiskLevel": {"type": "string", "enum": ["low", "medium", "high"]},
        "summary": {
            "type": "string",
            "description": "Summary of long-term health risks based on the diet.",
        },
        "potentialRisks": {
            "type": "array",
            "items": _object(
                {
                    "riskName": {"type": "string"},
                    "explanation": {
                        "type": "string",
                        "description": "Why this is a risk given the data.",
                    },
                    "recommendation": {
                        "type": "string",
                        "description": "Actionable steps to mitigate the risk.",
                    },
                }
            ),
        },
    }
)


@dataclass(frozen=True)
class AIRequest:
    """A single structured request to the external model."""

    name: str
    prompt: str
    schema: dict[str, object]
    image_data_url: str | None = None


class LLMClient(Protocol):
    """Interface for structured LLM generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        name: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> str:
        """Return the raw JSON text produced by the model."""


def build_food_analysis_request(
    image_bytes: bytes, language: str = DEFAULT_RESPONSE_LANGUAGE
) -> AIRequest:
    """Build the request for analyzing a prepared food photo."""
    prompt = (
        "You are a professional nutritionist. Analyze the nutritional content "
        "of the food in this image and provide a detailed nutrition report. "
        "Identify the main components, estimate each component's weight, "
        "calories and nutrients, and give tags and dietary advice. "
        f"Write all text in {language}. "
        "Your reply must be JSON that strictly follows the provided schema."
    )
    return AIRequest(
        name="food_analysis",
        prompt=prompt,
        schema=FOOD_ANALYSIS_SCHEMA,
        image_data_url=to_data_url(image_bytes),
    )


def build_recommendation_request(
    profile: Profile, language: str = DEFAULT_RESPONSE_LANGUAGE
) -> AIRequest:
    """Build the request for a one-day meal plan and a weekly exercise plan."""
    prompt = "\n".join(
        [
            "You are an experienced registered dietitian and certified personal "
            "trainer who builds personalized, sustainable health plans.",
            "Based on the user profile below, create a detailed one-day meal "
            "plan and a one-week exercise plan.",
            f"Write all text in {language}.",
            "",
            "User profile:",
            *_profile_lines(profile),
            f"- Dietary preferences: {profile.dietary_preferences or 'not specified'}",
            f"- Daily activities / interests: "
            f"{profile.common_activities or 'not specified'}",
            "",
            "Meal plan:",
            "- Include breakfast, lunch, dinner and one snack.",
            "- Total calories should be close to the TDEE, slightly lower for "
            "weight loss and slightly higher for muscle gain.",
            "- Adjust the macronutrient balance to the health goal.",
            "- Give a simple recipe with ingredients and steps for every meal.",
            "- Respect the dietary preferences: offer healthy alternatives "
            "rather than banning foods the user enjoys.",
            "",
            "Exercise plan:",
            "- Plan 3-5 practical training days per week.",
            "- Weight loss: combine cardio with basic strength training. "
            "Muscle gain: focus on strength with some cardio. "
            "Maintenance: include varied activities.",
            "- Give each day a focus, and each exercise a name, sets, reps "
            "and a short description.",
            "- Build on the user's existing activities so the plan is easy "
            "to follow.",
            "",
            "Reply strictly in the provided JSON schema.",
        ]
    )
    return AIRequest(
        name="recommendations", prompt=prompt, schema=RECOMMENDATION_SCHEMA
    )


def build_health_risk_request(
    profile: Profile,
    average_intake: DailyTotals,
    language: str = DEFAULT_RESPONSE_LANGUAGE,
) -> AIRequest:
    """Build the request for a long-term health risk assessment."""
    prompt = "\n".join(
        [
            "You are a registered dietitian and preventive medicine specialist "
            "with strong data analysis skills. Assess the user's potential "
            "long-term health risks from their profile and average daily "
            "intake, and give professional, actionable prevention advice.",
            f"Write all text in {language}.",
            "",
            "User profile:",
            *_profile_lines(profile),
            "",
            "Average daily intake:",
            f"- Calories: {average_intake.calories:.0f} kcal",
            f"- Protein: {average_intake.protein:.1f} g",
            f"- Carbohydrates: {average_intake.carbohydrates:.1f} g",
            f"- Fat: {average_intake.fat:.1f} g",
            f"- Sodium: {average_intake.sodium:.0f} mg",
            f"- Dietary fiber: {average_intake.fiber:.1f} g",
            "",
            "Tasks:",
            "1. Give an overall risk level (low, medium, high) and a short "
            "summary of how the current diet affects long-term health.",
            "2. Identify the 2-3 most relevant risks, such as type 2 diabetes, "
            "cardiovascular disease, nutritional imbalance or low fiber intake. "
            "For each give a riskName, an explanation grounded in the data, and "
            "1-2 concrete recommendations.",
            "",
            "Reply strictly in the provided JSON schema.",
        ]
    )
    return AIRequest(name="health_risk", prompt=prompt, schema=HEALTH_RISK_SCHEMA)


def parse_reply(raw: str, result_type: type[ResultT]) -> ResultT:
    """Decode and validate a JSON reply into the expected result type."""
    try:
        payload = json.loads(raw.strip())
    except (json.JSONDecodeError, AttributeError) as exc:
        raise MalformedResponseError("AI reply is not valid JSON") from exc
    try:
        return result_type.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"AI reply does not match {result_type.__name__}"
        ) from exc


@dataclass
class AnalysisService:
    """Sends formatted requests to the LLM and validates the replies."""

    client: LLMClient
    model: str
    reasoning_effort: str | None
    store: bool
    language: str = DEFAULT_RESPONSE_LANGUAGE

    async def analyze_food(self, image_bytes: bytes) -> AnalysisResult:
        """Analyze a prepared food image."""
        request = build_food_analysis_request(image_bytes, self.language)
        return await self._run(request, AnalysisResult)

    async def generate_recommendations(self, profile: Profile) -> RecommendationResult:
        """Generate a meal and exercise plan for the profile."""
        request = build_recommendation_request(profile, self.language)
        return await self._run(request, RecommendationResult)

    async def assess_health_risk(
        self, profile: Profile, average_intake: DailyTotals
    ) -> HealthRiskAssessment:
        """Assess long-term health risks from the average intake."""
        request = build_health_risk_request(profile, average_intake, self.language)
        return await self._run(request, HealthRiskAssessment)

    async def _run(self, request: AIRequest, result_type: type[ResultT]) -> ResultT:
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                name=request.name,
                prompt=request.prompt,
                schema=request.schema,
                image_data_url=request.image_data_url,
            )
        except AIServiceError:
            raise
        except Exception as exc:
            raise AIServiceError(f"{request.name} request failed") from exc
        result = parse_reply(raw, result_type)
        _logger.info("AI request completed: %s", request.name)
        return result


def _profile_lines(profile: Profile) -> list[str]:
    return [
        f"- Age: {profile.age}",
        f"- Gender: {profile.gender}",
        f"- Height: {profile.height} cm",
        f"- Weight: {profile.weight} kg",
        f"- Total daily energy expenditure (TDEE): {profile.tdee:.0f} kcal",
        f"- Health goal: {HEALTH_GOALS[profile.health_goal]}",
    ]
