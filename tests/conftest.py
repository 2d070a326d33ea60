"""Shared test fixtures."""

import copy
import io
import json
from dataclasses import dataclass, field

import pytest
from PIL import Image

from nutrition_coach.config import Settings
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.analysis import AnalysisResult
from nutrition_coach.domain.food_log import FoodEntry
from nutrition_coach.services.advisor import AdvisorService
from nutrition_coach.services.analysis import AnalysisService, LLMClient
from nutrition_coach.services.profiles import ProfileService
from nutrition_coach.services.stats import StatsService
from nutrition_coach.services.tasks import TaskTracker
from nutrition_coach.services.user_data import UserDataRepository, UserDataStore

ANALYSIS_PAYLOAD: dict[str, object] = {
    "foodName": "Chicken rice bowl",
    "mainComponents": [
        {
            "name": "Grilled chicken",
            "weight": 120,
            "calories": 200,
            "nutrients": {
                "protein": 30,
                "carbohydrates": 0,
                "fat": 8,
                "fiber": 0,
                "sodium": 300,
                "vitaminC": 0,
                "calcium": 15,
            },
            "analysis": "Lean protein source.",
        },
        {
            "name": "White rice",
            "weight": 180,
            "calories": 240,
            "nutrients": {
                "protein": 4,
                "carbohydrates": 53,
                "fat": 0.5,
                "fiber": 0.6,
                "sodium": 2,
                "vitaminC": 0,
                "calcium": 5,
            },
            "analysis": "Refined carbohydrate.",
        },
    ],
    "totalCalories": 440,
    "nutritionTags": ["high protein"],
    "dietaryAdvice": ["Add some vegetables."],
}

_MEAL = {
    "name": "Oatmeal with berries",
    "calories": 350,
    "recipe": {
        "name": "Berry oatmeal",
        "ingredients": ["oats", "milk", "berries"],
        "instructions": ["Cook oats in milk.", "Top with berries."],
    },
}

RECOMMENDATION_PAYLOAD: dict[str, object] = {
    "mealPlan": {
        "breakfast": _MEAL,
        "lunch": {**_MEAL, "name": "Chicken salad"},
        "dinner": {**_MEAL, "name": "Salmon with quinoa"},
        "snacks": {**_MEAL, "name": "Greek yogurt"},
    },
    "exercisePlan": {
        "summary": "Three strength days with walking.",
        "weeklySchedule": [
            {
                "day": "Monday",
                "focus": "Full body strength",
                "exercises": [
                    {
                        "name": "Squat",
                        "sets": "3",
                        "reps": "10",
                        "description": "Keep your back straight.",
                    }
                ],
            }
        ],
    },
}

HEALTH_RISK_PAYLOAD: dict[str, object] = {
    "overallRiskLevel": "medium",
    "summary": "Sodium intake is above the recommended range.",
    "potentialRisks": [
        {
            "riskName": "Cardiovascular risk",
            "explanation": "Average sodium is high.",
            "recommendation": "Cook with less salt.",
        }
    ],
}

PROFILE_FORM: dict[str, object] = {
    "age": 30,
    "gender": "male",
    "height": 175,
    "weight": 70,
    "activityLevel": 1.55,
    "healthGoal": "maintenance",
    "dietaryPreferences": "likes sweets",
    "commonActivities": "office work, walking",
}


@dataclass
class InMemoryUserDataRepository(UserDataRepository):
    """In-memory key-value repository for tests."""

    documents: dict[str, dict[str, object]] = field(default_factory=dict)
    saves: int = 0

    def load(self, key: str) -> dict[str, object] | None:
        document = self.documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def save(self, key: str, document: dict[str, object]) -> None:
        self.documents[key] = copy.deepcopy(document)
        self.saves += 1


@dataclass
class FakeLLMClient(LLMClient):
    """Fake LLM client returning canned JSON by request name."""

    replies: dict[str, str] = field(
        default_factory=lambda: {
            "food_analysis": _to_json(ANALYSIS_PAYLOAD),
            "recommendations": _to_json(RECOMMENDATION_PAYLOAD),
            "health_risk": _to_json(HEALTH_RISK_PAYLOAD),
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {
                "model": model,
                "name": name,
                "prompt": prompt,
                "schema": schema,
                "image_data_url": image_data_url,
            }
        )
        if self.error is not None:
            raise self.error
        return self.replies[name]


def _to_json(payload: dict[str, object]) -> str:
    return json.dumps(payload)


def make_analysis(
    total_calories: float = 100.0,
    protein: float = 1.0,
    sodium: float = 10.0,
) -> AnalysisResult:
    """Build a one-component analysis with simple nutrient values."""
    return AnalysisResult.model_validate(
        {
            "foodName": "Test meal",
            "mainComponents": [
                {
                    "name": "Component",
                    "weight": 100,
                    "calories": total_calories,
                    "nutrients": {
                        "protein": protein,
                        "carbohydrates": 2.0,
                        "fat": 3.0,
                        "fiber": 0.5,
                        "sodium": sodium,
                        "vitaminC": 4.0,
                        "calcium": 5.0,
                    },
                    "analysis": "ok",
                }
            ],
            "totalCalories": total_calories,
            "nutritionTags": [],
            "dietaryAdvice": [],
        }
    )


def make_entry(
    date: str, total_calories: float = 100.0, protein: float = 1.0
) -> FoodEntry:
    """Build a food entry logged at an ISO timestamp."""
    return FoodEntry(
        id=date,
        date=date,
        meal_type="lunch",
        analysis=make_analysis(total_calories=total_calories, protein=protein),
    )


def image_bytes(
    size: tuple[int, int] = (64, 48), image_format: str = "PNG"
) -> bytes:
    """Return an encoded solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        data_file=tmp_path / "user_data.json",
        environment="test",
    )


@pytest.fixture
def repository() -> InMemoryUserDataRepository:
    return InMemoryUserDataRepository()


@pytest.fixture
def store(repository: InMemoryUserDataRepository) -> UserDataStore:
    return UserDataStore(repository)


@pytest.fixture
def llm_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def analysis_service(llm_client: FakeLLMClient) -> AnalysisService:
    return AnalysisService(
        client=llm_client,
        model="gpt-5.2",
        reasoning_effort="medium",
        store=False,
    )


@pytest.fixture
def container(
    settings: Settings,
    store: UserDataStore,
    analysis_service: AnalysisService,
) -> AppContainer:
    advisor_service = AdvisorService(
        store=store,
        analysis_service=analysis_service,
        tasks=TaskTracker(),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        profile_service=ProfileService(store),
        stats_service=StatsService(store),
        analysis_service=analysis_service,
        advisor_service=advisor_service,
        close_resources=close_resources,
    )
