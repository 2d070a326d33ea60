"""Tests for the advisor use cases."""

import asyncio

import pytest

from nutrition_coach.errors import (
    AIServiceError,
    InvalidImageError,
    InvalidInputError,
    PreconditionError,
)
from nutrition_coach.services.advisor import (
    FOOD_ANALYSIS,
    HEALTH_RISK,
    AdvisorService,
)
from nutrition_coach.services.analysis import AnalysisService
from nutrition_coach.services.profiles import build_profile
from nutrition_coach.services.user_data import UserDataStore
from tests.conftest import PROFILE_FORM, FakeLLMClient, image_bytes, make_entry


@pytest.fixture
def advisor(store: UserDataStore, analysis_service: AnalysisService) -> AdvisorService:
    return AdvisorService(store=store, analysis_service=analysis_service)


def test_analyze_food_logs_entry(
    advisor: AdvisorService, store: UserDataStore, llm_client: FakeLLMClient
) -> None:
    entry = asyncio.run(advisor.analyze_food(image_bytes(size=(900, 600)), "dinner"))

    assert entry.meal_type == "dinner"
    assert entry.analysis.total_calories == 440
    assert store.list() == [entry]
    assert llm_client.calls[0]["image_data_url"].startswith("data:image/jpeg;base64,")
    assert advisor.tasks.get(FOOD_ANALYSIS).status == "success"


def test_analyze_food_rejects_unknown_meal_type(
    advisor: AdvisorService, llm_client: FakeLLMClient
) -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(advisor.analyze_food(image_bytes(), "brunch"))

    assert llm_client.calls == []


def test_analyze_food_rejects_non_image_before_calling_ai(
    advisor: AdvisorService, llm_client: FakeLLMClient
) -> None:
    with pytest.raises(InvalidImageError):
        asyncio.run(advisor.analyze_food(b"plain text", "lunch"))

    assert llm_client.calls == []


def test_failed_analysis_logs_nothing(
    advisor: AdvisorService, store: UserDataStore, llm_client: FakeLLMClient
) -> None:
    llm_client.replies["food_analysis"] = "{}"

    with pytest.raises(AIServiceError):
        asyncio.run(advisor.analyze_food(image_bytes(), "lunch"))

    assert store.list() == []
    assert advisor.tasks.get(FOOD_ANALYSIS).status == "failure"


def test_recommendations_require_profile(
    advisor: AdvisorService, llm_client: FakeLLMClient
) -> None:
    with pytest.raises(PreconditionError):
        asyncio.run(advisor.generate_recommendations())

    assert llm_client.calls == []


def test_recommendations_use_saved_profile(
    advisor: AdvisorService, store: UserDataStore, llm_client: FakeLLMClient
) -> None:
    store.set_profile(build_profile(PROFILE_FORM))

    result = asyncio.run(advisor.generate_recommendations())

    assert result.meal_plan.breakfast.name == "Oatmeal with berries"
    assert llm_client.calls[0]["name"] == "recommendations"


def test_risk_assessment_rejected_with_two_days(
    advisor: AdvisorService, store: UserDataStore, llm_client: FakeLLMClient
) -> None:
    store.set_profile(build_profile(PROFILE_FORM))
    store.append(make_entry("2026-10-01T08:00:00.000Z"))
    store.append(make_entry("2026-10-02T08:00:00.000Z"))
    store.append(make_entry("2026-10-02T19:00:00.000Z"))

    with pytest.raises(PreconditionError) as exc_info:
        asyncio.run(advisor.assess_health_risk())

    assert "1 more day" in str(exc_info.value)
    assert llm_client.calls == []
    assert advisor.tasks.get(HEALTH_RISK) is None


def test_risk_assessment_accepted_with_three_days(
    advisor: AdvisorService, store: UserDataStore, llm_client: FakeLLMClient
) -> None:
    store.set_profile(build_profile(PROFILE_FORM))
    for day in ("01", "02", "03"):
        store.append(make_entry(f"2026-10-{day}T08:00:00.000Z", total_calories=1800))

    assessment = asyncio.run(advisor.assess_health_risk())

    assert assessment.overall_risk_level == "medium"
    assert "Calories: 1800 kcal" in llm_client.calls[0]["prompt"]


def test_risk_assessment_requires_profile(
    advisor: AdvisorService, store: UserDataStore
) -> None:
    for day in ("01", "02", "03"):
        store.append(make_entry(f"2026-10-{day}T08:00:00.000Z"))

    with pytest.raises(PreconditionError):
        asyncio.run(advisor.assess_health_risk())
