"""Use cases that call the external AI service."""

import logging
from dataclasses import dataclass, field
from typing import cast

from nutrition_coach.domain.food_log import MEAL_TYPES, FoodEntry, MealType
from nutrition_coach.domain.plans import HealthRiskAssessment, RecommendationResult
from nutrition_coach.domain.profile import Profile
from nutrition_coach.errors import InvalidInputError, PreconditionError
from nutrition_coach.services.analysis import AnalysisService
from nutrition_coach.services.images import prepare_image
from nutrition_coach.services.stats import (
    MIN_RISK_ASSESSMENT_DAYS,
    average_daily_totals,
)
from nutrition_coach.services.tasks import TaskTracker
from nutrition_coach.services.user_data import UserDataStore

FOOD_ANALYSIS = "food_analysis"
RECOMMENDATIONS = "recommendations"
HEALTH_RISK = "health_risk"
OPERATIONS = (FOOD_ANALYSIS, RECOMMENDATIONS, HEALTH_RISK)

_logger = logging.getLogger(__name__)


@dataclass
class AdvisorService:
    """Checks preconditions, runs AI operations and records their results."""

    store: UserDataStore
    analysis_service: AnalysisService
    tasks: TaskTracker = field(default_factory=TaskTracker)

    async def analyze_food(self, image_bytes: bytes, meal_type: str) -> FoodEntry:
        """Analyze a food photo and log it under the selected meal type."""
        if meal_type not in MEAL_TYPES:
            raise InvalidInputError(f"Unknown meal type: {meal_type}")
        prepared = prepare_image(image_bytes)

        async def _analyze() -> FoodEntry:
            analysis = await self.analysis_service.analyze_food(prepared)
            return self.store.record_analysis(analysis, cast(MealType, meal_type))

        entry = await self.tasks.run(FOOD_ANALYSIS, _analyze)
        _logger.info(
            "Food entry logged: id=%s meal_type=%s calories=%.0f",
            entry.id,
            entry.meal_type,
            entry.analysis.total_calories,
        )
        return entry

    async def generate_recommendations(self) -> RecommendationResult:
        """Generate a meal and exercise plan for the saved profile."""
        profile = self._require_profile()
        return await self.tasks.run(
            RECOMMENDATIONS,
            lambda: self.analysis_service.generate_recommendations(profile),
        )

    async def assess_health_risk(self) -> HealthRiskAssessment:
        """Assess health risks once enough days are logged."""
        profile = self._require_profile()
        average = average_daily_totals(self.store.list(sort_descending_by_date=False))
        if average.totals is None or average.day_count < MIN_RISK_ASSESSMENT_DAYS:
            missing = MIN_RISK_ASSESSMENT_DAYS - average.day_count
            raise PreconditionError(
                f"Health risk assessment needs at least {MIN_RISK_ASSESSMENT_DAYS} "
                f"days of food logs; {missing} more day(s) required."
            )
        totals = average.totals
        return await self.tasks.run(
            HEALTH_RISK,
            lambda: self.analysis_service.assess_health_risk(profile, totals),
        )

    def _require_profile(self) -> Profile:
        profile = self.store.get_profile()
        if profile is None:
            raise PreconditionError("Create your profile first.")
        return profile
