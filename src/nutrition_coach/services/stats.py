"""Intake statistics computed from the food log."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from nutrition_coach.domain.food_log import FoodEntry
from nutrition_coach.domain.stats import AverageIntake, DailyTotals, RecommendedIntake
from nutrition_coach.services.energy import recommended_intake
from nutrition_coach.services.user_data import UserDataStore

MIN_RISK_ASSESSMENT_DAYS = 3


@dataclass
class StatsService:
    """Service for the health-data view."""

    store: UserDataStore

    def get_today(self, now: datetime | None = None) -> DailyTotals:
        """Return totals for the current UTC calendar day."""
        current = now or datetime.now(tz=UTC)
        today = current.astimezone(UTC).date().isoformat()
        return aggregate_totals(self.store.list(sort_descending_by_date=False), today)

    def get_average(self) -> AverageIntake:
        """Return average daily totals over the whole log."""
        return average_daily_totals(self.store.list(sort_descending_by_date=False))

    def get_recommended_intake(self) -> RecommendedIntake | None:
        """Return targets for the saved profile, if any."""
        profile = self.store.get_profile()
        if profile is None:
            return None
        return recommended_intake(profile.tdee, profile.health_goal)

    def logged_days(self) -> int:
        """Return the number of distinct days present in the log."""
        return count_logged_days(self.store.list(sort_descending_by_date=False))

    def can_assess_risk(self) -> bool:
        """Return True when a profile exists and enough days are logged."""
        return (
            self.store.get_profile() is not None
            and self.logged_days() >= MIN_RISK_ASSESSMENT_DAYS
        )


def aggregate_totals(
    entries: Iterable[FoodEntry], date_filter: str | None = None
) -> DailyTotals:
    """Sum calories and component nutrients, optionally for one YYYY-MM-DD day."""
    calories = protein = carbohydrates = fat = 0.0
    fiber = vitamin_c = calcium = sodium = 0.0
    for entry in entries:
        if date_filter is not None and not entry.date.startswith(date_filter):
            continue
        calories += entry.analysis.total_calories
        for component in entry.analysis.main_components:
            nutrients = component.nutrients
            protein += nutrients.protein
            carbohydrates += nutrients.carbohydrates
            fat += nutrients.fat
            fiber += nutrients.fiber
            vitamin_c += nutrients.vitamin_c
            calcium += nutrients.calcium
            sodium += nutrients.sodium
    return DailyTotals(
        calories=calories,
        protein=protein,
        carbohydrates=carbohydrates,
        fat=fat,
        fiber=fiber,
        vitamin_c=vitamin_c,
        calcium=calcium,
        sodium=sodium,
    )


def count_logged_days(entries: Iterable[FoodEntry]) -> int:
    """Return the number of distinct calendar days in the entries."""
    return len({entry.day for entry in entries})


def average_daily_totals(entries: Iterable[FoodEntry]) -> AverageIntake:
    """Divide the whole-log totals by the number of distinct logged days.

    This is not a mean of per-day sums: every entry contributes to one
    total which is then split evenly across the days present.
    """
    materialized = list(entries)
    if not materialized:
        return AverageIntake(totals=None, day_count=0)

    totals = aggregate_totals(materialized)
    day_count = max(count_logged_days(materialized), 1)
    average = DailyTotals(
        calories=totals.calories / day_count,
        protein=totals.protein / day_count,
        carbohydrates=totals.carbohydrates / day_count,
        fat=totals.fat / day_count,
        fiber=totals.fiber / day_count,
        vitamin_c=totals.vitamin_c / day_count,
        calcium=totals.calcium / day_count,
        sodium=totals.sodium / day_count,
    )
    return AverageIntake(totals=average, day_count=day_count)
