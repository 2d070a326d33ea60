"""Domain models for derived intake statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyTotals:
    """Summed nutrients over a set of food entries."""

    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    vitamin_c: float = 0.0
    calcium: float = 0.0
    sodium: float = 0.0


@dataclass(frozen=True)
class AverageIntake:
    """Average daily totals over the distinct days present in the log."""

    totals: DailyTotals | None
    day_count: int


@dataclass(frozen=True)
class RecommendedIntake:
    """Daily intake targets derived from TDEE."""

    calories: float
    carbohydrates: float
    protein: float
    fat: float
    fiber: float
    vitamin_c: float
    calcium: float
