"""Tests for the energy model."""

import pytest

from nutrition_coach.domain.profile import ACTIVITY_LEVELS
from nutrition_coach.services.energy import (
    FALLBACK_EVALUATION_MESSAGE,
    calculate_bmr,
    calculate_tdee,
    evaluation_message,
    recommended_intake,
)
from nutrition_coach.services.profiles import build_profile
from tests.conftest import PROFILE_FORM


def test_calculate_bmr_male_formula() -> None:
    profile = build_profile(PROFILE_FORM)

    bmr = calculate_bmr(profile)

    expected = 88.362 + 13.397 * 70 + 4.799 * 175 - 5.677 * 30
    assert bmr == pytest.approx(expected)
    assert bmr == pytest.approx(1695.667, abs=1e-3)


def test_calculate_bmr_female_formula() -> None:
    profile = build_profile({**PROFILE_FORM, "gender": "female", "weight": 60})

    bmr = calculate_bmr(profile)

    assert bmr == pytest.approx(447.593 + 9.247 * 60 + 3.098 * 175 - 4.330 * 30)


@pytest.mark.parametrize("activity_level", list(ACTIVITY_LEVELS))
def test_tdee_is_bmr_times_activity_level(activity_level: float) -> None:
    profile = build_profile({**PROFILE_FORM, "activityLevel": activity_level})

    bmr = calculate_bmr(profile)

    assert calculate_tdee(bmr, profile.activity_level) == pytest.approx(
        bmr * activity_level
    )
    assert profile.tdee == pytest.approx(bmr * activity_level)


def test_tdee_accepts_non_canonical_coefficient() -> None:
    assert calculate_tdee(1000.0, 1.3) == pytest.approx(1300.0)


def test_evaluation_message_covers_canonical_levels() -> None:
    messages = {level: evaluation_message(level) for level in ACTIVITY_LEVELS}

    assert len(set(messages.values())) == len(ACTIVITY_LEVELS)
    assert FALLBACK_EVALUATION_MESSAGE not in messages.values()


@pytest.mark.parametrize("activity_level", [0.0, 1.3, 1.56, 2.5, -1.0])
def test_evaluation_message_falls_back_for_unknown_levels(
    activity_level: float,
) -> None:
    assert evaluation_message(activity_level) == FALLBACK_EVALUATION_MESSAGE


def test_recommended_intake_uses_fixed_split() -> None:
    intake = recommended_intake(2628.36, "weightLoss")

    assert intake.calories == pytest.approx(2628.36)
    assert intake.carbohydrates == pytest.approx(328.545)
    assert intake.protein == pytest.approx(131.418)
    assert intake.fat == pytest.approx(87.612)
    assert intake.fiber == 25
    assert intake.vitamin_c == 90
    assert intake.calcium == 1000


def test_recommended_intake_ignores_goal() -> None:
    results = {
        goal: recommended_intake(2000.0, goal)
        for goal in ("weightLoss", "muscleGain", "maintenance")
    }

    assert len(set(results.values())) == 1
