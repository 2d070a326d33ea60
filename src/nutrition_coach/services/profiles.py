"""Profile form validation and derived metrics."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import ValidationError

from nutrition_coach.domain.profile import Profile, ProfileForm
from nutrition_coach.errors import FieldError, ProfileValidationError
from nutrition_coach.services.energy import (
    calculate_bmr,
    calculate_tdee,
    evaluation_message,
)
from nutrition_coach.services.user_data import UserDataStore

_logger = logging.getLogger(__name__)


def build_profile(raw: Mapping[str, object]) -> Profile:
    """Validate a submitted form and compute bmr, tdee and guidance text."""
    try:
        form = ProfileForm.model_validate(dict(raw))
    except ValidationError as exc:
        raise ProfileValidationError(_field_errors(exc)) from exc

    bmr = calculate_bmr(form)
    tdee = calculate_tdee(bmr, form.activity_level)
    return Profile(
        **form.model_dump(),
        bmr=bmr,
        tdee=tdee,
        evaluation_message=evaluation_message(form.activity_level),
    )


@dataclass
class ProfileService:
    """Application service for saving the user profile."""

    store: UserDataStore

    def get_profile(self) -> Profile | None:
        return self.store.get_profile()

    def save_profile(self, raw: Mapping[str, object]) -> Profile:
        """Build a profile from the form and replace the stored one."""
        profile = build_profile(raw)
        self.store.set_profile(profile)
        _logger.info(
            "Profile saved: bmr=%.1f tdee=%.1f", profile.bmr, profile.tdee
        )
        return profile


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.append(FieldError(field=location, message=error["msg"]))
    return errors
