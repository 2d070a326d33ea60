"""Application error types."""

from dataclasses import dataclass


class NutritionCoachError(Exception):
    """Base class for recoverable application errors."""


class InvalidInputError(NutritionCoachError, ValueError):
    """Local input was rejected before any external call."""


@dataclass(frozen=True)
class FieldError:
    """Validation failure for a single form field."""

    field: str
    message: str


class ProfileValidationError(InvalidInputError):
    """Profile form failed validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(error.field for error in errors)
        super().__init__(f"Invalid profile fields: {fields}")


class InvalidImageError(InvalidInputError):
    """Uploaded file could not be decoded as an image."""


class AIServiceError(NutritionCoachError):
    """The external AI service failed or returned no usable reply."""


class MalformedResponseError(AIServiceError):
    """The AI reply did not match the expected structure."""


class PreconditionError(NutritionCoachError):
    """An operation was requested before its preconditions were met."""


class TaskInProgressError(NutritionCoachError):
    """The same AI operation is already running."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is already in progress")
