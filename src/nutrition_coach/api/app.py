"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import Body, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from nutrition_coach.app_logging import configure_logging
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.base import DocumentModel
from nutrition_coach.domain.food_log import MEAL_TYPES
from nutrition_coach.domain.profile import ACTIVITY_LEVELS, HEALTH_GOALS
from nutrition_coach.domain.stats import DailyTotals, RecommendedIntake
from nutrition_coach.errors import (
    AIServiceError,
    InvalidImageError,
    InvalidInputError,
    PreconditionError,
    ProfileValidationError,
    TaskInProgressError,
)
from nutrition_coach.services.advisor import OPERATIONS
from nutrition_coach.services.stats import MIN_RISK_ASSESSMENT_DAYS
from nutrition_coach.services.tasks import AITask

VIEWS = (
    "home",
    "profile",
    "food-analysis",
    "health-data",
    "history",
    "recommendations",
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ProfileValidationError)
    async def profile_validation_handler(
        request: Request, exc: ProfileValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "message": "Please correct the highlighted fields.",
                "errors": [asdict(error) for error in exc.errors],
            },
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(
        request: Request, exc: InvalidInputError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(PreconditionError)
    async def precondition_handler(
        request: Request, exc: PreconditionError
    ) -> JSONResponse:
        return JSONResponse(status_code=409, content={"message": str(exc)})

    @app.exception_handler(TaskInProgressError)
    async def task_in_progress_handler(
        request: Request, exc: TaskInProgressError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={"message": str(exc), "operation": exc.operation},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def home(request: Request) -> dict[str, object]:
        """Landing view with navigation and log overview."""
        state_container: AppContainer = request.app.state.container
        return {
            "views": list(VIEWS),
            "hasProfile": state_container.store.get_profile() is not None,
            "entryCount": len(state_container.store.data.food_log),
            "loggedDays": state_container.stats_service.logged_days(),
        }

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the saved profile and the form options."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile()
        return {
            "profile": profile.to_document() if profile else None,
            "activityLevels": [
                {"value": value, "label": label}
                for value, label in ACTIVITY_LEVELS.items()
            ],
            "healthGoals": [
                {"value": value, "label": label}
                for value, label in HEALTH_GOALS.items()
            ],
        }

    @app.put("/profile")
    async def save_profile(
        request: Request, payload: dict[str, Any] = Body(...)
    ) -> dict[str, object]:
        """Validate the profile form, compute metrics and save it."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.save_profile(payload)
        return {"profile": profile.to_document()}

    @app.get("/food-analysis/options")
    async def food_analysis_options() -> dict[str, object]:
        """Return the selectable meal types."""
        return {
            "mealTypes": [
                {"value": value, "label": label} for value, label in MEAL_TYPES.items()
            ],
            "defaultMealType": "lunch",
        }

    @app.post("/food-analysis")
    async def analyze_food(
        request: Request,
        file: UploadFile = File(...),
        meal_type: str = Form("lunch", alias="mealType"),
    ) -> dict[str, object]:
        """Analyze an uploaded food photo and log the result."""
        state_container: AppContainer = request.app.state.container
        if file.content_type and not file.content_type.startswith("image/"):
            raise InvalidImageError("Please upload an image file.")
        image_bytes = await file.read()
        try:
            entry = await state_container.advisor_service.analyze_food(
                image_bytes, meal_type
            )
        except AIServiceError as exc:
            logger.exception(
                "Food analysis failed", extra={"upload_filename": file.filename}
            )
            raise HTTPException(
                status_code=502,
                detail=_format_service_error(
                    state_container,
                    exc,
                    "Sorry, the photo could not be analyzed. Please try again.",
                ),
            ) from exc
        return {"entry": entry.to_document()}

    @app.get("/health-data")
    async def health_data(request: Request) -> dict[str, object]:
        """Return today's totals, average intake and recommended targets."""
        state_container: AppContainer = request.app.state.container
        stats = state_container.stats_service
        average = stats.get_average()
        recommended = stats.get_recommended_intake()
        return {
            "today": _totals_payload(stats.get_today()),
            "averageIntake": _totals_payload(average.totals)
            if average.totals is not None
            else None,
            "loggedDays": average.day_count,
            "recommendedIntake": _recommended_payload(recommended)
            if recommended is not None
            else None,
            "canAssessRisk": stats.can_assess_risk(),
            "daysUntilRiskAssessment": max(
                MIN_RISK_ASSESSMENT_DAYS - average.day_count, 0
            ),
        }

    @app.post("/health-data/risk-assessment")
    async def risk_assessment(request: Request) -> dict[str, object]:
        """Generate a health risk assessment from the average intake."""
        state_container: AppContainer = request.app.state.container
        try:
            assessment = await state_container.advisor_service.assess_health_risk()
        except AIServiceError as exc:
            logger.exception("Health risk assessment failed")
            raise HTTPException(
                status_code=502,
                detail=_format_service_error(
                    state_container,
                    exc,
                    "The assessment could not be generated. Please try again later.",
                ),
            ) from exc
        return {"assessment": assessment.to_document()}

    @app.get("/history")
    async def history(request: Request) -> dict[str, object]:
        """Return logged meals, newest first."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.store.list()
        return {"entries": [entry.to_document() for entry in entries]}

    @app.get("/history/{entry_id}")
    async def history_entry(entry_id: str, request: Request) -> dict[str, object]:
        """Return a single logged meal with its full analysis."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.store.get_entry(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Entry not found")
        return {"entry": entry.to_document()}

    @app.delete("/history")
    async def clear_history(request: Request, confirm: bool = False) -> dict[str, str]:
        """Delete the whole food log once the caller confirms."""
        state_container: AppContainer = request.app.state.container
        if not confirm:
            raise HTTPException(
                status_code=400,
                detail="Clearing the history cannot be undone; pass confirm=true.",
            )
        state_container.store.clear()
        logger.info("Food log cleared")
        return {"status": "cleared"}

    @app.post("/recommendations")
    async def recommendations(request: Request) -> dict[str, object]:
        """Generate a personalized meal and exercise plan."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.advisor_service.generate_recommendations()
        except AIServiceError as exc:
            logger.exception("Recommendation generation failed")
            raise HTTPException(
                status_code=502,
                detail=_format_service_error(
                    state_container,
                    exc,
                    "The plan could not be generated. Please try again later.",
                ),
            ) from exc
        return {"recommendations": result.to_document()}

    @app.get("/tasks/{operation}")
    async def task_status(operation: str, request: Request) -> dict[str, object]:
        """Return the state of the latest run of an AI operation."""
        state_container: AppContainer = request.app.state.container
        if operation not in OPERATIONS:
            raise HTTPException(status_code=404, detail="Unknown operation")
        task = state_container.advisor_service.tasks.get(operation)
        return _task_payload(operation, task)

    return app


def _format_service_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _camel_dict(values: dict[str, object]) -> dict[str, object]:
    return {to_camel(key): value for key, value in values.items()}


def _totals_payload(totals: DailyTotals) -> dict[str, object]:
    return _camel_dict(asdict(totals))


def _recommended_payload(intake: RecommendedIntake) -> dict[str, object]:
    return _camel_dict(asdict(intake))


def _task_payload(operation: str, task: AITask | None) -> dict[str, object]:
    if task is None:
        return {"operation": operation, "status": "idle"}
    result = task.result
    if isinstance(result, DocumentModel):
        result = result.to_document()
    return {
        "operation": operation,
        "status": task.status,
        "startedAt": task.started_at.isoformat(),
        "finishedAt": task.finished_at.isoformat() if task.finished_at else None,
        "result": result,
        "error": task.error,
    }

