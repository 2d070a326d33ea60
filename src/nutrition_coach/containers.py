"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_coach.adapters.json_file_repository import JsonFileUserDataRepository
from nutrition_coach.adapters.openai_llm_client import OpenAILLMClient
from nutrition_coach.adapters.supabase_user_data_repository import (
    SupabaseUserDataRepository,
)
from nutrition_coach.config import Settings
from nutrition_coach.services.advisor import AdvisorService
from nutrition_coach.services.analysis import AnalysisService
from nutrition_coach.services.profiles import ProfileService
from nutrition_coach.services.stats import StatsService
from nutrition_coach.services.tasks import TaskTracker
from nutrition_coach.services.user_data import UserDataRepository, UserDataStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: UserDataStore
    profile_service: ProfileService
    stats_service: StatsService
    analysis_service: AnalysisService
    advisor_service: AdvisorService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = UserDataStore(
        repository=_build_repository(resolved_settings),
        key=resolved_settings.app_data_key,
    )
    llm_client = OpenAILLMClient.create(resolved_settings.openai_api_key)
    analysis_service = AnalysisService(
        client=llm_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        language=resolved_settings.response_language,
    )
    advisor_service = AdvisorService(
        store=store,
        analysis_service=analysis_service,
        tasks=TaskTracker(),
    )

    async def close_resources() -> None:
        await llm_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        profile_service=ProfileService(store),
        stats_service=StatsService(store),
        analysis_service=analysis_service,
        advisor_service=advisor_service,
        close_resources=close_resources,
    )


def _build_repository(settings: Settings) -> UserDataRepository:
    if settings.uses_supabase:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseUserDataRepository(client)
    return JsonFileUserDataRepository(settings.data_file)
