"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import Client, create_client

from calorie_cam.adapters.clarifai_client import HttpxClarifaiClient
from calorie_cam.adapters.nutritionix_client import HttpxNutritionixClient
from calorie_cam.adapters.supabase_auth_gateway import SupabaseAuthGateway
from calorie_cam.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from calorie_cam.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_cam.config import Settings
from calorie_cam.services.auth import AuthGateway, AuthSession
from calorie_cam.services.history import HistoryService
from calorie_cam.services.meals import MealLogService
from calorie_cam.services.nutrition import NutritionService
from calorie_cam.services.pipeline import MealIngestionPipeline
from calorie_cam.services.profiles import ProfileService
from calorie_cam.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_gateway: AuthGateway
    vision_service: VisionService
    nutrition_service: NutritionService
    meal_log_service: MealLogService
    ingestion_pipeline: MealIngestionPipeline
    history_service: HistoryService
    profile_service: ProfileService
    close_resources: Callable[[], Awaitable[None]]

    def new_auth_session(self) -> AuthSession:
        """Create an auth session bound to this container's gateway."""
        return AuthSession(
            gateway=self.auth_gateway,
            profiles=self.profile_service.repository,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )

    def anon_client() -> Client:
        return create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )

    meal_log_repository = SupabaseMealLogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    auth_gateway = SupabaseAuthGateway(
        client_factory=anon_client, admin_client=supabase_client
    )
    clarifai_client = HttpxClarifaiClient.create(
        api_key=resolved_settings.clarifai_api_key,
        base_url=resolved_settings.clarifai_base_url,
        model_id=resolved_settings.clarifai_model_id,
        user_id=resolved_settings.clarifai_user_id,
        app_id=resolved_settings.clarifai_app_id,
        timeout=resolved_settings.http_timeout_seconds,
    )
    nutritionix_client = HttpxNutritionixClient.create(
        app_id=resolved_settings.nutritionix_app_id,
        api_key=resolved_settings.nutritionix_api_key,
        base_url=resolved_settings.nutritionix_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    vision_service = VisionService(
        client=clarifai_client, debug=resolved_settings.debug
    )
    nutrition_service = NutritionService(
        client=nutritionix_client, debug=resolved_settings.debug
    )
    meal_log_service = MealLogService(meal_log_repository)
    ingestion_pipeline = MealIngestionPipeline(
        vision_service=vision_service,
        nutrition_service=nutrition_service,
        meal_log_service=meal_log_service,
    )
    history_service = HistoryService(meal_log_repository)
    profile_service = ProfileService(
        repository=profile_repository,
        meal_repository=meal_log_repository,
    )

    async def close_resources() -> None:
        await clarifai_client.close()
        await nutritionix_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_gateway=auth_gateway,
        vision_service=vision_service,
        nutrition_service=nutrition_service,
        meal_log_service=meal_log_service,
        ingestion_pipeline=ingestion_pipeline,
        history_service=history_service,
        profile_service=profile_service,
        close_resources=close_resources,
    )
