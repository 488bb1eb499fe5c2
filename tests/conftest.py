"""Shared test fixtures."""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from calorie_cam.config import Settings
from calorie_cam.containers import AppContainer
from calorie_cam.domain.meals import MealLog, NewMealLog
from calorie_cam.domain.models import AuthIdentity
from calorie_cam.domain.profiles import Profile
from calorie_cam.errors import AuthenticationError, ExternalServiceError
from calorie_cam.services.auth import AuthGateway
from calorie_cam.services.history import HistoryRepository, HistoryService
from calorie_cam.services.meals import MealLogRepository, MealLogService
from calorie_cam.services.nutrition import NutritionClient, NutritionService
from calorie_cam.services.pipeline import MealIngestionPipeline
from calorie_cam.services.profiles import ProfileRepository, ProfileService
from calorie_cam.services.vision import ClassificationClient, VisionService

USER_ID = UUID("00000000-0000-4000-8000-000000000001")
ACCESS_TOKEN = "valid-token"


def clarifai_payload(*concepts: tuple[str, float]) -> dict[str, object]:
    """Build a classifier response with the given (name, value) concepts."""
    return {
        "outputs": [
            {
                "data": {
                    "concepts": [
                        {"name": name, "value": value} for name, value in concepts
                    ]
                }
            }
        ]
    }


def make_meal(  # noqa: PLR0913
    logged_at: datetime,
    calories: int = 100,
    protein: float = 10.0,
    carbs: float = 20.0,
    fat: float = 5.0,
    food_name: str = "apple",
    user_id: UUID = USER_ID,
) -> MealLog:
    """Build a persisted meal log for aggregation tests."""
    return MealLog(
        id=uuid4(),
        user_id=user_id,
        food_name=food_name,
        serving_qty=1.0,
        serving_unit="serving",
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=0.0,
        sugar=0.0,
        sodium=0.0,
        image_uri=None,
        logged_at=logged_at,
    )


@dataclass
class FakeClassificationClient(ClassificationClient):
    """Fake classifier returning a fixed payload or raising."""

    payload: dict[str, object] = field(
        default_factory=lambda: clarifai_payload(("pizza", 0.9), ("car", 0.95))
    )
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def predict(self, image_base64: str) -> dict[str, object]:
        self.calls.append(image_base64)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeNutritionClient(NutritionClient):
    """Fake nutrition API recording queries."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "food_name": "pizza",
                    "serving_qty": 1,
                    "serving_unit": "slice",
                    "nf_calories": 285,
                    "nf_protein": 12.3456,
                    "nf_total_carbohydrate": 35.66,
                    "nf_total_fat": 10.4,
                    "nf_dietary_fiber": 2.5,
                    "nf_sugars": 3.8,
                    "nf_sodium": 640,
                }
            ]
        }
    )
    error: Exception | None = None
    queries: list[str] = field(default_factory=list)

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryMealLogRepository(MealLogRepository, HistoryRepository):
    """In-memory meal log repository for tests."""

    meals: list[MealLog] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)
    inserts: list[NewMealLog] = field(default_factory=list)

    def insert_meal_log(self, meal: NewMealLog) -> MealLog:
        self.inserts.append(meal)
        if meal.food_name in self.fail_on:
            raise RuntimeError("insert rejected")
        stored = MealLog(id=uuid4(), **asdict(meal))
        self.meals.append(stored)
        return stored

    def list_meal_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[MealLog]:
        rows = [
            meal
            for meal in self.meals
            if meal.user_id == user_id
            and (start is None or meal.logged_at >= start)
            and (end is None or meal.logged_at <= end)
        ]
        return sorted(rows, key=lambda meal: meal.logged_at, reverse=True)

    def list_submission_items(self, user_id: UUID, submission_id: UUID) -> set[int]:
        return {
            meal.item_index
            for meal in self.meals
            if meal.user_id == user_id and meal.submission_id == submission_id
        }

    def delete_meal_log(self, user_id: UUID, meal_log_id: UUID) -> bool:
        for meal in self.meals:
            if meal.id == meal_log_id and meal.user_id == user_id:
                self.meals.remove(meal)
                return True
        return False


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)
    fail_create: bool = False

    def get_profile(self, user_id: UUID) -> Profile | None:
        return self.profiles.get(user_id)

    def create_profile(
        self, user_id: UUID, display_name: str | None, email: str | None
    ) -> Profile:
        if self.fail_create:
            raise RuntimeError("duplicate key value")
        now = datetime.now(tz=UTC)
        profile = Profile(
            id=user_id,
            display_name=display_name,
            email=email,
            created_at=now,
            updated_at=now,
        )
        self.profiles[user_id] = profile
        return profile

    def update_profile(self, user_id: UUID, display_name: str | None) -> Profile:
        current = self.profiles[user_id]
        updated = Profile(
            id=current.id,
            display_name=display_name,
            email=current.email,
            created_at=current.created_at,
            updated_at=datetime.now(tz=UTC),
        )
        self.profiles[user_id] = updated
        return updated


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake auth backend with one registered user."""

    passwords: dict[str, str] = field(
        default_factory=lambda: {"ada@example.com": "secret123"}
    )
    tokens: dict[str, UUID] = field(default_factory=lambda: {ACCESS_TOKEN: USER_ID})
    issue_session_on_sign_up: bool = True
    signed_out: list[str | None] = field(default_factory=list)

    def sign_up(
        self, email: str, password: str, display_name: str | None
    ) -> AuthIdentity | None:
        if email in self.passwords:
            raise AuthenticationError("Sign up failed: User already registered")
        self.passwords[email] = password
        user_id = uuid4()
        if not self.issue_session_on_sign_up:
            return AuthIdentity(user_id=user_id, email=email)
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return AuthIdentity(
            user_id=user_id, email=email, access_token=token, refresh_token="refresh"
        )

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        if self.passwords.get(email) != password:
            raise AuthenticationError("Sign in failed: Invalid login credentials")
        return AuthIdentity(
            user_id=USER_ID,
            email=email,
            access_token=ACCESS_TOKEN,
            refresh_token="refresh",
        )

    def sign_out(self, access_token: str | None) -> None:
        self.signed_out.append(access_token)

    def get_user(self, access_token: str) -> AuthIdentity | None:
        user_id = self.tokens.get(access_token)
        if user_id is None:
            return None
        return AuthIdentity(user_id=user_id, email="ada@example.com")


def clarifai_error(status_code: int = 500) -> ExternalServiceError:
    """Build the error the classifier adapter raises on a bad response."""
    return ExternalServiceError(
        "clarifai", "upstream failure", status_code=status_code, body="{}"
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon.header.signature",
        supabase_service_key="service.header.signature",
        clarifai_api_key="clarifai-key",
        nutritionix_app_id="app-id",
        nutritionix_api_key="app-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealLogRepository:
    return InMemoryMealLogRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def classification_client() -> FakeClassificationClient:
    return FakeClassificationClient()


@pytest.fixture
def nutrition_client() -> FakeNutritionClient:
    return FakeNutritionClient()


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway()


@pytest.fixture
def pipeline(
    classification_client: FakeClassificationClient,
    nutrition_client: FakeNutritionClient,
    meal_repository: InMemoryMealLogRepository,
) -> MealIngestionPipeline:
    return MealIngestionPipeline(
        vision_service=VisionService(client=classification_client),
        nutrition_service=NutritionService(client=nutrition_client),
        meal_log_service=MealLogService(meal_repository),
    )


@pytest.fixture
def container(
    settings: Settings,
    auth_gateway: FakeAuthGateway,
    pipeline: MealIngestionPipeline,
    meal_repository: InMemoryMealLogRepository,
    profile_repository: InMemoryProfileRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_gateway=auth_gateway,
        vision_service=pipeline.vision_service,
        nutrition_service=pipeline.nutrition_service,
        meal_log_service=pipeline.meal_log_service,
        ingestion_pipeline=pipeline,
        history_service=HistoryService(meal_repository),
        profile_service=ProfileService(
            repository=profile_repository,
            meal_repository=meal_repository,
        ),
        close_resources=close_resources,
    )
