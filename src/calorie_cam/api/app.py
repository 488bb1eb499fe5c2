"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from calorie_cam.api.auth import router as auth_router
from calorie_cam.api.meals import router as meals_router
from calorie_cam.api.profile import router as profile_router
from calorie_cam.app_logging import configure_logging
from calorie_cam.containers import AppContainer
from calorie_cam.errors import CalorieCamError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(meals_router)
    app.include_router(profile_router)

    @app.exception_handler(CalorieCamError)
    async def handle_app_error(request: Request, exc: CalorieCamError) -> JSONResponse:
        """Render application errors as JSON with their HTTP status."""
        if exc.http_status >= 500:  # noqa: PLR2004
            logger.error(
                "Request failed: %s",
                exc,
                extra={"path": request.url.path},
            )
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
