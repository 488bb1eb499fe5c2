"""ASGI entrypoint, served with ``uvicorn calorie_cam.api.asgi:app``."""

from calorie_cam.api.app import create_app
from calorie_cam.config import Settings
from calorie_cam.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
