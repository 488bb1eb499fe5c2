"""Clarifai image classification API client."""

from dataclasses import dataclass

import httpx

from calorie_cam.errors import ExternalServiceError
from calorie_cam.services.vision import ClassificationClient

_SERVICE = "clarifai"


@dataclass
class HttpxClarifaiClient(ClassificationClient):
    """HTTPX-backed Clarifai client for the general concept model."""

    api_key: str
    base_url: str
    model_id: str
    user_id: str
    app_id: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        base_url: str,
        model_id: str,
        user_id: str,
        app_id: str,
        timeout: float = 15.0,
    ) -> "HttpxClarifaiClient":
        """Create a Clarifai client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            model_id=model_id,
            user_id=user_id,
            app_id=app_id,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def predict(self, image_base64: str) -> dict[str, object]:
        """Classify a base64 image and return the raw response."""
        url = f"{self.base_url}/models/{self.model_id}/outputs"
        payload = {
            "user_app_id": {"user_id": self.user_id, "app_id": self.app_id},
            "inputs": [{"data": {"image": {"base64": image_base64}}}],
        }
        try:
            response = await self.http_client.post(
                url,
                headers={"Authorization": f"Key {self.api_key}"},
                json=payload,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise ExternalServiceError(_SERVICE, f"request failed: {exc}") from exc
        if not response.is_success:
            raise ExternalServiceError(
                _SERVICE,
                response.text,
                status_code=response.status_code,
                body=response.text,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalServiceError(
                _SERVICE,
                "response body is not JSON",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(data, dict):
            raise ExternalServiceError(
                _SERVICE,
                "response body is not an object",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
