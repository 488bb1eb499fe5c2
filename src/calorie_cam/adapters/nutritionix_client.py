"""Nutritionix natural-language nutrients API client."""

import json
from dataclasses import dataclass

import httpx

from calorie_cam.errors import ExternalServiceError
from calorie_cam.services.nutrition import NutritionClient

_SERVICE = "nutritionix"


@dataclass
class HttpxNutritionixClient(NutritionClient):
    """HTTPX-backed Nutritionix client."""

    app_id: str
    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, app_id: str, api_key: str, base_url: str, timeout: float = 15.0
    ) -> "HttpxNutritionixClient":
        """Create a Nutritionix client with a managed httpx session."""
        return cls(
            app_id=app_id,
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        """Parse a free-text meal description into foods with nutrients."""
        url = f"{self.base_url}/natural/nutrients"
        try:
            response = await self.http_client.post(
                url,
                headers={
                    "Accept": "application/json",
                    "x-app-id": self.app_id,
                    "x-app-key": self.api_key,
                    "x-remote-user-id": "0",
                },
                json={"query": query},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise ExternalServiceError(_SERVICE, f"request failed: {exc}") from exc
        if not response.is_success:
            raise ExternalServiceError(
                _SERVICE,
                _error_detail(response),
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


def _error_detail(response: httpx.Response) -> str:
    """Prefer the JSON ``message`` or ``error`` field, else the raw body."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict):
        detail = data.get("message") or data.get("error")
        if detail:
            return str(detail)
    return json.dumps(data)
