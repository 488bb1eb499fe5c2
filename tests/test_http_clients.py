"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from calorie_cam.adapters.clarifai_client import HttpxClarifaiClient
from calorie_cam.adapters.nutritionix_client import HttpxNutritionixClient
from calorie_cam.errors import ExternalServiceError


def _clarifai(handler) -> HttpxClarifaiClient:  # type: ignore[no-untyped-def]
    return HttpxClarifaiClient(
        api_key="clarifai-key",
        base_url="https://api.clarifai.com/v2",
        model_id="general",
        user_id="clarifai",
        app_id="main",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _nutritionix(handler) -> HttpxNutritionixClient:  # type: ignore[no-untyped-def]
    return HttpxNutritionixClient(
        app_id="app-id",
        api_key="app-key",
        base_url="https://trackapi.nutritionix.com/v2",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_clarifai_client_posts_image() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content.decode())
        return httpx.Response(200, json={"outputs": []})

    client = _clarifai(handler)
    result = asyncio.run(client.predict("ZmFrZQ=="))

    assert result == {"outputs": []}
    assert seen["path"] == "/v2/models/general/outputs"
    assert seen["auth"] == "Key clarifai-key"
    assert seen["body"] == {
        "user_app_id": {"user_id": "clarifai", "app_id": "main"},
        "inputs": [{"data": {"image": {"base64": "ZmFrZQ=="}}}],
    }
    asyncio.run(client.close())


def test_clarifai_client_reports_status_and_body() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="API key not found")

    with pytest.raises(ExternalServiceError) as excinfo:
        asyncio.run(_clarifai(handler).predict("ZmFrZQ=="))

    assert excinfo.value.status_code == 401
    assert excinfo.value.body == "API key not found"
    assert str(excinfo.value) == "clarifai 401: API key not found"


def test_clarifai_client_rejects_non_json() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(ExternalServiceError, match="not JSON"):
        asyncio.run(_clarifai(handler).predict("ZmFrZQ=="))


def test_clarifai_client_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalServiceError) as excinfo:
        asyncio.run(_clarifai(handler).predict("ZmFrZQ=="))

    assert excinfo.value.status_code is None
    assert "connection refused" in excinfo.value.message


def test_nutritionix_client_sends_query_with_credentials() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content.decode())
        return httpx.Response(200, json={"foods": [{"food_name": "apple"}]})

    client = _nutritionix(handler)
    result = asyncio.run(client.natural_nutrients("1 apple"))

    assert result == {"foods": [{"food_name": "apple"}]}
    assert seen["path"] == "/v2/natural/nutrients"
    assert seen["headers"]["x-app-id"] == "app-id"
    assert seen["headers"]["x-app-key"] == "app-key"
    assert seen["headers"]["x-remote-user-id"] == "0"
    assert seen["body"] == {"query": "1 apple"}
    asyncio.run(client.close())


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (
            httpx.Response(404, json={"message": "We couldn't match any of your foods"}),
            "nutritionix 404: We couldn't match any of your foods",
        ),
        (
            httpx.Response(401, json={"error": "invalid app key"}),
            "nutritionix 401: invalid app key",
        ),
        (
            httpx.Response(500, json={"code": 7}),
            'nutritionix 500: {"code": 7}',
        ),
        (
            httpx.Response(502, text="Bad Gateway"),
            "nutritionix 502: Bad Gateway",
        ),
    ],
)
def test_nutritionix_client_error_detail(
    response: httpx.Response, expected: str
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(ExternalServiceError) as excinfo:
        asyncio.run(_nutritionix(handler).natural_nutrients("blorp"))

    assert str(excinfo.value) == expected


def test_nutritionix_client_rejects_non_object() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["apple"])

    with pytest.raises(ExternalServiceError, match="not an object"):
        asyncio.run(_nutritionix(handler).natural_nutrients("apple"))
