"""
Tests for the gateway proxy HTTP endpoints
"""

import base64

import httpx
import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.routes import get_gateway
from core.errors import GatewayError
from core.gateway import MangaPanelGateway
from core.openai_client import OpenAIClient
from tests.utils import FakeGateway, PNG_HEADER

PATH = "/process-manga-panel"
IMAGE = PNG_HEADER + b"fake-image"
IMAGE_B64 = base64.b64encode(IMAGE).decode()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


def assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == "authorization, x-client-info, apikey, content-type"


class TestPreflight:
    """Tests for CORS handling."""

    def test_options(self, client, gateway):
        response = client.options(PATH)

        assert response.status_code == 200
        assert_cors(response)
        assert gateway.calls == []

    def test_browser_preflight(self, client):
        response = client.options(PATH, headers={
            "Origin": "https://studio.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type, apikey",
        })

        assert response.status_code == 200
        assert_cors(response)


class TestProcessMangaPanel:
    """Tests for POST /process-manga-panel."""

    def test_success(self, client, gateway):
        response = client.post(PATH, json={"imageBase64": IMAGE_B64, "scene": "a duel"})

        assert response.status_code == 200
        assert response.json() == {
            "mangaPanelUrl": "https://images.example/1.png",
            "description": "Manga page: a duel",
        }
        assert_cors(response)
        assert gateway.calls == [(IMAGE, "a duel")]

    def test_data_uri_prefix_is_stripped(self, client, gateway):
        response = client.post(PATH, json={
            "imageBase64": f"data:image/png;base64,{IMAGE_B64}",
            "scene": "a duel"
        })

        assert response.status_code == 200
        assert gateway.calls[0][0] == IMAGE
        assert gateway.mime_types == ["image/png"]

    def test_gateway_error(self, client, gateway):
        gateway.error = GatewayError("OpenAI API error: quota exceeded")

        response = client.post(PATH, json={"imageBase64": IMAGE_B64, "scene": "a duel"})

        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API error: quota exceeded"}
        assert_cors(response)

    def test_unexpected_error_keeps_error_shape(self, client, gateway):
        gateway.error = RuntimeError("bad OPENAI_API_BASE")

        response = client.post(PATH, json={"imageBase64": IMAGE_B64, "scene": "a duel"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process manga panel"}
        assert_cors(response)

    def test_missing_image(self, client, gateway):
        response = client.post(PATH, json={"scene": "a duel"})

        assert response.status_code == 400
        assert "imageBase64" in response.json()["error"]
        assert_cors(response)
        assert gateway.calls == []

    def test_malformed_json(self, client):
        response = client.post(PATH, content=b"{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_invalid_base64(self, client, gateway):
        response = client.post(PATH, json={"imageBase64": "***", "scene": "a duel"})

        assert response.status_code == 400
        assert response.json() == {"error": "imageBase64 is not valid base64"}
        assert gateway.calls == []


class TestEmptyScene:
    """An empty scene is rejected with 400 and never reaches OpenAI."""

    def test_empty_scene_end_to_end(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        real_gateway = MangaPanelGateway(OpenAIClient(
            api_key="test-key",
            api_base="https://api.openai.test/v1",
            transport=httpx.MockTransport(handler)
        ))
        app.dependency_overrides[get_gateway] = lambda: real_gateway
        try:
            response = TestClient(app).post(PATH, json={"imageBase64": IMAGE_B64, "scene": ""})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 400
        assert response.json() == {"error": "Scene description is empty"}
        assert calls == []


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
