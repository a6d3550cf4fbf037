"""Tests for FastAPI app entry point."""
import os
import subprocess
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parent.parent


def test_health_endpoint_returns_200() -> None:
    """Health check endpoint should return HTTP 200."""
    from app.main import app
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200


def test_health_endpoint_returns_status_ok() -> None:
    """Health check response should contain status=ok."""
    from app.main import app
    client = TestClient(app)
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert "version" in data
    assert data["services"]["generation"] in ("ok", "unavailable")


def test_health_reports_generation_ok_after_startup() -> None:
    """Running the lifespan builds the Gemini gateway from settings."""
    from app.main import app
    from app.services.gateway import GeminiGateway

    with TestClient(app) as client:
        data = client.get("/health").json()
        assert data["services"]["generation"] == "ok"
        assert isinstance(app.state.generation_service.gateway, GeminiGateway)
    del app.state.generation_service


def test_app_has_correct_title() -> None:
    """FastAPI app should have the project title."""
    from app.main import app
    assert app.title == "Character Forge Relay"


def test_app_has_cors_middleware() -> None:
    """App should allow requests from frontend origin."""
    from app.main import app
    from starlette.middleware.cors import CORSMiddleware
    middleware_classes = [m.cls for m in app.user_middleware]
    assert CORSMiddleware in middleware_classes


def test_unknown_route_uses_error_shape() -> None:
    """HTTP errors are rendered as {"error": ...}."""
    from app.main import app
    client = TestClient(app)
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert "error" in response.json()


# ---------------------------------------------------------------------------
# Startup without credentials
# ---------------------------------------------------------------------------


def _drop_generation_service() -> None:
    from app.main import app

    if hasattr(app.state, "generation_service"):
        del app.state.generation_service


def test_app_module_imports_without_api_key(tmp_path: Path) -> None:
    """A fresh interpreter can import the app when GEMINI_API_KEY is unset."""
    env = {k: v for k, v in os.environ.items() if k != "GEMINI_API_KEY"}
    env["PYTHONPATH"] = str(BACKEND_DIR)
    proc = subprocess.run(
        [sys.executable, "-c", "import app.main"],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
    )
    assert proc.returncode == 0, proc.stderr


def test_startup_without_api_key_runs_degraded(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Without a key the lifespan keeps the app up: /health is unavailable, /generate is 503."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    from app.core.config import get_settings
    from app.main import app

    get_settings.cache_clear()
    _drop_generation_service()
    with TestClient(app) as client:
        health = client.get("/health").json()
        resp = client.post("/generate", json={"type": "story", "characterData": {"name": "Arin"}})

    assert health["services"]["generation"] == "unavailable"
    assert resp.status_code == 503
    assert "unavailable" in resp.json()["error"]
    assert not hasattr(app.state, "generation_service")


def test_startup_with_mock_generation(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("MOCK_GENERATION", "true")
    from app.core.config import get_settings
    from app.main import app
    from app.services.gateway import MockGateway

    get_settings.cache_clear()
    with TestClient(app) as client:
        resp = client.post("/generate", json={"type": "story", "characterData": {"name": "Arin"}})
        assert isinstance(app.state.generation_service.gateway, MockGateway)
    _drop_generation_service()

    assert resp.status_code == 200
    assert resp.json()["text"]
