"""Shared test fixtures and configuration."""
import io
from typing import Any, Iterator

import pytest
from PIL import Image

from app.core.config import get_settings
from app.core.errors import UpstreamGenerationError
from app.core.result import Err, Ok, Result
from app.models.generation import BinaryPart
from app.services.gateway import GenerationGateway


@pytest.fixture(autouse=True)
def set_required_env_vars(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Set the required Gemini environment variables for all tests."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-api-key")
    monkeypatch.delenv("MOCK_GENERATION", raising=False)
    monkeypatch.delenv("STATIC_DIR", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_png(size: tuple[int, int] = (8, 8), mode: str = "RGBA") -> bytes:
    color: Any = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_jpeg(size: tuple[int, int] = (8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (30, 90, 200)).save(buffer, format="JPEG")
    return buffer.getvalue()


class FakeGateway(GenerationGateway):
    """In-memory gateway recording prompts and returning preset results."""

    def __init__(
        self,
        text: Result[str, UpstreamGenerationError] | None = None,
        image: Result[BinaryPart, UpstreamGenerationError] | None = None,
    ) -> None:
        self.text = text if text is not None else Ok("Once upon a time...")
        self.image = image if image is not None else Ok(BinaryPart(make_png(), "image/png"))
        self.text_prompts: list[str] = []
        self.image_prompts: list[str] = []

    async def generate_text(self, prompt: str) -> Result[str, UpstreamGenerationError]:
        self.text_prompts.append(prompt)
        return self.text

    async def generate_image(self, prompt: str) -> Result[BinaryPart, UpstreamGenerationError]:
        self.image_prompts.append(prompt)
        return self.image


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def failing_gateway() -> FakeGateway:
    return FakeGateway(
        text=Err(UpstreamGenerationError("quota exceeded")),
        image=Err(UpstreamGenerationError("quota exceeded")),
    )


@pytest.fixture
def story_payload() -> dict[str, Any]:
    return {
        "name": "Arin",
        "gender": "male",
        "race": "Elf",
        "class": "Wizard",
        "background": "Sage",
        "alignment": "Neutral Good",
        "stats": {"str": 8, "dex": 14, "con": 10, "int": 18, "wis": 12, "cha": 10},
    }


@pytest.fixture
def portrait_payload(story_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        **story_payload,
        "level": 5,
        "equipment": "a gnarled oak staff and a worn spellbook",
        "appearance": "tall and slender, silver hair, standing with one hand raised",
        "setting": "in an ancient forest library",
    }
