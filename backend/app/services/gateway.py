"""Generation gateway: calls to the Gemini text and image models."""
import base64
import io
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types
from PIL import Image
from pydantic import BaseModel, ConfigDict, field_validator

from app.core.config import Settings
from app.core.errors import ImageNotGeneratedError, UpstreamGenerationError
from app.core.logging import setup_logging
from app.core.result import Err, Ok, Result
from app.models.generation import BinaryPart, ResponsePart, TextPart

logger = setup_logging("gateway")

NO_FEEDBACK_PLACEHOLDER = "No text or image feedback from API."
NO_TEXT_MESSAGE = "Text model returned no content."


class GatewayConfig(BaseModel):
    """Explicit gateway configuration, built once at startup."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    text_model: str
    image_model: str

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("GEMINI_API_KEY is required unless MOCK_GENERATION is enabled")
        return value

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        return cls(
            api_key=settings.gemini_api_key,
            text_model=settings.text_model,
            image_model=settings.image_model,
        )


def parts_from_response(response: Any) -> list[ResponsePart]:
    """Convert the first candidate's parts into TextPart / BinaryPart values.

    Inline data normally arrives as bytes; a base64 string is decoded here.
    Parts carrying neither text nor data are dropped.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    raw_parts = getattr(content, "parts", None) or []

    parts: list[ResponsePart] = []
    for part in raw_parts:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline is not None else None
        if data:
            if isinstance(data, str):
                data = base64.b64decode(data)
            mime_type = getattr(inline, "mime_type", None) or "image/png"
            parts.append(BinaryPart(data=bytes(data), mime_type=mime_type))
            continue
        text = getattr(part, "text", None)
        if isinstance(text, str) and text:
            parts.append(TextPart(text=text))
    return parts


def _enum_name(value: Any) -> str:
    return str(getattr(value, "value", value))


def describe_empty_response(response: Any) -> str:
    """Explain why a response carried no text, using the block / finish reasons."""
    reasons: list[str] = []
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None:
        block_reason = getattr(feedback, "block_reason", None)
        if block_reason:
            reasons.append(f"block_reason={_enum_name(block_reason)}")
        block_message = getattr(feedback, "block_reason_message", None)
        if block_message:
            reasons.append(block_message)
    candidates = getattr(response, "candidates", None)
    if candidates:
        finish_reason = getattr(candidates[0], "finish_reason", None)
        if finish_reason:
            reasons.append(f"finish_reason={_enum_name(finish_reason)}")
        finish_message = getattr(candidates[0], "finish_message", None)
        if finish_message:
            reasons.append(finish_message)
    if not reasons:
        return NO_TEXT_MESSAGE
    return f"{NO_TEXT_MESSAGE} ({'; '.join(reasons)})"


def extract_image(parts: Sequence[ResponsePart]) -> Result[BinaryPart, ImageNotGeneratedError]:
    """Return the first binary part; otherwise fail with the collected text."""
    texts: list[str] = []
    for part in parts:
        if isinstance(part, BinaryPart):
            return Ok(part)
        texts.append(part.text)
    feedback = "\n".join(texts) or NO_FEEDBACK_PLACEHOLDER
    return Err(ImageNotGeneratedError(feedback))


class GenerationGateway(ABC):
    """Interface the generation service depends on."""

    @abstractmethod
    async def generate_text(self, prompt: str) -> Result[str, UpstreamGenerationError]:
        """Generate text for a prompt."""

    @abstractmethod
    async def generate_image(self, prompt: str) -> Result[BinaryPart, UpstreamGenerationError]:
        """Generate an image for a prompt; the part keeps its media type."""


class GeminiGateway(GenerationGateway):
    """Gateway backed by the google-genai async client."""

    def __init__(self, config: GatewayConfig, client: Optional[genai.Client] = None) -> None:
        self.config = config
        self._client = client if client is not None else genai.Client(api_key=config.api_key)

    async def generate_text(self, prompt: str) -> Result[str, UpstreamGenerationError]:
        """Send the prompt to the text model and return its flattened text."""
        try:
            response = await self._client.aio.models.generate_content(
                model=self.config.text_model,
                contents=prompt,
            )
        except Exception as exc:
            logger.error(
                "Text generation call failed: %s",
                exc,
                exc_info=True,
                extra={"service": "GeminiGateway", "generation_type": "story"},
            )
            return Err(UpstreamGenerationError(str(exc)))

        text = response.text
        if not text:
            message = describe_empty_response(response)
            logger.error(
                "%s", message, extra={"service": "GeminiGateway", "generation_type": "story"}
            )
            return Err(UpstreamGenerationError(message))
        return Ok(text)

    async def generate_image(self, prompt: str) -> Result[BinaryPart, UpstreamGenerationError]:
        """Send the prompt to the image model and pick the first inline image.

        When the model answers with text only (e.g. a policy refusal) that
        text becomes the failure detail.
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self.config.image_model,
                contents=prompt,
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except Exception as exc:
            logger.error(
                "Image generation call failed: %s",
                exc,
                exc_info=True,
                extra={"service": "GeminiGateway", "generation_type": "portrait"},
            )
            return Err(UpstreamGenerationError(str(exc)))

        result = extract_image(parts_from_response(response))
        if isinstance(result, Err):
            logger.error(
                "API did not return an image part. Text feedback: %s",
                result.error.feedback,
                extra={"service": "GeminiGateway", "generation_type": "portrait"},
            )
        else:
            logger.info(
                "Image part found (%s, %d bytes)", result.value.mime_type, len(result.value.data)
            )
        return result


MOCK_STORY = (
    "Born beneath a sky of falling stars, our hero learned early that the world "
    "rewards the curious. Years of study and hardship shaped a restless spirit, "
    "and when an old mentor vanished without a word, the road became the only answer."
)


class MockGateway(GenerationGateway):
    """Offline gateway returning a canned story and a plain PNG."""

    def __init__(self, story: str = MOCK_STORY, size: tuple[int, int] = (64, 96)) -> None:
        self.story = story
        self.size = size

    async def generate_text(self, prompt: str) -> Result[str, UpstreamGenerationError]:
        logger.info("Mock gateway returning canned story")
        return Ok(self.story)

    async def generate_image(self, prompt: str) -> Result[BinaryPart, UpstreamGenerationError]:
        logger.info("Mock gateway returning placeholder portrait")
        buffer = io.BytesIO()
        Image.new("RGBA", self.size, (92, 64, 51, 255)).save(buffer, format="PNG")
        return Ok(BinaryPart(data=buffer.getvalue(), mime_type="image/png"))
