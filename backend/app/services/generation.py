"""GenerationService: composes validation, prompting, generation and transcoding."""
import base64
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from app.core.errors import GenerationError, InputError
from app.core.logging import setup_logging
from app.core.result import Err, Ok, Result
from app.models.character import CharacterData
from app.models.generation import GenerationType, PortraitResponse, StoryResponse
from app.services.gateway import GenerationGateway
from app.services.prompts import build_portrait_prompt, build_story_prompt
from app.services.transcoder import JPEG_QUALITY, format_for_mime_type, transcode
from app.services.validator import validate_portrait_data

logger = setup_logging("generation")

MISSING_DATA_MESSAGE = "Character data is missing."
INVALID_TYPE_MESSAGE = "Invalid generation type."


class GenerationService:
    """Runs one generation request end to end.

    Every step returns a Result and the first Err is returned as-is, so the
    router only has to map the error's status code. Nothing is retried.
    """

    def __init__(self, gateway: GenerationGateway) -> None:
        self.gateway = gateway

    async def generate(
        self, generation_type: Optional[str], data: Optional[CharacterData]
    ) -> Result[StoryResponse | PortraitResponse, GenerationError]:
        """Dispatch on ``generation_type`` after checking character data is present."""
        if data is None:
            return Err(InputError(MISSING_DATA_MESSAGE))
        if generation_type == GenerationType.story.value:
            return await self.generate_story(data)
        if generation_type == GenerationType.portrait.value:
            return await self.generate_portrait(data)
        return Err(InputError(INVALID_TYPE_MESSAGE))

    async def generate_story(self, data: CharacterData) -> Result[StoryResponse, GenerationError]:
        prompt = build_story_prompt(data)
        logger.info("Sending story prompt to text model", extra={"generation_type": "story"})
        result = await self.gateway.generate_text(prompt)
        if isinstance(result, Err):
            return result
        return Ok(StoryResponse(text=result.value))

    async def generate_portrait(
        self, data: CharacterData
    ) -> Result[PortraitResponse, GenerationError]:
        """Validate, prompt, generate and convert a portrait to JPEG."""
        validated = validate_portrait_data(data)
        if isinstance(validated, Err):
            return validated

        prompt = build_portrait_prompt(validated.value)
        logger.info("Sending portrait prompt to image model", extra={"generation_type": "portrait"})
        image = await self.gateway.generate_image(prompt)
        if isinstance(image, Err):
            return image

        # Unknown media types fall back to format detection
        source_format = format_for_mime_type(image.value.mime_type)
        converted = await run_in_threadpool(
            transcode, image.value.data, source_format, "jpeg", JPEG_QUALITY
        )
        if isinstance(converted, Err):
            return converted

        logger.info("Conversion successful, returning JPEG", extra={"generation_type": "portrait"})
        return Ok(
            PortraitResponse(
                image_base_64=base64.b64encode(converted.value).decode("ascii"),
                mime_type="image/jpeg",
            )
        )
