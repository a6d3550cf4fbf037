"""Request, response and upstream-part models for the /generate endpoint."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.character import CharacterData


class GenerationType(str, Enum):
    """Supported generation branches."""

    story = "story"
    portrait = "portrait"


class GenerationRequest(BaseModel):
    """Inbound payload.

    ``type`` stays a plain string so an unknown value reaches the dispatcher
    and is rejected with a readable message instead of a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = None
    character_data: Optional[CharacterData] = Field(None, alias="characterData")


class StoryResponse(BaseModel):
    """Successful story generation."""

    text: str


class PortraitResponse(BaseModel):
    """Successful portrait generation, JPEG encoded as base64."""

    image_base_64: str
    mime_type: str = "image/jpeg"


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str


@dataclass(frozen=True)
class TextPart:
    """A text fragment returned by the generative service."""

    text: str


@dataclass(frozen=True)
class BinaryPart:
    """Inline binary payload (already decoded) with its media type."""

    data: bytes
    mime_type: str


ResponsePart = Union[TextPart, BinaryPart]
