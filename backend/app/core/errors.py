"""Error taxonomy for the generation pipeline.

Each error knows the HTTP status it maps to, so the router can turn any
failed step into a single ``{"error": ...}`` response.
"""


class GenerationError(Exception):
    """Base class for every failure surfaced to the client."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputError(GenerationError):
    """The client sent unusable input (missing data, blank field, unknown type)."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UpstreamGenerationError(GenerationError):
    """The generative service failed or returned nothing usable."""


class ImageNotGeneratedError(UpstreamGenerationError):
    """The image service answered without any inline image data."""

    def __init__(self, feedback: str) -> None:
        super().__init__(f'API did not generate an image. It responded with: "{feedback}"')
        self.feedback = feedback


class TranscodingError(GenerationError):
    """Bitmap conversion failed."""
