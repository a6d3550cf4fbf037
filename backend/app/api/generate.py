"""Generation API router."""
from fastapi import APIRouter, Depends, HTTPException, Request

from app.core.logging import setup_logging
from app.core.result import Err
from app.models.generation import GenerationRequest, PortraitResponse, StoryResponse
from app.services.generation import GenerationService

logger = setup_logging("generate-router")

router = APIRouter(tags=["generation"])


def get_generation_service(request: Request) -> GenerationService:
    """FastAPI dependency: retrieve GenerationService from app.state.

    Returns HTTP 503 if the service was not initialized at startup
    (i.e. no Gemini API key was configured).
    """
    svc: GenerationService | None = getattr(request.app.state, "generation_service", None)
    if svc is None:
        raise HTTPException(
            status_code=503,
            detail="Generation service unavailable. Check the server configuration.",
        )
    return svc


@router.post("/generate", response_model=StoryResponse | PortraitResponse)
async def generate(
    body: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
) -> StoryResponse | PortraitResponse:
    """Generate an origin story or a portrait for a character sheet.

    Raises:
        HTTPException 400: Missing character data, incomplete portrait fields
            or an unknown generation type.
        HTTPException 500: Upstream generation or image conversion failure.
    """
    try:
        result = await service.generate(body.type, body.character_data)
    except Exception as exc:
        logger.error(
            "AI generation error",
            exc_info=True,
            extra={"service": "GenerationRouter", "generation_type": body.type},
        )
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    if isinstance(result, Err):
        error = result.error
        log = logger.warning if error.status_code < 500 else logger.error
        log(
            "Generation failed: %s",
            error.message,
            extra={
                "service": "GenerationRouter",
                "generation_type": body.type,
                "status_code": error.status_code,
                "error_type": type(error).__name__,
            },
        )
        raise HTTPException(status_code=error.status_code, detail=error.message)
    return result.value
