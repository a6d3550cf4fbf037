"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.logging import setup_logging

# Setup logging
logger = setup_logging("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the generation gateway at startup."""
    try:
        from app.services.gateway import GatewayConfig, GeminiGateway, MockGateway
        from app.services.generation import GenerationService

        settings = get_settings()
        if settings.mock_generation:
            gateway = MockGateway()
            logger.info("Using mock generation gateway")
        else:
            gateway = GeminiGateway(GatewayConfig.from_settings(settings))

        app.state.generation_service = GenerationService(gateway=gateway)
        logger.info("Services initialized successfully")
    except Exception as exc:
        logger.error(
            "Service initialization failed, running in degraded mode",
            exc_info=True,
            extra={"service": "main", "error_type": type(exc).__name__},
        )
        # Continue without services; /generate returns 503 until fixed

    yield


# Create FastAPI app
app = FastAPI(
    title="Character Forge Relay",
    description="Origin stories and portraits for D&D character sheets via Gemini",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as {"error": ...}."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are client input errors: answer 400, not 422."""
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'] if loc != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning("Rejected malformed request: %s", details, extra={"status_code": 400})
    return JSONResponse(status_code=400, content={"error": f"Invalid request body. {details}"})


# CORS configuration
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[f"http://localhost:{settings.frontend_port}"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
from app.api.generate import router as generate_router  # noqa: E402
from fastapi.staticfiles import StaticFiles  # noqa: E402

app.include_router(generate_router)


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Always returns HTTP 200; check `services.generation` for actual status.
    """
    svc = getattr(request.app.state, "generation_service", None)

    logger.info("Health check requested")
    return {
        "status": "ok",
        "version": app.version,
        "services": {
            "generation": "ok" if svc is not None else "unavailable",
        },
    }


# Serve the front end last so API routes take precedence over "/"
if settings.static_dir:
    _static_dir = Path(settings.static_dir)
    if _static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(_static_dir), html=True), name="static")
    else:
        logger.warning("STATIC_DIR %s does not exist; static serving disabled", _static_dir)


def main() -> None:
    """Run the relay with uvicorn."""
    import uvicorn

    cfg = get_settings()
    logger.info("Server running on http://%s:%d", cfg.backend_host, cfg.backend_port)
    uvicorn.run(app, host=cfg.backend_host, port=cfg.backend_port)


if __name__ == "__main__":
    main()
