"""
Main FastAPI application.

Livability score service: fans out to Earth observation feeds for a point,
derives heat, hazard, air-quality and density metrics, and returns a score
with advice.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from earthscore.core.api_registry import get_all_sources
from earthscore.core.config import get_settings
from earthscore.core.schemas import ErrorResponse
from earthscore.api.v1 import chat, score

SERVICE_NAME = "EarthScore Livability Service"
VERSION = "0.1.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Runs on startup and shutdown.
    """
    # Startup
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    narrative = settings.narrative_config()
    logger.info(f"Starting {SERVICE_NAME}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Source timeout: {settings.source_timeout_seconds}s")
    if narrative.has_credentials:
        logger.info(f"Text-generation providers: {', '.join(narrative.provider_credentials)}")
    else:
        logger.info("No text-generation provider configured; advice is rule-based and chat is disabled")
    if not settings.openaq_api_key:
        logger.info("OPENAQ_API_KEY not set; observed air quality is skipped")

    yield

    # Shutdown
    logger.info("Shutting down")


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Point livability score from NASA and open Earth observation feeds",
    version=VERSION,
    lifespan=lifespan
)

# CORS middleware (configure as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors with the standard error shape."""
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in errors
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request", detail=detail or None).model_dump(),
    )


# Include routers
app.include_router(score.router, prefix="/api/v1")
app.include_router(chat.router, prefix="/api/v1")


@app.get("/")
def root():
    """Root endpoint with service info."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "sources": get_all_sources(),
        "endpoints": ["/api/v1/score", "/api/v1/chat"],
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """
    Health check endpoint.

    Reports liveness and which optional providers are configured.
    """
    settings = get_settings()
    narrative = settings.narrative_config()
    return {
        "status": "healthy",
        "service": "running",
        "providers": {
            "openai": "openai" in narrative.provider_credentials,
            "anthropic": "anthropic" in narrative.provider_credentials,
            "openaq": bool(settings.openaq_api_key),
        },
        "generated_advice": settings.enable_generated_advice and narrative.has_credentials,
    }
