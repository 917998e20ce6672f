# main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import education, questionnaire, scores, smart_tip, vision
from api.middleware import ObservabilityMiddleware
from api.rate_limiter import limiter, rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

APP_VERSION = "1.0.0"

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger("wellness-api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Logs the external configuration at startup and closes the search cache on shutdown.
    """
    logger.info("=== Application Startup ===")

    supabase_url = os.getenv("SUPABASE_URL", "")
    anon_key = os.getenv("SUPABASE_ANON_KEY", "")
    service_key = os.getenv("SUPABASE_SERVICE_KEY", "")

    logger.warning(
        "SUPABASE_URL=%s ANON_PREFIX=%s SERVICE_PREFIX=%s",
        supabase_url,
        anon_key[:16] if anon_key else "(not set)",
        service_key[:16] if service_key else "(not set)"
    )
    logger.info(
        "YouTube key configured=%s, LLM key configured=%s, Redis configured=%s",
        bool(os.getenv("GOOGLE_YT_API_KEY")),
        bool(os.getenv("OPENAI_API_KEY")),
        bool(os.getenv("REDIS_URL")),
    )
    logger.info("=== Application Ready ===")

    yield

    logger.info("=== Application Shutdown ===")
    try:
        from services.search_cache import get_search_cache
        await get_search_cache().close()
        logger.info("Cache connection closed")
    except Exception as e:
        logger.warning(f"Error closing cache: {e}")
    logger.info("=== Shutdown Complete ===")


app = FastAPI(
    title="Vision Wellness API",
    description="Wellness questionnaires, vision tests, wellness wheel, education search and smart tips.",
    version=APP_VERSION,
    lifespan=lifespan
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return rate_limit_exceeded_handler(request, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url,
        exc_info=True
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# --- CORS ---
ALLOWED_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8888",
]

cors_origins_env = os.getenv("CORS_ORIGINS")
if cors_origins_env:
    for origin in cors_origins_env.split(","):
        origin = origin.strip()
        if origin and origin not in ALLOWED_ORIGINS:
            ALLOWED_ORIGINS.append(origin)

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)

app.add_middleware(ObservabilityMiddleware)

app.include_router(questionnaire.router)
app.include_router(vision.router)
app.include_router(scores.router)
app.include_router(education.router)
app.include_router(smart_tip.router)


@app.get("/", tags=["Health Check"])
def read_root():
    return {"message": f"Vision Wellness API v{APP_VERSION} is running", "status": "healthy"}


@app.get("/health", tags=["Health Check"])
def health_check():
    return {"status": "healthy", "uptime": "ok", "version": APP_VERSION}
