"""
Clickbait Meter API — Application entry point.

Bootstraps FastAPI, wires up middleware, registers route groups and the
error handlers that give every failure the same {"error": "..."} body.

Extension points:
  - Add new route groups with app.include_router() below
  - Add new middleware in the middleware block
  - Change startup behaviour in the lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.rate_limit import limiter
from app.routes.analyze import ANALYSIS_FAILED
from app.routes.analyze import router as analyze_router
from app.routes.health import VERSION
from app.routes.health import router as health_router

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Log startup and shutdown.

    No connections to open: every request builds its own HTTP clients and
    nothing outlives the request.
    """
    logger.info(
        "Starting Clickbait Meter API (env: %s, youtube key: %s, search: %s)",
        settings.environment,
        bool(settings.youtube_api_key),
        bool(settings.google_search_api_key and settings.google_search_engine_id),
    )
    yield
    logger.info("Shutting down Clickbait Meter API")


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Clickbait Meter API",
    description=(
        "Scores how clickbait-y a YouTube video is from its metadata, comments "
        "and optional web-search investigation. All AI results are probabilistic."
    ),
    version=VERSION,
    lifespan=lifespan,
    # Disable docs in production to reduce attack surface
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ─── Error bodies ──────────────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # A missing, non-string or unparsable "url" is a plain client error here.
    logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": 'Request body must be JSON with a "url" string.'},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": ANALYSIS_FAILED})


# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(analyze_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "Clickbait Meter API",
        "version": VERSION,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
