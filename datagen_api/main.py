"""FastAPI entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from datagen_api.config import ApiConfig
from datagen_api.dependencies import enforce_rate_limit
from datagen_api.errors import ApiError
from datagen_api.limiter import ip_rate_limit_exceeded_handler, limiter
from datagen_api.routes import commerce, dates, docs, health, location, network, people, support, text
from datagen_api.store import close_store, init_store

config = ApiConfig()

# Setup logging
logging.basicConfig(
    level=config.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle events for the FastAPI application."""
    # Startup
    logger.info("Starting up datagen-api in %s environment", config.environment)
    await init_store(config)
    if config.enable_test_routes:
        logger.warning("Test-support routes are enabled; do not use in production")

    yield

    # Shutdown
    logger.info("Shutting down datagen-api")
    await close_store()


app = FastAPI(
    title="Test Data Generation API",
    description="Fake data for testing, gated by API key and per-plan rate limits.",
    version="0.1.0",
    lifespan=lifespan,
)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_body(), status_code=exc.status_code, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        {"error": "Internal Server Error", "message": "An unexpected error occurred."},
        status_code=500,
    )


app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Per-IP rate limiting for unauthenticated routes
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, ip_rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware for browser-based clients
_cors_origins_raw = config.cors_allowed_origins
_cors_origins = [o.strip() for o in _cors_origins_raw.split(",") if o.strip()] if _cors_origins_raw else []
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["http://localhost:3000"],
    allow_credentials=False,  # Never combine allow_credentials=True with wildcard origins
    allow_methods=["GET", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key"],
    expose_headers=["Retry-After"],
)

# Public routes
app.include_router(docs.router)
app.include_router(health.router)
if config.enable_test_routes:
    app.include_router(support.router)

# Protected data routes: auth -> rate limit -> handler
_protected = [Depends(enforce_rate_limit)]
for _data_router in (people.router, location.router, commerce.router, network.router, dates.router, text.router):
    app.include_router(_data_router, dependencies=_protected)
