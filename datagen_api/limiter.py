"""Shared per-IP limiter for the unauthenticated routes.

Data routes are budgeted per API key (see ``rate_limit.py``). Public and
test-support routes have no key, so they are throttled by client address
instead. Defined here (rather than in main.py) so that route modules can
import it for per-endpoint decorators without creating circular imports.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from datagen_api.config import ApiConfig

_cfg = ApiConfig()

PUBLIC_LIMIT = _cfg.rate_limit_public

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    enabled=_cfg.rate_limit_enabled,
)


def ip_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render slowapi rejections in the same shape as every other error."""
    return JSONResponse(
        {"error": "Too Many Requests", "message": f"Rate limit exceeded: {exc.detail}"},
        status_code=429,
    )
