"""Shared dependencies for FastAPI routes.

Protected routers are mounted with ``dependencies=[Depends(enforce_rate_limit)]``.
That runs the request pipeline in order: authentication, then rate limiting,
then the route itself. A failure at any stage raises an ``ApiError`` and the
later stages never run.
"""

from fastapi import Depends, Query, Request

from datagen_api.auth import ApiKeyRecord, authenticate_api_key
from datagen_api.config import ApiConfig
from datagen_api.generators import GeneratorContext, GeneratorInstanceManager, get_generator_manager
from datagen_api.rate_limit import FixedWindowRateLimiter
from datagen_api.store import KeyStore, get_key_store

_cfg = ApiConfig()

_rate_limiter = FixedWindowRateLimiter(
    plan_limits=_cfg.plan_limits,
    window_seconds=_cfg.rate_window_seconds,
)


def get_rate_limiter() -> FixedWindowRateLimiter:
    return _rate_limiter


async def enforce_rate_limit(
    request: Request,
    record: ApiKeyRecord = Depends(authenticate_api_key),
    store: KeyStore = Depends(get_key_store),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> ApiKeyRecord:
    """FastAPI dependency: authenticates, then counts the request against the key's plan.

    ``authenticate_api_key`` has already rejected a missing key or an unbound
    store, so both are present here.
    """
    await limiter.hit(store, request.state.api_key, record.plan)
    return record


async def localized_generator(
    locale: str | None = Query(default=None),
    seed: str | None = Query(default=None),
    manager: GeneratorInstanceManager = Depends(get_generator_manager),
) -> GeneratorContext:
    """Generator for routes that honour ``locale`` and ``seed``."""
    return manager.get(locale, seed)


async def default_generator(
    seed: str | None = Query(default=None),
    manager: GeneratorInstanceManager = Depends(get_generator_manager),
) -> GeneratorContext:
    """Generator for locale-independent routes (``seed`` only)."""
    return manager.get(None, seed)
