"""Test-support routes.

Only mounted when ``DATAGEN_API_ENABLE_TEST_ROUTES=true``. They let an
integration suite reset a key's rate-limit window between cases. Never
enable them in production: anyone who can reach them can clear any key's
window.
"""

import logging

from fastapi import APIRouter, Depends, Request

from datagen_api.errors import ConfigurationError, InternalError
from datagen_api.limiter import PUBLIC_LIMIT, limiter
from datagen_api.rate_limit import window_key
from datagen_api.store import KeyStore, KeyStoreError, get_key_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/test", tags=["test-support"])


@router.delete("/rate-limit/{api_key}")
@limiter.limit(PUBLIC_LIMIT)
async def clear_rate_limit(
    request: Request,
    api_key: str,
    store: KeyStore | None = Depends(get_key_store),
):
    """Delete the stored rate-limit window for ``api_key``."""
    if store is None:
        logger.error("Rate limit clear error: key store is not bound")
        raise ConfigurationError()

    key = window_key(api_key)
    try:
        await store.delete(key)
    except KeyStoreError:
        logger.exception("Failed to delete rate-limit window")
        raise InternalError(f"Failed to delete key {key}.")

    logger.info("[test support] deleted rate-limit window")
    return {"success": True, "message": f"Rate limit key {key} deleted."}
