"""Health check endpoints."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from datagen_api.limiter import PUBLIC_LIMIT, limiter
from datagen_api.store import KeyStore, get_key_store

router = APIRouter()


@router.get("/ping", response_class=PlainTextResponse)
@limiter.limit(PUBLIC_LIMIT)
async def ping(request: Request) -> str:
    """Simple liveness check."""
    return "pong"


@router.get("/health")
@limiter.limit(PUBLIC_LIMIT)
async def health_check(request: Request, store: KeyStore | None = Depends(get_key_store)):
    """Liveness plus key store connectivity."""
    if store is None:
        store_status = "unbound"
    else:
        try:
            store_status = "ok" if await store.ping() else "error"
        except Exception:
            store_status = "error"  # Exception details may contain connection strings

    return {
        "status": "up" if store_status == "ok" else "degraded",
        "key_store": store_status,
        "service": "datagen-api",
    }
