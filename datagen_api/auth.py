"""API key authentication.

Provides:
- ``ApiKeyRecord``, the stored description of a key
- ``authenticate_api_key``, the FastAPI dependency guarding data routes

Keys are provisioned out of band; this module only reads them.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header, Request
from pydantic import BaseModel, ValidationError, field_validator

from datagen_api.errors import ConfigurationError, Forbidden, InternalError, Unauthorized
from datagen_api.store import KeyStore, KeyStoreError, get_key_store

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class ApiKeyRecord(BaseModel):
    """A provisioned API key."""

    enabled: bool = False
    plan: str = "default"

    @field_validator("enabled", mode="before")
    @classmethod
    def _null_is_disabled(cls, value):
        return False if value is None else value

    @field_validator("plan", mode="before")
    @classmethod
    def _empty_plan_is_default(cls, value):
        # Missing, empty or non-string plans are treated as unknown
        return value if isinstance(value, str) and value else "default"


def redact_key(api_key: str) -> str:
    """Short prefix of a key, safe to log."""
    return f"{api_key[:4]}…" if len(api_key) > 4 else "…"


async def lookup_api_key(store: KeyStore, api_key: str) -> ApiKeyRecord:
    """Fetch and check the record for ``api_key``.

    Raises:
        Forbidden: the key is unknown or disabled.
        InternalError: the store failed or holds a malformed record.
    """
    try:
        data = await store.get(api_key)
    except KeyStoreError:
        logger.exception("Key store lookup failed for key %s", redact_key(api_key))
        raise InternalError("An error occurred during authentication.")

    if data is None:
        raise Forbidden("Invalid API key.")

    try:
        record = ApiKeyRecord.model_validate(data)
    except ValidationError:
        logger.error("Malformed API key record for key %s", redact_key(api_key))
        raise InternalError("An error occurred during authentication.")

    if not record.enabled:
        raise Forbidden("API key is disabled.")
    return record


async def authenticate_api_key(
    request: Request,
    x_api_key: str | None = Header(default=None, alias=API_KEY_HEADER),
    store: KeyStore | None = Depends(get_key_store),
) -> ApiKeyRecord:
    """FastAPI dependency: resolves the ``X-API-Key`` header to its record.

    On success the record is also attached to ``request.state.api_key_record``
    for downstream consumers.

    Raises:
        Unauthorized: no key supplied.
        ConfigurationError: no key store bound.
        Forbidden: unknown or disabled key.
        InternalError: key store failure.
    """
    if not x_api_key:
        raise Unauthorized("API key is required.")

    if store is None:
        logger.error("Auth error: key store is not bound")
        raise ConfigurationError()

    record = await lookup_api_key(store, x_api_key)
    request.state.api_key = x_api_key
    request.state.api_key_record = record
    return record
