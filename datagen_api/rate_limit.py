"""Per-key fixed-window rate limiting on top of the key store.

Each key has one window record under ``rate_limit:<api_key>``:

    {"windowStart": <epoch ms>, "count": <admitted requests>}

A window lasts ``window_seconds``. The first request after it elapses starts
a new one. Rejections do not touch the record. Records expire after 1.5
windows so abandoned keys clean themselves up.

The read and the write are separate store calls with no lock around them.
Concurrent requests for one key can both read the same count and both be
admitted, so a window may admit slightly more than the plan allows. A burst
straddling a window boundary can likewise see up to twice the limit.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from datagen_api.errors import InternalError, TooManyRequests
from datagen_api.store import KeyStore, KeyStoreError

logger = logging.getLogger(__name__)

WINDOW_KEY_PREFIX = "rate_limit:"
DEFAULT_PLAN = "default"
FALLBACK_LIMIT = 5  # used only when the config has no "default" plan


def window_key(api_key: str) -> str:
    return f"{WINDOW_KEY_PREFIX}{api_key}"


class RateWindow(BaseModel):
    """Stored counter for one key's current window."""

    model_config = ConfigDict(populate_by_name=True)

    window_start: int = Field(alias="windowStart")
    count: int = Field(default=0, ge=0)

    def to_store(self) -> dict[str, int]:
        return self.model_dump(by_alias=True)


class FixedWindowRateLimiter:
    """Admit or reject requests against a plan's per-window budget."""

    def __init__(
        self,
        plan_limits: Mapping[str, int],
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._plan_limits = dict(plan_limits)
        self._window_ms = window_seconds * 1000
        self._clock = clock

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def ttl_seconds(self) -> int:
        return math.ceil(self._window_ms * 1.5 / 1000)

    def limit_for(self, plan: str | None) -> int:
        limit = self._plan_limits.get(plan or DEFAULT_PLAN)
        if limit is None:
            limit = self._plan_limits.get(DEFAULT_PLAN, FALLBACK_LIMIT)
        return limit

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _current_window(self, stored: dict | None, now: int) -> RateWindow:
        if stored is not None:
            try:
                window = RateWindow.model_validate(stored)
            except ValidationError:
                logger.warning("Discarding malformed rate-limit window: %r", stored)
            else:
                if now - window.window_start < self._window_ms:
                    return window
        return RateWindow(window_start=now, count=0)

    def retry_after(self, window: RateWindow, now: int) -> int:
        """Whole seconds until ``window`` ends, never less than 1."""
        remaining = self._window_ms - (now - window.window_start)
        return max(1, math.ceil(remaining / 1000))

    async def hit(self, store: KeyStore, api_key: str | None, plan: str | None) -> RateWindow | None:
        """Count one request for ``api_key``.

        Returns the window as written, or None when there is no key to
        count against (authentication rejects those requests).

        Raises:
            TooManyRequests: the window budget is used up.
            InternalError: the store failed.
        """
        if not api_key:
            return None

        limit = self.limit_for(plan)
        key = window_key(api_key)
        now = self._now_ms()

        try:
            stored = await store.get(key)
        except KeyStoreError:
            logger.exception("Rate limiter could not read window")
            raise InternalError("An error occurred during rate limiting.")

        window = self._current_window(stored, now)

        if window.count >= limit:
            retry_after = self.retry_after(window, now)
            logger.info("Rate limit hit (plan=%s, limit=%d, retry_after=%ds)", plan, limit, retry_after)
            raise TooManyRequests(retry_after)

        admitted = RateWindow(window_start=window.window_start, count=window.count + 1)
        try:
            await store.put(key, admitted.to_store(), ttl=self.ttl_seconds)
        except KeyStoreError:
            logger.exception("Rate limiter could not write window")
            raise InternalError("An error occurred during rate limiting.")
        return admitted
