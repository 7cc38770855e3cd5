"""Tests for the fixed-window rate limiter."""

import asyncio
from types import SimpleNamespace

import pytest

from datagen_api.auth import ApiKeyRecord
from datagen_api.dependencies import enforce_rate_limit
from datagen_api.errors import InternalError, TooManyRequests
from datagen_api.rate_limit import FixedWindowRateLimiter, RateWindow, window_key
from datagen_api.store import InMemoryKeyStore, KeyStoreError

PLAN_LIMITS = {"test": 1000, "free": 5, "pro": 100, "default": 5}
START = 1_700_000_000.0


class FakeClock:

    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingStore(InMemoryKeyStore):
    """Memory store that remembers every put."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.puts: list[tuple[str, dict, int | None]] = []

    async def put(self, key, value, ttl=None):
        self.puts.append((key, value, ttl))
        await super().put(key, value, ttl)


class SlowReadStore(InMemoryKeyStore):
    """Memory store that yields to the event loop after every read, like a network round trip."""

    async def get(self, key):
        value = await super().get(key)
        await asyncio.sleep(0)
        return value


class BrokenReadStore(InMemoryKeyStore):

    async def get(self, key):
        raise KeyStoreError("connection refused")


class BrokenWriteStore(InMemoryKeyStore):

    async def put(self, key, value, ttl=None):
        raise KeyStoreError("read-only replica")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return FixedWindowRateLimiter(PLAN_LIMITS, window_seconds=60, clock=clock)


class TestLimits:

    def test_plan_limit(self, limiter):
        assert limiter.limit_for("free") == 5
        assert limiter.limit_for("pro") == 100

    def test_unknown_or_missing_plan_uses_default(self, limiter):
        assert limiter.limit_for("enterprise") == 5
        assert limiter.limit_for(None) == 5

    def test_fallback_without_default_plan(self):
        assert FixedWindowRateLimiter({"pro": 100}).limit_for("free") == 5

    def test_ttl_is_one_and_a_half_windows(self, limiter):
        assert limiter.ttl_seconds == 90


class TestFixedWindow:

    @pytest.mark.asyncio
    async def test_limit_th_request_admits_next_rejects(self, limiter):
        store = InMemoryKeyStore()
        for expected in range(1, 6):
            window = await limiter.hit(store, "K1", "free")
            assert window.count == expected

        with pytest.raises(TooManyRequests) as exc_info:
            await limiter.hit(store, "K1", "free")
        assert exc_info.value.retry_after == 60
        assert exc_info.value.headers == {"Retry-After": "60"}
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_retry_after_counts_down(self, limiter, clock):
        store = InMemoryKeyStore()
        for _ in range(5):
            await limiter.hit(store, "K1", "free")
        clock.advance(45.5)
        with pytest.raises(TooManyRequests) as exc_info:
            await limiter.hit(store, "K1", "free")
        assert exc_info.value.retry_after == 15

    @pytest.mark.asyncio
    async def test_retry_after_floor_is_one_second(self, limiter, clock):
        store = InMemoryKeyStore()
        for _ in range(5):
            await limiter.hit(store, "K1", "free")
        clock.advance(59.999)
        with pytest.raises(TooManyRequests) as exc_info:
            await limiter.hit(store, "K1", "free")
        assert exc_info.value.retry_after == 1

    @pytest.mark.asyncio
    async def test_rejection_leaves_window_untouched(self, limiter, clock):
        store = InMemoryKeyStore()
        for _ in range(5):
            await limiter.hit(store, "K1", "free")
        before = await store.get(window_key("K1"))
        clock.advance(10)
        for _ in range(3):
            with pytest.raises(TooManyRequests):
                await limiter.hit(store, "K1", "free")
        assert await store.get(window_key("K1")) == before == {
            "windowStart": int(START * 1000),
            "count": 5,
        }

    @pytest.mark.asyncio
    async def test_new_window_after_window_length(self, limiter, clock):
        store = InMemoryKeyStore()
        for _ in range(5):
            await limiter.hit(store, "K1", "free")
        clock.advance(60)
        window = await limiter.hit(store, "K1", "free")
        assert window.count == 1
        assert window.window_start == int((START + 60) * 1000)

    @pytest.mark.asyncio
    async def test_keeps_window_start_within_window(self, limiter, clock):
        store = InMemoryKeyStore()
        await limiter.hit(store, "K1", "free")
        clock.advance(30)
        window = await limiter.hit(store, "K1", "free")
        assert window.window_start == int(START * 1000)
        assert window.count == 2

    @pytest.mark.asyncio
    async def test_boundary_burst_admits_twice_the_limit(self, limiter, clock):
        # Fixed-window policy: a burst straddling the boundary is not smoothed.
        store = InMemoryKeyStore()
        await limiter.hit(store, "K1", "free")  # opens the window at START
        clock.advance(59.5)
        burst = [await limiter.hit(store, "K1", "free") for _ in range(4)]
        clock.advance(0.5)
        burst += [await limiter.hit(store, "K1", "free") for _ in range(5)]

        # 9 requests admitted within one second, across two windows
        assert len(burst) == 9
        assert [w.count for w in burst] == [2, 3, 4, 5, 1, 2, 3, 4, 5]
        assert burst[-1].window_start == int((START + 60) * 1000)
        with pytest.raises(TooManyRequests):
            await limiter.hit(store, "K1", "free")

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, limiter):
        store = InMemoryKeyStore()
        for _ in range(5):
            await limiter.hit(store, "K1", "free")
        window = await limiter.hit(store, "K2", "free")
        assert window.count == 1

    @pytest.mark.asyncio
    async def test_writes_with_ttl(self, limiter):
        store = RecordingStore()
        await limiter.hit(store, "K1", "pro")
        assert store.puts == [
            ("rate_limit:K1", {"windowStart": int(START * 1000), "count": 1}, 90),
        ]

    @pytest.mark.asyncio
    async def test_stored_window_expires_by_ttl(self, clock):
        store = InMemoryKeyStore(clock=clock)
        limiter = FixedWindowRateLimiter(PLAN_LIMITS, clock=clock)
        await limiter.hit(store, "K1", "free")
        clock.advance(90)
        assert await store.get(window_key("K1")) is None

    @pytest.mark.asyncio
    async def test_malformed_window_starts_fresh(self, limiter):
        store = InMemoryKeyStore(initial={window_key("K1"): {"count": "lots"}})
        window = await limiter.hit(store, "K1", "free")
        assert window.count == 1

    @pytest.mark.asyncio
    async def test_missing_key_bypasses(self, limiter):
        store = BrokenReadStore()
        assert await limiter.hit(store, None, "free") is None
        assert await limiter.hit(store, "", "free") is None


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_concurrent_requests_may_overshoot_limit(self, limiter):
        # Read-modify-write without a lock: every request reads the empty
        # window before any write lands, so all are admitted and the last
        # write wins. This is the accepted best-effort bound.
        store = SlowReadStore()
        results = await asyncio.gather(
            *(limiter.hit(store, "K1", "free") for _ in range(8)),
            return_exceptions=True,
        )
        admitted = [r for r in results if isinstance(r, RateWindow)]
        assert len(admitted) == 8
        assert (await store.get(window_key("K1")))["count"] == 1

    @pytest.mark.asyncio
    async def test_sequential_requests_never_overshoot(self, limiter):
        store = SlowReadStore()
        outcomes = []
        for _ in range(8):
            try:
                await limiter.hit(store, "K1", "free")
                outcomes.append("ok")
            except TooManyRequests:
                outcomes.append("429")
        assert outcomes == ["ok"] * 5 + ["429"] * 3


class TestEnforceRateLimit:

    @pytest.mark.asyncio
    async def test_counts_against_authenticated_key(self, limiter):
        store = InMemoryKeyStore()
        request = SimpleNamespace(state=SimpleNamespace(api_key="K1"))
        record = ApiKeyRecord(enabled=True, plan="free")

        returned = await enforce_rate_limit(request, record, store, limiter)

        assert returned is record
        assert await store.get(window_key("K1")) == {"windowStart": int(START * 1000), "count": 1}

    @pytest.mark.asyncio
    async def test_rejection_propagates(self, limiter):
        store = InMemoryKeyStore()
        request = SimpleNamespace(state=SimpleNamespace(api_key="K1"))
        record = ApiKeyRecord(enabled=True, plan="free")
        for _ in range(5):
            await enforce_rate_limit(request, record, store, limiter)
        with pytest.raises(TooManyRequests):
            await enforce_rate_limit(request, record, store, limiter)


class TestStoreFailures:

    @pytest.mark.asyncio
    async def test_read_failure_is_internal_error(self, limiter):
        with pytest.raises(InternalError, match="during rate limiting"):
            await limiter.hit(BrokenReadStore(), "K1", "free")

    @pytest.mark.asyncio
    async def test_write_failure_is_internal_error(self, limiter):
        with pytest.raises(InternalError) as exc_info:
            await limiter.hit(BrokenWriteStore(), "K1", "free")
        assert "read-only" not in exc_info.value.message
