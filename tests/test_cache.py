"""Tests for tern.cache: TTL response cache and pre-warming."""

import pytest

from tern.cache import CacheEntry, ResponseCache
from tern.context import RenderContext


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestGetSet:
    def test_miss(self, clock: FakeClock) -> None:
        assert ResponseCache(clock=clock).get("/about") is None

    def test_hit(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_age=300.0, clock=clock)
        cache.set("/about", "<p>about</p>")

        assert cache.get("/about") == CacheEntry(content="<p>about</p>", created_at=1000.0)

    def test_fresh_at_exact_max_age(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_age=300.0, clock=clock)
        cache.set("/about", "x")
        clock.now += 300.0

        assert cache.get("/about") is not None

    def test_stale_entry_evicted(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_age=300.0, clock=clock)
        cache.set("/about", "x")
        clock.now += 300.5

        assert cache.get("/about") is None
        assert len(cache) == 0
        # Eviction is idempotent
        assert cache.get("/about") is None

    def test_set_replaces_and_restamps(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_age=10.0, clock=clock)
        cache.set("/a", "old")
        clock.now += 8
        cache.set("/a", "new")
        clock.now += 8

        entry = cache.get("/a")
        assert entry is not None
        assert entry.content == "new"

    def test_zero_max_age(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_age=0.0, clock=clock)
        cache.set("/a", "x")
        assert cache.get("/a") is not None
        clock.now += 0.001
        assert cache.get("/a") is None

    def test_invalidate_and_clear(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        cache.set("/a", "x")
        cache.set("/b", "y")

        assert cache.invalidate("/a") is True
        assert cache.invalidate("/a") is False
        cache.clear()
        assert len(cache) == 0

    def test_repr(self) -> None:
        assert repr(ResponseCache(max_age=5.0)) == "ResponseCache(max_age=5.0, entries=0)"


class TestWarm:
    @pytest.mark.asyncio
    async def test_warm_renders_every_path(self, clock: FakeClock) -> None:
        seen: list[tuple[str, RenderContext]] = []

        async def render(path: str, context: RenderContext) -> str:
            seen.append((path, context))
            return f"<p>{path}</p>"

        cache = ResponseCache(clock=clock)
        stored = await cache.warm(["/", "/about"], render)

        assert stored == 2
        assert cache.get("/about").content == "<p>/about</p>"
        assert [path for path, _ in seen] == ["/", "/about"]
        assert all(not ctx.query and not ctx.headers for _, ctx in seen)

    @pytest.mark.asyncio
    async def test_warm_skips_failures(self, clock: FakeClock, caplog: pytest.LogCaptureFixture) -> None:
        async def render(path: str, context: RenderContext) -> str:
            if path == "/bad":
                raise RuntimeError("needs a query")
            return "ok"

        cache = ResponseCache(clock=clock)
        with caplog.at_level("WARNING", logger="tern.cache"):
            stored = await cache.warm(["/bad", "/good"], render)

        assert stored == 1
        assert cache.get("/bad") is None
        assert cache.get("/good") is not None
        assert "Skipped pre-rendering /bad" in caplog.text
