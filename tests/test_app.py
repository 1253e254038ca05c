"""Tests for tern.app: ASGI lifecycle, caching and post-processing."""

import json
from pathlib import Path
from typing import Any

import pytest

from tern.app import App
from tern.cache import CacheEntry
from tern.config import AppConfig
from tern.errors import ConfigurationError
from tern.testing import TestClient, assert_not_found, assert_page_contains, assert_server_error


def _app(base_dir: Path, **overrides: Any) -> App:
    return App(AppConfig(base_dir=base_dir, **overrides))


def _edit_about(site: Path, body: str) -> None:
    (site / "src/routes/about/about.html").write_text(body, encoding="utf-8")


class TestPages:
    @pytest.mark.asyncio
    async def test_route_page(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site)) as client:
            response = await client.get("/about")

        assert_page_contains(response, "<p>Hello, World!</p>")
        assert response.content_type == "text/html; charset=utf-8"

    @pytest.mark.asyncio
    async def test_root_page(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site)) as client:
            response = await client.get("/")

        assert_page_contains(response, "<h1>Home</h1>")

    @pytest.mark.asyncio
    async def test_query_and_headers_reach_template(self, make_site) -> None:
        site = make_site(
            {
                "src/routes/echo/echo.py": "",
                "src/routes/echo/echo.html": "{{ query.q || 'none' }}|{{ headers.x-who || 'anon' }}",
            }
        )
        async with TestClient(_app(site)) as client:
            response = await client.get("/echo?q=tern", headers={"X-Who": "ada"})

        assert response.text == "tern|ada"

    @pytest.mark.asyncio
    async def test_repeated_query_key_renders_last_value(self, make_site) -> None:
        site = make_site(
            {
                "src/routes/echo/echo.py": "",
                "src/routes/echo/echo.html": "{{ query.q }}",
            }
        )
        async with TestClient(_app(site)) as client:
            response = await client.get("/echo?q=a&q=b")

        assert response.text == "b"

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, basic_site: Path) -> None:
        app = _app(basic_site)
        async with TestClient(app) as client:
            response = await client.get("/missing")

            assert response.status == 404
            assert_not_found(response)
            assert app.cache.get("/missing") is None

    @pytest.mark.asyncio
    async def test_head_has_no_body(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site)) as client:
            response = await client.head("/about")

        assert response.status == 200
        assert response.body == b""


class TestServerErrors:
    @pytest.mark.asyncio
    async def test_missing_template_is_500(self, make_site) -> None:
        site = make_site({"src/routes/bare/bare.py": "x = 1\n"})
        async with TestClient(_app(site)) as client:
            response = await client.get("/bare")

        assert_server_error(response)
        assert "<pre>" not in response.text

    @pytest.mark.asyncio
    async def test_debug_shows_detail(self, make_site) -> None:
        site = make_site({"src/routes/bare/bare.py": "x = 1\n"})
        async with TestClient(_app(site, debug=True)) as client:
            response = await client.get("/bare")

        assert_server_error(response)
        assert "TemplateNotFoundError" in response.text

    @pytest.mark.asyncio
    async def test_error_detail_is_escaped(self, make_site) -> None:
        site = make_site(
            {
                "src/routes/bad/bad.py": "raise ValueError('<script>x</script>')\n",
                "src/routes/bad/bad.html": "never",
            }
        )
        async with TestClient(_app(site, debug=True)) as client:
            response = await client.get("/bad")

        assert response.status == 500
        assert "<script>x</script>" not in response.text
        assert "&lt;script&gt;" in response.text


class TestCaching:
    @pytest.mark.asyncio
    async def test_cached_page_served_until_stale(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site)) as client:
            first = await client.get("/about")
            _edit_about(basic_site, "<p>edited</p>")
            second = await client.get("/about")

        assert "Hello, World!" in first.text
        assert second.text == first.text

    @pytest.mark.asyncio
    async def test_query_bypasses_cache(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site)) as client:
            await client.get("/about")
            _edit_about(basic_site, "<p>{{ query.q }}</p>")
            response = await client.get("/about?q=fresh")

        assert response.text == "<p>fresh</p>"

    @pytest.mark.asyncio
    async def test_query_renders_are_not_stored(self, basic_site: Path) -> None:
        app = _app(basic_site, cache_warm=False)
        async with TestClient(app) as client:
            await client.get("/about?q=x")

            assert app.cache.get("/about") is None

    @pytest.mark.asyncio
    async def test_cache_disabled_always_renders(self, basic_site: Path) -> None:
        app = _app(basic_site, cache_enabled=False)
        async with TestClient(app) as client:
            await client.get("/about")
            _edit_about(basic_site, "<p>edited</p>")
            response = await client.get("/about")

        assert app.cache is None
        assert response.text == "<p>edited</p>"

    @pytest.mark.asyncio
    async def test_stale_entry_rerendered(self, basic_site: Path) -> None:
        app = _app(basic_site)
        async with TestClient(app) as client:
            app.cache._entries["/about"] = CacheEntry(content="stale", created_at=-1e9)
            _edit_about(basic_site, "<p>edited</p>")
            response = await client.get("/about")

        assert response.text == "<p>edited</p>"

    @pytest.mark.asyncio
    async def test_failed_render_not_cached(self, make_site) -> None:
        site = make_site({"src/routes/bare/bare.py": "x = 1\n"})
        app = _app(site)
        async with TestClient(app) as client:
            await client.get("/bare")

            assert app.cache.get("/bare") is None


class TestWarmup:
    @pytest.mark.asyncio
    async def test_startup_warms_every_page(self, basic_site: Path) -> None:
        app = _app(basic_site)
        async with TestClient(app):
            assert app.cache.get("/") is not None
            assert app.cache.get("/about") is not None

    @pytest.mark.asyncio
    async def test_warm_disabled(self, basic_site: Path) -> None:
        app = _app(basic_site, cache_warm=False)
        async with TestClient(app):
            assert len(app.cache) == 0

    @pytest.mark.asyncio
    async def test_warm_skips_broken_pages(self, make_site) -> None:
        site = make_site(
            {
                "src/routes/ok/ok.py": "",
                "src/routes/ok/ok.html": "ok",
                "src/routes/bare/bare.py": "",
            }
        )
        app = _app(site)
        async with TestClient(app):
            assert app.cache.get("/ok") is not None
            assert app.cache.get("/bare") is None

    @pytest.mark.asyncio
    async def test_shutdown_clears_cache(self, basic_site: Path) -> None:
        app = _app(basic_site)
        async with TestClient(app):
            pass

        assert len(app.cache) == 0


class TestPostProcessing:
    @pytest.mark.asyncio
    async def test_lazy_images(self, make_site) -> None:
        site = make_site(
            {
                "src/routes/gallery/gallery.py": "",
                "src/routes/gallery/gallery.html": '<img src="a.png"><img loading="eager" src="b.png">',
            }
        )
        async with TestClient(_app(site)) as client:
            response = await client.get("/gallery")

        assert response.text == '<img loading="lazy" src="a.png"><img loading="eager" src="b.png">'

    @pytest.mark.asyncio
    async def test_lazy_images_disabled(self, make_site) -> None:
        site = make_site(
            {
                "src/routes/gallery/gallery.py": "",
                "src/routes/gallery/gallery.html": '<img src="a.png">',
            }
        )
        async with TestClient(_app(site, lazy_images=False)) as client:
            response = await client.get("/gallery")

        assert response.text == '<img src="a.png">'

    @pytest.mark.asyncio
    async def test_client_bundle_script(self, basic_site: Path) -> None:
        bundle = basic_site / "dist/client/routes/about/about.client.js"
        bundle.parent.mkdir(parents=True)
        bundle.write_text("", encoding="utf-8")

        async with TestClient(_app(basic_site)) as client:
            response = await client.get("/about")

        assert '<script src="/client/routes/about/about.client.js"></script>\n</body>' in response.text

    @pytest.mark.asyncio
    async def test_no_script_without_bundle(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site)) as client:
            response = await client.get("/about")

        assert "<script" not in response.text


class TestKeepalive:
    @pytest.mark.asyncio
    async def test_heartbeat(self, basic_site: Path) -> None:
        from tern import __version__

        async with TestClient(_app(basic_site)) as client:
            response = await client.get("/__tern_keepalive")

        assert response.status == 200
        assert response.content_type == "application/json"
        assert response.header("cache-control") == "no-cache, no-store, must-revalidate"
        payload = json.loads(response.text)
        assert payload["status"] == "alive"
        assert payload["framework"] == "tern"
        assert payload["version"] == __version__
        assert "T" in payload["timestamp"]

    @pytest.mark.asyncio
    async def test_custom_path(self, basic_site: Path) -> None:
        async with TestClient(_app(basic_site, keepalive_path="/ping")) as client:
            response = await client.get("/ping")

        assert json.loads(response.text)["status"] == "alive"


class TestASGI:
    @pytest.mark.asyncio
    async def test_lifespan_protocol(self, basic_site: Path) -> None:
        app = _app(basic_site)
        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return next(messages)

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)

        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    @pytest.mark.asyncio
    async def test_lifespan_startup_failure(self, basic_site: Path) -> None:
        app = _app(basic_site, cache_max_age=-1.0)
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "lifespan.startup"}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)

        assert sent[0]["type"] == "lifespan.startup.failed"
        assert "cache_max_age" in sent[0]["message"]

    @pytest.mark.asyncio
    async def test_invalid_keepalive_path(self, basic_site: Path) -> None:
        with pytest.raises(ConfigurationError, match="keepalive_path"):
            _app(basic_site, keepalive_path="ping").renderer
