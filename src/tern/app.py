"""Tern application class.

Configured at construction, compiled on first use: the route table,
component loader, page renderer and response cache are built when the
ASGI server first calls the app (lifespan startup or first request).
"""

import logging
import threading
from datetime import UTC, datetime
from typing import Any

from tern._internal.asgi import Receive, Scope, Send
from tern.cache import ResponseCache
from tern.config import AppConfig
from tern.context import RenderContext
from tern.errors import ConfigurationError
from tern.http.request import Request
from tern.http.response import Response
from tern.pages.components import ComponentLoader
from tern.pages.inject import inject_client_script, inject_lazy_loading
from tern.pages.renderer import PageRenderer
from tern.routing.table import RouteTable
from tern.server.errors import handle_render_error
from tern.server.sender import send_response
from tern.templating.documents import not_found_page

logger = logging.getLogger("tern.server")

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class App:
    """The tern application: an ASGI 3.0 callable serving rendered pages.

    Usage::

        from tern import App, AppConfig

        app = App(AppConfig(base_dir="site", cache_max_age=60.0))

    Request flow for an HTTP ``GET /about``:

    1. The keep-alive path answers with a JSON heartbeat; a path with
       no page gets the 404 document with status 404, uncached.
    2. Cacheable requests (``GET``, no query string) are served from the
       response cache while the entry is fresh.
    3. Otherwise the page is rendered, post-processed (client bundle
       script, lazy images) and, when cacheable, stored.
    4. A render that raises becomes a 500 page.

    Thread safety:
        Compilation uses a Lock + double-check so exactly one thread
        builds the renderer.  The cache carries its own lock.
    """

    __slots__ = ("_cache", "_freeze_lock", "_frozen", "_renderer", "config")

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._renderer: PageRenderer | None = None
        self._cache: ResponseCache | None = None

    # -- Public accessors --

    @property
    def renderer(self) -> PageRenderer:
        self._ensure_frozen()
        assert self._renderer is not None
        return self._renderer

    @property
    def cache(self) -> ResponseCache | None:
        """The response cache, or ``None`` when caching is disabled."""
        self._ensure_frozen()
        return self._cache

    async def render(self, path: str, context: RenderContext | None = None) -> str:
        """Render *path* and apply the HTML post-processing steps."""
        html = await self.renderer.render(path, context)
        if self.config.client_scripts:
            html = inject_client_script(html, path, self.config.client_path)
        if self.config.lazy_images:
            html = inject_lazy_loading(html)
        return html

    async def warm_cache(self) -> int:
        """Pre-render every known page into the cache.

        Returns:
            Number of pages cached (0 when caching is disabled).
        """
        cache = self.cache
        if cache is None:
            return 0
        logger.info("Warming up the cache...")
        stored = await cache.warm(self.renderer.url_paths(), self.render)
        logger.info("Cache warmed up: %d page(s)", stored)
        return stored

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            logger.debug("Ignoring unsupported ASGI scope %r", scope["type"])
            return

        self._ensure_frozen()
        request = Request.from_asgi(scope)
        response = await self.handle(request)
        await send_response(response, send, method=request.method)

    async def handle(self, request: Request) -> Response:
        """Produce the response for one request."""
        self._ensure_frozen()
        if request.path.rstrip("/") == self.config.keepalive_path.rstrip("/"):
            return self._keepalive()

        if not self.renderer.has_page(request.path):
            logger.debug("404 %s %s", request.method, request.path)
            return Response(body=not_found_page(), status=404)

        cache = self._cache if request.is_cacheable else None
        if cache is not None:
            entry = cache.get(request.path)
            if entry is not None:
                return Response(body=entry.content)

        try:
            html = await self.render(request.path, RenderContext.from_request(request))
        except Exception as exc:
            return handle_render_error(exc, request, debug=self.config.debug)

        if cache is not None:
            cache.set(request.path, html)
        return Response(body=html)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Startup compiles the app and, when enabled, warms the cache.
        Shutdown drops every cached page.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    if self.config.cache_warm:
                        await self.warm_cache()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                if self._cache is not None:
                    self._cache.clear()
                await send({"type": "lifespan.shutdown.complete"})
                return

    def _keepalive(self) -> Response:
        from tern import __version__

        payload: dict[str, Any] = {
            "status": "alive",
            "timestamp": datetime.now(UTC).isoformat(),
            "framework": "tern",
            "version": __version__,
        }
        return Response.json(payload).with_headers(_NO_CACHE_HEADERS)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe compile with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        config = self.config
        if config.cache_max_age < 0:
            msg = f"cache_max_age must be >= 0, got {config.cache_max_age!r}"
            raise ConfigurationError(msg)
        if not config.keepalive_path.startswith("/"):
            msg = f"keepalive_path must start with '/', got {config.keepalive_path!r}"
            raise ConfigurationError(msg)

        routes = RouteTable.discover(config.routes_path, base_dir=config.base_path)
        logger.debug("Discovered %d route(s) under %s", len(routes), config.routes_path)
        self._renderer = PageRenderer(
            config,
            routes=routes,
            loader=ComponentLoader(config.resolved_reload_policy),
        )
        if config.cache_enabled:
            self._cache = ResponseCache(max_age=config.cache_max_age)
        self._frozen = True
