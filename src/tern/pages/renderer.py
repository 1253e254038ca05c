"""Page rendering: request path → component + template → HTML.

Resolution order for a path:

1. ``/`` (or ``""``) renders the app component at ``<app_dir>/app.py``
   with ``app.html``; the route table is not consulted.
2. Anything else is looked up in the :class:`~tern.routing.RouteTable`.
   No match renders the 404 document.
3. The template is the component path with an ``.html`` suffix.  A
   missing template raises :class:`~tern.errors.TemplateNotFoundError`.
4. A ``.css`` file at the same base path is linked into ``<head>``.
5. The component is loaded and the template rendered against it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tern.config import AppConfig
from tern.context import RenderContext
from tern.errors import TemplateNotFoundError
from tern.pages.components import ComponentLoader
from tern.pages.inject import inject_stylesheet
from tern.routing.table import RouteTable
from tern.templating.documents import not_found_page
from tern.templating.renderer import render_template

logger = logging.getLogger("tern.pages")

APP_COMPONENT = "app.py"


class PageRenderer:
    """Render pages for one project directory.

    Usage::

        renderer = PageRenderer(AppConfig(base_dir="site"))
        html = await renderer.render("/about", RenderContext.empty())

    Args:
        config: Project layout and reload policy.
        routes: Pre-built route table.  Discovered from
            ``config.routes_path`` when omitted.
        loader: Component loader.  Built from
            ``config.resolved_reload_policy`` when omitted.
    """

    __slots__ = ("config", "loader", "routes")

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        routes: RouteTable | None = None,
        loader: ComponentLoader | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.routes = (
            routes
            if routes is not None
            else RouteTable.discover(self.config.routes_path, base_dir=self.config.base_path)
        )
        self.loader = loader or ComponentLoader(self.config.resolved_reload_policy)

    async def render(self, path: str, context: RenderContext | None = None) -> str:
        """Render the page at *path*.

        Returns:
            The final HTML, or the 404 document when no route matches.

        Raises:
            TemplateNotFoundError: The route has no ``.html`` template.
            ComponentLoadError: The route's component failed to load.
        """
        context = context or RenderContext.empty()

        if path in ("/", ""):
            component_path = self.config.app_path / APP_COMPONENT
            route_name = Path(self.config.app_dir, APP_COMPONENT).as_posix()
        else:
            entry = self.routes.find(path)
            if entry is None:
                logger.debug("No route for %s", path)
                return not_found_page()
            component_path = self.config.base_path / entry.component_path
            route_name = entry.component_path

        template_path = component_path.with_suffix(".html")
        if not template_path.is_file():
            raise TemplateNotFoundError(route_name, str(template_path))

        html = template_path.read_text(encoding="utf-8")
        stylesheet = component_path.with_suffix(".css")
        if stylesheet.is_file():
            html = inject_stylesheet(html, self._public_url(stylesheet))

        component = self.loader.load(component_path)
        return await render_template(html, component, context)

    def has_page(self, path: str) -> bool:
        """Whether *path* maps to a page rather than the 404 document."""
        return path in ("/", "") or self.routes.find(path) is not None

    def url_paths(self) -> list[str]:
        """Every renderable path: the root plus one per discovered route."""
        return ["/", *(f"/{url_path}" for url_path in self.routes.url_paths())]

    def _public_url(self, file: Path) -> str:
        """URL a browser uses for a file under the source directory."""
        try:
            relative = file.resolve().relative_to(self.config.source_path.resolve())
        except ValueError:
            relative = Path(file.name)
        return "/" + relative.as_posix()
