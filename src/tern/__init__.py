"""Tern: server-side rendered pages from co-located Python and HTML.

Each route is a directory holding a component module and a template.
Templates embed ``{{ ... }}`` expressions that read the component's
values, call its functions and look at the request::

    # src/routes/hello/hello.py
    def greet(name, ctx):
        return f"Hello, {name}!"

    <!-- src/routes/hello/hello.html -->
    <h1>{{ greet('World') }}</h1>
    <p>Searching for {{ query.q || 'everything' }}</p>

Serve the project as an ASGI app::

    from tern import App, AppConfig

    app = App(AppConfig(base_dir="."))
"""

__version__ = "0.1.0"
__all__ = [
    "UNDEFINED",
    "App",
    "AppConfig",
    "CacheEntry",
    "ComponentLoadError",
    "ComponentModule",
    "ConfigurationError",
    "ExpressionError",
    "PageRenderer",
    "ReloadPolicy",
    "RenderContext",
    "RenderError",
    "ResponseCache",
    "RouteEntry",
    "RouteTable",
    "TemplateNotFoundError",
    "TernError",
    "render_template",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tern`` fast while providing a clean top-level API.
    """
    if name == "App":
        from tern.app import App

        return App

    if name in ("AppConfig", "ReloadPolicy"):
        from tern import config as _config

        return getattr(_config, name)

    if name == "RenderContext":
        from tern.context import RenderContext

        return RenderContext

    if name in ("CacheEntry", "ResponseCache"):
        from tern import cache as _cache

        return getattr(_cache, name)

    if name in ("RouteEntry", "RouteTable"):
        from tern.routing import table as _table

        return getattr(_table, name)

    if name in ("ComponentModule", "PageRenderer"):
        from tern import pages as _pages

        return getattr(_pages, name)

    if name in ("UNDEFINED", "render_template"):
        from tern import templating as _templating

        return getattr(_templating, name)

    if name in (
        "ComponentLoadError",
        "ConfigurationError",
        "ExpressionError",
        "RenderError",
        "TemplateNotFoundError",
        "TernError",
    ):
        from tern import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
