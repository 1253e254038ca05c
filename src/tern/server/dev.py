"""Development server: pounce serving a live tern App."""

import logging

logger = logging.getLogger("tern.server")

# Template and stylesheet edits restart the server alongside .py edits
_WATCHED_SUFFIXES = (".html", ".css")


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Block serving *app* on ``host:port`` with one pounce worker.

    ``pounce.run()`` wants an import string; tern already holds the App,
    so ``pounce.Server`` is driven directly.  *app_path* lets pounce
    re-import the App after a reload.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=_WATCHED_SUFFIXES,
    )
    logger.info("tern dev server on http://%s:%d (reload=%s)", host, port, reload)
    Server(config, app, app_path=app_path).run()
