"""``tern run``: serve an App with the pounce development server."""

import argparse
import logging
import sys

from tern.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Serve ``args.app``; ``--host``/``--port`` win over the app's config."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if getattr(args, "log_level", None) is None:
        logging.getLogger("tern").setLevel(app.config.log_level.upper())

    from tern.server.dev import run_dev_server

    run_dev_server(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        reload=app.config.debug,
        app_path=args.app,
    )
