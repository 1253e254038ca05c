"""Tern CLI: route listing, one-off rendering and the dev server.

Entry point registered as ``tern`` in ``pyproject.toml``::

    [project.scripts]
    tern = "tern.cli:main"
"""

import argparse
import logging
import sys

from tern.config import AppConfig


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``tern`` command."""
    parser = argparse.ArgumentParser(
        prog="tern",
        description="Tern: server-side rendered pages from co-located Python and HTML.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity (default: the app config's log_level)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- tern routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List discovered routes")
    routes_parser.add_argument(
        "--base-dir",
        default=".",
        help="Project root holding src/routes and src/app (default: .)",
    )

    # -- tern render ------------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Render one page to stdout")
    render_parser.add_argument("path", help="Request path (e.g. /about)")
    render_parser.add_argument(
        "--base-dir",
        default=".",
        help="Project root holding src/routes and src/app (default: .)",
    )
    render_parser.add_argument(
        "--query",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter visible as query.KEY (repeatable)",
    )

    # -- tern run ---------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the dev server")
    run_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=(args.log_level or AppConfig().log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "routes":
        from tern.cli._routes import run_routes

        run_routes(args)
    elif args.command == "render":
        from tern.cli._render import run_render

        run_render(args)
    elif args.command == "run":
        from tern.cli._run import run_server

        run_server(args)
