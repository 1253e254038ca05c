"""``tern render``: render one page to stdout.

Useful for checking a template without starting a server.  The page
goes through the same renderer the app uses, without the response
cache.
"""

import argparse
import asyncio
import sys

from tern.app import App
from tern.config import AppConfig
from tern.context import RenderContext
from tern.errors import TernError


def _parse_query(pairs: list[str]) -> dict[str, str]:
    query: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            print(f"Error: --query expects KEY=VALUE, got {pair!r}", file=sys.stderr)
            raise SystemExit(2)
        query[key] = value
    return query


def run_render(args: argparse.Namespace) -> None:
    """Render ``args.path`` and write the HTML to stdout.

    Exits with status 1 when the page fails to render.
    """
    app = App(AppConfig(base_dir=args.base_dir, cache_enabled=False))
    context = RenderContext(query=_parse_query(args.query), params={}, headers={})
    try:
        html = asyncio.run(app.render(args.path, context))
    except TernError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    sys.stdout.write(html)
