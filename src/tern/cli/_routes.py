"""``tern routes``: list the pages a project serves.

Discovers the route table under ``--base-dir`` and prints every
renderable path with the component that backs it.
"""

import argparse
from pathlib import Path

from tern.config import AppConfig
from tern.pages.renderer import APP_COMPONENT
from tern.routing.table import RouteTable


def run_routes(args: argparse.Namespace) -> None:
    """Print a PATH / COMPONENT table, root first."""
    config = AppConfig(base_dir=args.base_dir)
    table = RouteTable.discover(config.routes_path, base_dir=config.base_path)

    rows: list[tuple[str, str]] = [("/", Path(config.app_dir, APP_COMPONENT).as_posix())]
    rows.extend((f"/{entry.url_path}", entry.component_path) for entry in table)

    max_path = max(max(len(r[0]) for r in rows), 4)  # "PATH" header
    fmt = f"{{:<{max_path}}}  {{}}"
    print(fmt.format("PATH", "COMPONENT"))
    sep_len = max_path + 2 + max(len(r[1]) for r in rows)
    print("-" * min(sep_len, 80))
    for path, component in rows:
        print(fmt.format(path, component))
