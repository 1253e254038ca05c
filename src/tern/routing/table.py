"""Filesystem route discovery for the routes/ directory.

Every directory below the routes root that holds a component module is
a route.  The directory's path relative to the root is the URL path::

    src/routes/
      about/
        about.py          # /about
        about.html
        about.css         # optional, linked into <head>
      blog/
        post/
          post.py         # /blog/post
          post.html
          post.client.py  # client-only companion, never a route

Directories without a component are still walked, so nesting can be
arbitrarily deep.  Discovery is best-effort: a directory that cannot be
listed is logged and skipped.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("tern.routing")

# Stem suffix marking client-only companion files (``counter.client.py``)
CLIENT_MARKER = ".client"

COMPONENT_SUFFIX = ".py"

_SKIP_DIRS = frozenset({"__pycache__"})


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """One discovered route.

    Attributes:
        url_path: Slash-separated path without a leading slash
            (``"about"``, ``"blog/post"``).
        component_path: Component module path relative to the project
            base directory, in POSIX form.
    """

    url_path: str
    component_path: str


def is_component_file(name: str) -> bool:
    """Whether a file name qualifies as a route component module."""
    if not name.endswith(COMPONENT_SUFFIX) or name.startswith("_"):
        return False
    stem = name[: -len(COMPONENT_SUFFIX)]
    return bool(stem) and not stem.endswith(CLIENT_MARKER)


class RouteTable:
    """Immutable ``url_path`` → :class:`RouteEntry` mapping.

    Build one with :meth:`discover`; file watching and live reload are
    the caller's business and simply discover a new table.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: tuple[RouteEntry, ...] = ()) -> None:
        table: dict[str, RouteEntry] = {}
        for entry in entries:
            # First discovery wins
            table.setdefault(entry.url_path, entry)
        self._entries = table

    @classmethod
    def discover(
        cls,
        routes_dir: str | Path,
        *,
        base_dir: str | Path | None = None,
    ) -> RouteTable:
        """Walk *routes_dir* and build a table of every route found.

        Args:
            routes_dir: Root of the routes tree.
            base_dir: Directory that ``component_path`` values are made
                relative to.  Defaults to the current working directory.

        Returns:
            The discovered table.  Empty when *routes_dir* is missing.
        """
        root = Path(routes_dir).resolve()
        base = Path(base_dir).resolve() if base_dir is not None else Path.cwd().resolve()
        if not root.is_dir():
            logger.warning("Routes directory not found: %s", root)
            return cls()

        entries: list[RouteEntry] = []
        _scan_directory(root, root, base, entries)
        return cls(tuple(entries))

    # -- Lookup --

    def get(self, url_path: str) -> RouteEntry | None:
        """Exact lookup by normalized URL path."""
        return self._entries.get(url_path)

    def find(self, path: str) -> RouteEntry | None:
        """Resolve a request path to a route.

        Strips one leading slash, then matches exactly.  ``index`` falls
        back to a ``home`` route when no ``index`` route exists.  The root
        path is not resolved here; the page renderer owns it.
        """
        normalized = path[1:] if path.startswith("/") else path
        entry = self._entries.get(normalized)
        if entry is not None:
            return entry
        if normalized == "index":
            return self._entries.get("home")
        return None

    def url_paths(self) -> list[str]:
        """Discovered URL paths, in discovery order."""
        return list(self._entries)

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        return tuple(self._entries.values())

    def __contains__(self, url_path: object) -> bool:
        return url_path in self._entries

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RouteTable({self.url_paths()!r})"


def _scan_directory(
    directory: Path,
    root: Path,
    base: Path,
    entries: list[RouteEntry],
) -> None:
    """Record each qualifying subdirectory of *directory*, then recurse.

    The root itself never becomes a route; only its descendants do.
    """
    try:
        children = sorted(directory.iterdir())
    except OSError:
        logger.exception("Error scanning routes directory %s", directory)
        return

    for child in children:
        if not child.is_dir() or child.name.startswith(".") or child.name in _SKIP_DIRS:
            continue

        component = _first_component(child)
        if component is not None:
            entries.append(
                RouteEntry(
                    url_path=child.relative_to(root).as_posix(),
                    component_path=Path(os.path.relpath(component, base)).as_posix(),
                )
            )

        _scan_directory(child, root, base, entries)


def _first_component(directory: Path) -> Path | None:
    """First qualifying component file in *directory*, by sorted name."""
    try:
        names = sorted(entry.name for entry in os.scandir(directory) if entry.is_file())
    except OSError:
        logger.exception("Error scanning route directory %s", directory)
        return None

    for name in names:
        if is_component_file(name):
            return directory / name
    return None
