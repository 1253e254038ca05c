"""Incoming requests.

tern pages are read-only views, so only request metadata is kept: the
body is never read.  The two things rendering needs from a request are
its :class:`~tern.context.RenderContext` and whether the response may
come from the cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tern.http.headers import Headers
from tern.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """Method, path, headers and query of one HTTP request."""

    method: str
    path: str
    headers: Headers
    query: QueryParams

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Build from an ASGI ``http`` scope."""
        return cls(
            scope["method"].upper(),
            scope["path"],
            Headers(tuple(scope.get("headers") or ())),
            QueryParams(scope.get("query_string") or b""),
        )

    @property
    def is_cacheable(self) -> bool:
        """Plain ``GET`` with no query string at all."""
        return self.method == "GET" and self.query.is_empty
