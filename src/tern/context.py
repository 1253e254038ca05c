"""Per-request render context.

The context is the only request data a template or component function
sees.  It is built fresh for every request, never mutated while a page
renders, and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tern.http.request import Request


def _frozen(data: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Query, path params and headers available to templates.

    Templates reach these through the ``query.``, ``params.`` and
    ``headers.`` namespaces.  Component functions receive the whole
    object as their last positional argument::

        def greeting(name, ctx):
            lang = ctx.headers.get("accept-language", "en")
            ...

    Attributes:
        query: First value per query string key.
        params: Captured path segments.  Always empty today, reserved
            for dynamic route segments.
        headers: Lower-cased header names mapped to values.
    """

    query: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    params: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    headers: Mapping[str, str] = field(default_factory=lambda: _frozen(None))

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", _frozen(self.query))
        object.__setattr__(self, "params", _frozen(self.params))
        object.__setattr__(
            self,
            "headers",
            _frozen({name.lower(): value for name, value in self.headers.items()}),
        )

    @classmethod
    def empty(cls) -> RenderContext:
        """A context with no query, params or headers (used for pre-warming)."""
        return cls()

    @classmethod
    def from_request(cls, request: Request) -> RenderContext:
        """Build the context for an incoming HTTP request."""
        return cls(
            query={key: request.query[key] for key in request.query},
            params={},
            headers=request.headers.as_dict(),
        )
