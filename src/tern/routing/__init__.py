"""Route discovery: URL paths mapped to component modules on disk."""

from tern.routing.table import CLIENT_MARKER, RouteEntry, RouteTable, is_component_file

__all__ = [
    "CLIENT_MARKER",
    "RouteEntry",
    "RouteTable",
    "is_component_file",
]
