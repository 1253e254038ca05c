"""Test utilities for tern applications.

    from tern.testing import TestClient, assert_page_contains
"""

from tern.testing.assertions import assert_not_found, assert_page_contains, assert_server_error
from tern.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_not_found",
    "assert_page_contains",
    "assert_server_error",
]
