"""Query string parameters.

A repeated key reads as its last value in ``query.*``, the way a later
field overrides an earlier one in a form submission.  Every value stays
available through :meth:`QueryParams.get_list`.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Parsed, read-only query string.

    An empty query string and a bare ``?`` both count as empty, which is
    what decides whether a request may be answered from the cache.
    """

    __slots__ = ("_raw", "_values")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._values: dict[str, list[str]] = parse_qs(
            query_string.decode("latin-1"),
            keep_blank_values=True,
        )

    def __getitem__(self, key: str) -> str:
        return self._values[key][-1]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw.decode('latin-1')!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in order."""
        return list(self._values.get(key, ()))

    @property
    def raw(self) -> bytes:
        return self._raw

    @property
    def is_empty(self) -> bool:
        return not self._raw
