"""Request headers as templates see them.

Names are folded to lower case once, when the request arrives, so
``headers.User-Agent`` and ``headers.user-agent`` in a template reach
the same value.
"""

from collections.abc import Iterator, Mapping


def _fold(raw: tuple[tuple[bytes, bytes], ...]) -> dict[str, list[str]]:
    folded: dict[str, list[str]] = {}
    for name, value in raw:
        folded.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
    return folded


class Headers(Mapping[str, str]):
    """Case-insensitive, read-only view of the ASGI header pairs.

    Indexing returns the first value sent for a name; :meth:`as_dict`
    joins repeats with ``", "`` the way a proxy would fold them.
    """

    __slots__ = ("_folded", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw
        self._folded = _fold(raw)

    def __getitem__(self, name: str) -> str:
        return self._folded[name.lower()][0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._folded

    def __iter__(self) -> Iterator[str]:
        return iter(self._folded)

    def __len__(self) -> int:
        return len(self._folded)

    def __repr__(self) -> str:
        return f"Headers({self.as_dict()!r})"

    def as_dict(self) -> dict[str, str]:
        return {name: ", ".join(values) for name, values in self._folded.items()}

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw
