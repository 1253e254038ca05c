"""Component modules and how they are loaded.

A component is the Python module next to a route's template.  The
template can call its functions and read its values by name::

    # src/routes/about/about.py
    title = "About us"
    team = {"lead": {"name": "Ada"}}

    def greet(name, ctx):
        return f"Hello, {name}!"

    async def latest(ctx):
        return await load_latest()

The evaluator never reaches into modules directly.  A loaded module is
wrapped in a :class:`ComponentModule`, an explicit name → :class:`Export`
lookup where each export is tagged as callable or plain value.
"""

from __future__ import annotations

import importlib.machinery
import importlib.util
import itertools
import logging
import sys
import threading
import types
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from tern.config import ReloadPolicy
from tern.errors import ComponentLoadError

logger = logging.getLogger("tern.pages")


class ExportKind(Enum):
    CALLABLE = "callable"
    VALUE = "value"


@dataclass(frozen=True, slots=True)
class Export:
    """One named export of a component: a callable or a plain value."""

    kind: ExportKind
    value: Any

    @property
    def is_callable(self) -> bool:
        return self.kind is ExportKind.CALLABLE

    @classmethod
    def of(cls, value: Any) -> Export:
        kind = ExportKind.CALLABLE if callable(value) else ExportKind.VALUE
        return cls(kind=kind, value=value)


class ComponentModule(Mapping[str, Export]):
    """Name → :class:`Export` lookup for one component."""

    __slots__ = ("_exports", "source")

    def __init__(self, exports: Mapping[str, Any], *, source: str = "<mapping>") -> None:
        self._exports: dict[str, Export] = {name: Export.of(value) for name, value in exports.items()}
        self.source = source

    @classmethod
    def from_module(cls, module: types.ModuleType) -> ComponentModule:
        """Collect the public names of an executed module.

        Honours ``__all__`` when present.  Otherwise every name not
        starting with ``_`` is exported, except imported modules.
        """
        namespace = vars(module)
        names = namespace.get("__all__")
        if names is None:
            names = [
                name
                for name, value in namespace.items()
                if not name.startswith("_") and not isinstance(value, types.ModuleType)
            ]
        exports = {name: namespace[name] for name in names if name in namespace}
        return cls(exports, source=getattr(module, "__file__", None) or module.__name__)

    def lookup(self, name: str) -> Export | None:
        return self._exports.get(name)

    def __getitem__(self, name: str) -> Export:
        return self._exports[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._exports)

    def __len__(self) -> int:
        return len(self._exports)

    def __repr__(self) -> str:
        return f"ComponentModule({self.source!r}, exports={sorted(self._exports)!r})"


# Suffix counter for cache-defeating module names
_load_counter = itertools.count()


class ComponentLoader:
    """Load component files under an explicit :class:`ReloadPolicy`.

    ``ALWAYS`` executes the file on every call under a fresh module
    name, so edits are picked up without restarting.  ``ONCE`` keeps the
    first successful load per resolved path.

    Thread safety:
        The ``ONCE`` cache is guarded by a lock; two threads racing on
        the first load of a path may both execute it, but only one result
        is kept.
    """

    __slots__ = ("_cache", "_lock", "policy")

    def __init__(self, policy: ReloadPolicy = ReloadPolicy.ONCE) -> None:
        self.policy = policy
        self._cache: dict[Path, ComponentModule] = {}
        self._lock = threading.Lock()

    def load(self, path: str | Path) -> ComponentModule:
        """Execute the module at *path* and wrap its exports.

        Raises:
            ComponentLoadError: The file is missing, is not a Python
                module, or raised while executing.
        """
        resolved = Path(path).resolve()
        if self.policy is ReloadPolicy.ONCE:
            with self._lock:
                cached = self._cache.get(resolved)
            if cached is not None:
                return cached

        component = ComponentModule.from_module(_exec_module(resolved))

        if self.policy is ReloadPolicy.ONCE:
            with self._lock:
                component = self._cache.setdefault(resolved, component)
        return component

    def forget(self, path: str | Path | None = None) -> None:
        """Drop cached modules (all of them when *path* is None)."""
        with self._lock:
            if path is None:
                self._cache.clear()
            else:
                self._cache.pop(Path(path).resolve(), None)


class _SourceLoader(importlib.machinery.SourceFileLoader):
    """Source file loader that never reads ``__pycache__``.

    Cached bytecode is keyed on mtime seconds and size, so an edit that
    keeps the size within the same second would run the old code.
    """

    def get_code(self, fullname: str) -> types.CodeType:
        return self.source_to_code(self.get_data(self.path), self.path)


def _exec_module(path: Path) -> types.ModuleType:
    if path.suffix != ".py":
        raise ComponentLoadError(str(path), f"unsupported component type {path.suffix!r}")
    if not path.is_file():
        raise ComponentLoadError(str(path), "file not found")

    module_name = f"_tern_component_{path.stem}_{next(_load_counter)}"
    spec = importlib.util.spec_from_file_location(
        module_name, path, loader=_SourceLoader(module_name, str(path))
    )
    if spec is None or spec.loader is None:
        raise ComponentLoadError(str(path), "no module loader")

    module = importlib.util.module_from_spec(spec)
    logger.debug("Loading component %s as %s", path, module_name)
    # Registered only while executing: dataclasses and typing look the
    # module up by name
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ComponentLoadError(str(path), f"{type(exc).__name__}: {exc}") from exc
    finally:
        sys.modules.pop(module_name, None)
    return module
