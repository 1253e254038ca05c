"""Locating the App behind a ``module:attribute`` string."""

import importlib

from tern.app import App


def resolve_app(import_string: str) -> App:
    """Import *import_string* and return the tern App it names.

    ``"site"`` means ``"site:app"``.  When the attribute is a zero-arg
    factory rather than an App, it is called.

    Raises:
        ModuleNotFoundError: The module does not import.
        AttributeError: The module has no such attribute.
        TypeError: The target is neither an App nor a factory returning one.
    """
    module_name, _, attr = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attr or "app")

    if not isinstance(target, App) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, App):
        msg = f"{import_string!r} is a {type(target).__name__}, not a tern.App instance"
        raise TypeError(msg)
    return target
