"""Textual HTML injections applied around page rendering.

All of these are plain string edits on the first matching marker.  A
document without the marker is returned unchanged.
"""

import re
from pathlib import Path

_IMG_WITHOUT_LOADING_RE = re.compile(r"<img(?![^>]*loading=)", re.IGNORECASE)


def inject_stylesheet(html: str, href: str) -> str:
    """Link a stylesheet immediately before the first ``</head>``."""
    return html.replace("</head>", f'<link rel="stylesheet" href="{href}">\n</head>', 1)


def inject_script(html: str, src: str) -> str:
    """Load a script immediately before the first ``</body>``."""
    return html.replace("</body>", f'<script src="{src}"></script>\n</body>', 1)


def inject_lazy_loading(html: str) -> str:
    """Add ``loading="lazy"`` to every ``<img>`` that does not set ``loading``."""
    return _IMG_WITHOUT_LOADING_RE.sub('<img loading="lazy"', html)


def client_script_url(path: str, client_dir: str | Path) -> str | None:
    """Public URL of the compiled client bundle for *path*, if one exists.

    The bundler writes ``<client_dir>/app/app.client.js`` for the root
    page and ``<client_dir>/routes/<route>/<name>.client.js`` for every
    other route, where ``<name>`` is the route's last segment.
    """
    client_root = Path(client_dir)
    parts = [part for part in path.split("/") if part]
    if not parts or parts == ["app"]:
        if (client_root / "app" / "app.client.js").is_file():
            return "/client/app/app.client.js"
        return None

    name = parts[-1]
    bundle = client_root.joinpath("routes", *parts, f"{name}.client.js")
    if bundle.is_file():
        return f"/client/routes/{'/'.join(parts)}/{name}.client.js"
    return None


def inject_client_script(html: str, path: str, client_dir: str | Path) -> str:
    """Append the route's client bundle, when it has one."""
    src = client_script_url(path, client_dir)
    if src is None:
        return html
    return inject_script(html, src)
