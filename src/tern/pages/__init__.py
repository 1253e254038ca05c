"""Page rendering from co-located component, template and stylesheet files.

Each route directory pairs a Python component with an HTML template::

    src/
      app/
        app.py           # GET /
        app.html
        app.css          # optional
      routes/
        about/
          about.py       # GET /about
          about.html
"""

from tern.pages.components import ComponentLoader, ComponentModule, Export, ExportKind
from tern.pages.renderer import PageRenderer

__all__ = [
    "ComponentLoader",
    "ComponentModule",
    "Export",
    "ExportKind",
    "PageRenderer",
]
