"""Built-in HTML documents: the 404 page and the 500 page.

These are framework pages, not user templates, so they are rendered
with kida from an in-memory loader.  Autoescaping is on: the 500 page
may echo an exception message.
"""

from kida import DictLoader, Environment

_TEMPLATES = {
    "base.html": """\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
    <style>
      body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; padding: 2rem; text-align: center; }
      h1 { color: #dc2626; }
      pre { text-align: left; white-space: pre-wrap; }
    </style>
  </head>
  <body>
{% block content %}{% end %}
  </body>
</html>
""",
    "404.html": """\
{% extends "base.html" %}
{% block content %}
    <h1>404 - Page Not Found</h1>
    <p>The requested page could not be found.</p>
    <a href="/">Go back home</a>
{% end %}
""",
    "500.html": """\
{% extends "base.html" %}
{% block content %}
    <h1>500 - Internal Server Error</h1>
    <p>An error occurred while rendering the page.</p>
{% if detail %}
    <pre>{{ detail }}</pre>
{% end %}
{% end %}
""",
}

_env = Environment(loader=DictLoader(_TEMPLATES), autoescape=True)


def not_found_page() -> str:
    """The document served when no route matches."""
    return _env.get_template("404.html").render(title="404 - Page Not Found")


def error_page(detail: str = "") -> str:
    """The document served when a page fails to render.

    Args:
        detail: Error text to show.  Callers pass it only in debug mode.
    """
    return _env.get_template("500.html").render(title="Error - 500", detail=detail)
