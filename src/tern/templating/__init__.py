"""Template expressions and rendering.

Templates are plain HTML with ``{{ ... }}`` units::

    <h1>{{ title }}</h1>
    <p>{{ greet(query.name) || 'Hello, stranger!' }}</p>

See :mod:`tern.templating.expressions` for the grammar.
"""

from tern.templating.expressions import (
    UNDEFINED,
    evaluate_expression,
    is_truthy,
    parse_arguments,
    parse_expression,
    to_text,
)
from tern.templating.renderer import render_template

__all__ = [
    "UNDEFINED",
    "evaluate_expression",
    "is_truthy",
    "parse_arguments",
    "parse_expression",
    "render_template",
    "to_text",
]
