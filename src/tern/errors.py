"""Tern exception hierarchy.

Shared across discovery, the evaluator, the page renderer and the ASGI
app so every module raises and catches the same types.

Two families matter at runtime:

- ``RenderError`` invalidates a whole page (missing template,
  unloadable component).  It propagates to the HTTP layer, which
  answers with a 500 document.
- ``ExpressionError`` invalidates a single ``{{ ... }}`` unit.  The
  template renderer absorbs it and keeps the literal text.

A route that does not exist is not an error at all: it renders the
404 document.
"""


class TernError(Exception):
    """Base for all tern-specific errors."""


class ConfigurationError(TernError):
    """Raised when app configuration is invalid."""


class RenderError(TernError):
    """A failure that prevents a page from producing any output."""


class TemplateNotFoundError(RenderError):
    """A known route has no HTML template next to its component."""

    def __init__(self, route: str, template_path: str) -> None:
        self.route = route
        self.template_path = template_path
        super().__init__(f"HTML template not found for route: {route} ({template_path})")


class ComponentLoadError(RenderError):
    """A component module could not be imported or executed."""

    def __init__(self, module_path: str, reason: str = "") -> None:
        self.module_path = module_path
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to load component {module_path}{detail}")


class ExpressionError(TernError):
    """A single template expression could not be evaluated."""


class ExpressionSyntaxError(ExpressionError):
    """The expression text does not match the template grammar."""

    def __init__(self, expression: str, detail: str) -> None:
        self.expression = expression
        self.detail = detail
        super().__init__(f"{detail} in {expression!r}")


class UnknownFunctionError(ExpressionError):
    """A call names an export that is missing or not callable."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function {name} not found in component")
