"""Error handling for failed page renders.

A render that raises (missing template, broken component, a bug in the
framework) becomes a 500 document for that one request.  Renders are
never retried.
"""

import logging

from tern.errors import RenderError
from tern.http.request import Request
from tern.http.response import Response
from tern.templating.documents import error_page

logger = logging.getLogger("tern.server")


def handle_render_error(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Log *exc* and build the 500 response.

    Configuration problems (:class:`~tern.errors.RenderError`) are
    logged without a traceback; anything else is unexpected and logged
    with one.  The error text only reaches the client in debug mode.
    """
    if isinstance(exc, RenderError):
        logger.error("500 %s %s: %s", request.method, request.path, exc)
    else:
        logger.exception("500 %s %s", request.method, request.path)

    detail = f"{type(exc).__name__}: {exc}" if debug else ""
    return Response(body=error_page(detail), status=500)
