"""Template rendering: substitute every ``{{ ... }}`` unit in a page.

Units are evaluated one at a time, left to right, so component
functions with side effects (logging, counters) run in document order.
A unit that fails is left in the output exactly as written; the rest of
the page still renders.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from tern.errors import UnknownFunctionError
from tern.templating.expressions import evaluate_expression, to_text

if TYPE_CHECKING:
    from tern.context import RenderContext
    from tern.pages.components import ComponentModule

logger = logging.getLogger("tern.templating")

# One expression unit; the inner text may not contain "}"
EXPRESSION_RE = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")


async def render_template(
    template: str,
    component: ComponentModule,
    context: RenderContext,
) -> str:
    """Render *template* against a component and a request context.

    Args:
        template: Template source containing ``{{ ... }}`` units.
        component: Exports the expressions may call or read.
        context: Per-request query, params and headers.

    Returns:
        The template with every unit replaced by its stringified value,
        or by its original text when evaluation failed.
    """
    parts: list[str] = []
    last = 0
    for match in EXPRESSION_RE.finditer(template):
        parts.append(template[last : match.start()])
        parts.append(await _render_unit(match, component, context))
        last = match.end()
    parts.append(template[last:])
    return "".join(parts)


async def _render_unit(
    match: re.Match[str],
    component: ComponentModule,
    context: RenderContext,
) -> str:
    expression = match.group(1).strip()
    try:
        value = await evaluate_expression(expression, component, context)
    except UnknownFunctionError as exc:
        logger.warning("%s (in {{ %s }}, %s)", exc, expression, component.source)
        return match.group(0)
    except Exception:
        logger.exception("Error processing template expression {{ %s }} (%s)", expression, component.source)
        return match.group(0)
    return to_text(value)
