"""Expression evaluator for ``{{ ... }}`` units.

The grammar is deliberately tiny.  There are no loops, no operators and
no nesting beyond one level of ``||`` fallback::

    expression := operand ("||" operand)*
    operand    := call | literal | context_ref | path
    call       := NAME "(" [argument ("," argument)*] ")"
    argument   := literal | context_ref | <any other text, passed as a string>
    literal    := STRING | NUMBER | "true" | "false" | "null" | "undefined"
    context_ref:= ("query." | "params." | "headers.") KEY
    path       := NAME ("." NAME)*

Evaluation resolves paths against the component's value exports, calls
against its callable exports, and context refs against the
:class:`~tern.context.RenderContext`.  Missing names and keys resolve
to :data:`UNDEFINED`; only calls to unknown functions and malformed
text raise.

Pipeline: source text → :func:`tokenize` → :class:`_Parser` → node
tree → ``await node.evaluate(scope)``.  Parsed trees are immutable and
cached per source string.
"""

from __future__ import annotations

import functools
import math
import numbers
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from tern._internal.invoke import invoke
from tern.errors import ExpressionError, ExpressionSyntaxError, UnknownFunctionError

if TYPE_CHECKING:
    from tern.context import RenderContext
    from tern.pages.components import ComponentModule


class _Undefined:
    """Marker for "not found": a missing export, key or attribute.

    Distinct from ``None`` (the template's ``null``).  Falsy, and
    renders as an empty string.
    """

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()

CONTEXT_NAMESPACES = ("query", "params", "headers")

_KEYWORDS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}


def is_truthy(value: Any) -> bool:
    """Truthiness used by ``||`` fallback chains.

    Falsy: ``None``, :data:`UNDEFINED`, ``False``, numeric zero, NaN and
    the empty string.  Everything else is truthy, including strings of
    whitespace and empty containers.
    """
    if value is None or value is UNDEFINED or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, bool):
        return True
    if isinstance(value, numbers.Number):
        if isinstance(value, numbers.Real) and math.isnan(value):
            return False
        return value != 0
    return True


def to_text(value: Any) -> str:
    """Render an evaluated value: ``None`` and UNDEFINED become ``""``."""
    if value is None or value is UNDEFINED:
        return ""
    return str(value)


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


class TokenKind(Enum):
    STRING = "string"
    NUMBER = "number"
    CONTEXT = "context"
    NAME = "name"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    OR = "||"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int


# Alternatives are tried in order; CONTEXT must precede NAME so header
# keys like ``headers.user-agent`` stay one token.
_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<string>"[^"]*"|'[^']*')
    | (?P<number>[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?(?![\w.]))
    | (?P<context>(?:query|params|headers)\.[^\s,()|'"]+)
    | (?P<name>[A-Za-z_$][\w$]*(?:\.[\w$]+)*)
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<comma>,)
    | (?P<or>\|\|)
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_GROUP_KINDS = {
    "string": TokenKind.STRING,
    "number": TokenKind.NUMBER,
    "context": TokenKind.CONTEXT,
    "name": TokenKind.NAME,
    "lparen": TokenKind.LPAREN,
    "rparen": TokenKind.RPAREN,
    "comma": TokenKind.COMMA,
    "or": TokenKind.OR,
    "other": TokenKind.OTHER,
}


def tokenize(source: str) -> list[Token]:
    """Split expression text into tokens, dropping whitespace."""
    tokens: list[Token] = []
    for match in _TOKEN_RE.finditer(source):
        group = match.lastgroup
        if group is None or group == "ws":
            continue
        tokens.append(Token(_GROUP_KINDS[group], match.group(), match.start(), match.end()))
    return tokens


def _number(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        return float(text)


# ---------------------------------------------------------------------------
# Node tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Scope:
    component: ComponentModule
    context: RenderContext


@dataclass(frozen=True, slots=True)
class Literal:
    value: Any

    async def evaluate(self, scope: _Scope) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class RawText:
    """An argument that matched no literal rule, passed through verbatim."""

    text: str

    async def evaluate(self, scope: _Scope) -> Any:
        return self.text


@dataclass(frozen=True, slots=True)
class ContextRef:
    namespace: str
    key: str

    async def evaluate(self, scope: _Scope) -> Any:
        source: Mapping[str, str] = getattr(scope.context, self.namespace)
        key = self.key.lower() if self.namespace == "headers" else self.key
        return source.get(key, UNDEFINED)


@dataclass(frozen=True, slots=True)
class PropertyPath:
    parts: tuple[str, ...]

    async def evaluate(self, scope: _Scope) -> Any:
        head, *rest = self.parts
        export = scope.component.lookup(head)
        if export is None:
            return UNDEFINED
        if export.is_callable:
            msg = f"{head} is a function; call it as {head}()"
            raise ExpressionError(msg)
        value = export.value
        for part in rest:
            value = _member(value, part)
            if value is UNDEFINED:
                break
        return value


@dataclass(frozen=True, slots=True)
class Call:
    name: str
    arguments: tuple[Literal | RawText | ContextRef, ...]

    async def evaluate(self, scope: _Scope) -> Any:
        export = scope.component.lookup(self.name)
        if export is None or not export.is_callable:
            raise UnknownFunctionError(self.name)
        args = [await argument.evaluate(scope) for argument in self.arguments]
        return await invoke(export.value, *args, scope.context)


@dataclass(frozen=True, slots=True)
class OrChain:
    operands: tuple[Node, ...]

    async def evaluate(self, scope: _Scope) -> Any:
        value: Any = UNDEFINED
        for operand in self.operands:
            value = await operand.evaluate(scope)
            if is_truthy(value):
                return value
        return value


Node = Literal | RawText | ContextRef | PropertyPath | Call | OrChain


def _member(value: Any, name: str) -> Any:
    """One step of dotted access: mapping key, sequence index or attribute."""
    if value is None or value is UNDEFINED:
        return UNDEFINED
    if isinstance(value, Mapping):
        return value.get(name, UNDEFINED)
    if isinstance(value, Sequence) and not isinstance(value, str) and name.isdigit():
        index = int(name)
        return value[index] if index < len(value) else UNDEFINED
    # Private attributes never resolve
    if name.startswith("_"):
        return UNDEFINED
    return getattr(value, name, UNDEFINED)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    """Recursive-descent parser over a token list."""

    __slots__ = ("_pos", "_source", "_tokens")

    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens = tokenize(source)
        self._pos = 0

    def parse(self) -> Node:
        if not self._tokens:
            raise self._error("empty expression")
        operands = [self._operand()]
        while self._peek(TokenKind.OR):
            self._pos += 1
            operands.append(self._operand())
        if self._pos != len(self._tokens):
            token = self._tokens[self._pos]
            raise self._error(f"unexpected {token.text!r} at column {token.start + 1}")
        if len(operands) == 1:
            return operands[0]
        return OrChain(tuple(operands))

    # -- Grammar rules --

    def _operand(self) -> Node:
        if self._pos >= len(self._tokens):
            raise self._error("missing operand")
        token = self._tokens[self._pos]
        self._pos += 1

        if token.kind is TokenKind.NAME and self._peek(TokenKind.LPAREN):
            if "." in token.text:
                raise self._error(f"method calls are not supported ({token.text})")
            return self._call(token.text)

        node = _classify(token)
        if node is None or isinstance(node, RawText):
            raise self._error(f"unexpected {token.text!r} at column {token.start + 1}")
        return node

    def _call(self, name: str) -> Call:
        self._pos += 1  # "("
        arguments: list[Literal | RawText | ContextRef] = []
        if self._peek(TokenKind.RPAREN):
            self._pos += 1
            return Call(name, ())

        pending: list[Token] = []
        depth = 0
        while self._pos < len(self._tokens):
            token = self._tokens[self._pos]
            self._pos += 1
            if depth == 0 and token.kind in (TokenKind.COMMA, TokenKind.RPAREN):
                arguments.append(self._argument(pending))
                pending = []
                if token.kind is TokenKind.RPAREN:
                    return Call(name, tuple(arguments))
                continue
            if token.kind is TokenKind.LPAREN:
                depth += 1
            elif token.kind is TokenKind.RPAREN:
                depth -= 1
            pending.append(token)
        raise self._error(f"unclosed argument list for {name}()")

    def _argument(self, tokens: list[Token]) -> Literal | RawText | ContextRef:
        if not tokens:
            raise self._error("empty argument")
        if len(tokens) == 1:
            node = _classify(tokens[0])
            if isinstance(node, (Literal, ContextRef)):
                return node
        return RawText(self._source[tokens[0].start : tokens[-1].end])

    # -- Helpers --

    def _peek(self, kind: TokenKind) -> bool:
        return self._pos < len(self._tokens) and self._tokens[self._pos].kind is kind

    def _error(self, detail: str) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(self._source, detail)


def _classify(token: Token) -> Literal | ContextRef | PropertyPath | RawText | None:
    """Classify a lone token as a literal, context ref, path or raw text."""
    if token.kind is TokenKind.STRING:
        return Literal(token.text[1:-1])
    if token.kind is TokenKind.NUMBER:
        return Literal(_number(token.text))
    if token.kind is TokenKind.CONTEXT:
        namespace, _, key = token.text.partition(".")
        return ContextRef(namespace, key)
    if token.kind is TokenKind.NAME:
        if token.text in _KEYWORDS:
            return Literal(_KEYWORDS[token.text])
        return PropertyPath(tuple(token.text.split(".")))
    if token.kind is TokenKind.OTHER:
        return RawText(token.text)
    return None


@functools.lru_cache(maxsize=1024)
def parse_expression(source: str) -> Node:
    """Parse expression text into an immutable node tree.

    Raises:
        ExpressionSyntaxError: *source* does not match the grammar.
    """
    return _Parser(source.strip()).parse()


def parse_arguments(source: str) -> tuple[Literal | RawText | ContextRef, ...]:
    """Parse the inside of a call's parentheses (``"42, 'x', query.q"``)."""
    node = parse_expression(f"_({source})")
    if not isinstance(node, Call):
        raise ExpressionSyntaxError(source, "not an argument list")
    return node.arguments


async def evaluate_expression(
    expression: str,
    component: ComponentModule,
    context: RenderContext,
) -> Any:
    """Evaluate one expression unit and return its raw value.

    Raises:
        ExpressionSyntaxError: The text is malformed.
        UnknownFunctionError: A call names a missing or non-callable export.
        ExpressionError: A callable export was referenced without a call.
        Exception: Anything raised by the called component function.
    """
    node = parse_expression(expression)
    return await node.evaluate(_Scope(component, context))
