"""Expression parsing and evaluation for single-variable plots.

Expressions are tokenized and parsed into a small immutable tree that only
knows numbers, the variable `x`, named constants, `+ - * / ^`, unary sign and
calls to an allow-listed set of functions. The tree is evaluated with numpy so
a whole sampling grid is computed in one pass and IEEE-754 semantics apply:
`1/0` is `inf`, `sqrt(-1)` is `nan`, neither is an error.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Callable, Literal, Union

import numpy as np

from .errors import InvalidExpressionError


VARIABLE_NAME = "x"

FUNCTIONS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "log": np.log10,
    "ln": np.log,
    "sqrt": np.sqrt,
    "abs": np.abs,
    "exp": np.exp,
}

CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

TokenKind = Literal["number", "name", "op", "lparen", "rparen", "comma"]

_TOKEN_RE = re.compile(
    r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<name>[A-Za-z_][A-Za-z_0-9]*)
    |(?P<op>\*\*|[-+*/^])
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class Constant:
    name: str
    value: float


@dataclass(frozen=True)
class UnaryOp:
    op: Literal["+", "-"]
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: Literal["+", "-", "*", "/", "^"]
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    argument: "Node"


Node = Union[Number, Variable, Constant, UnaryOp, BinaryOp, Call]


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    size = len(text)
    while pos < size:
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise InvalidExpressionError(f"unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup
        if kind is None:
            raise InvalidExpressionError(f"unexpected character {text[pos]!r} at position {pos}")
        raw = match.group(kind)
        # `**` is accepted as an alias so pasted Python-style powers still work.
        tokens.append(Token(kind=kind, text="^" if raw == "**" else raw, pos=pos))  # type: ignore[arg-type]
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser.

    Grammar, lowest precedence first::

        expr    := term (('+' | '-') term)*
        term    := unary (('*' | '/') unary)*
        unary   := ('+' | '-') unary | power
        power   := primary ('^' unary)?
        primary := NUMBER | NAME | NAME '(' expr ')' | '(' expr ')'

    `^` binds tighter than a leading sign and associates to the right, so
    `-x^2` is `-(x^2)` and `2^3^2` is `2^9`.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    def parse(self) -> Node:
        if not self._tokens:
            raise InvalidExpressionError("empty expression")
        node = self._expr()
        token = self._peek()
        if token is not None:
            if token.kind == "rparen":
                raise InvalidExpressionError(f"unbalanced ')' at position {token.pos}")
            raise InvalidExpressionError(f"unexpected {token.text!r} at position {token.pos}")
        return node

    def _peek(self) -> Token | None:
        if self._index >= len(self._tokens):
            return None
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise InvalidExpressionError("unexpected end of expression")
        self._index += 1
        return token

    def _at_op(self, *ops: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == "op" and token.text in ops

    def _expr(self) -> Node:
        node = self._term()
        while self._at_op("+", "-"):
            op = self._advance().text
            node = BinaryOp(op=op, left=node, right=self._term())  # type: ignore[arg-type]
        return node

    def _term(self) -> Node:
        node = self._unary()
        while self._at_op("*", "/"):
            op = self._advance().text
            node = BinaryOp(op=op, left=node, right=self._unary())  # type: ignore[arg-type]
        return node

    def _unary(self) -> Node:
        signs: list[str] = []
        while self._at_op("+", "-"):
            signs.append(self._advance().text)
        node = self._power()
        for op in reversed(signs):
            node = UnaryOp(op=op, operand=node)  # type: ignore[arg-type]
        return node

    def _power(self) -> Node:
        base = self._primary()
        if self._at_op("^"):
            self._advance()
            return BinaryOp(op="^", left=base, right=self._unary())
        return base

    def _primary(self) -> Node:
        token = self._advance()
        if token.kind == "number":
            return Number(value=float(token.text))
        if token.kind == "lparen":
            node = self._expr()
            self._expect_rparen(token)
            return node
        if token.kind == "name":
            return self._name(token)
        raise InvalidExpressionError(f"unexpected {token.text!r} at position {token.pos}")

    def _name(self, token: Token) -> Node:
        name = token.text
        following = self._peek()
        if following is not None and following.kind == "lparen":
            if name not in FUNCTIONS:
                raise InvalidExpressionError(f"unknown function {name!r}")
            opening = self._advance()
            argument = self._expr()
            nxt = self._peek()
            if nxt is not None and nxt.kind == "comma":
                raise InvalidExpressionError(f"function {name!r} takes exactly one argument")
            self._expect_rparen(opening)
            return Call(name=name, argument=argument)
        if name in FUNCTIONS:
            raise InvalidExpressionError(f"function {name!r} requires an argument in parentheses")
        if name == VARIABLE_NAME:
            return Variable(name=name)
        if name in CONSTANTS:
            return Constant(name=name, value=CONSTANTS[name])
        raise InvalidExpressionError(f"unknown identifier {name!r}")

    def _expect_rparen(self, opening: Token) -> None:
        token = self._peek()
        if token is None or token.kind != "rparen":
            raise InvalidExpressionError(f"missing ')' for '(' at position {opening.pos}")
        self._advance()


def parse_expression(text: str) -> Node:
    tokens = tokenize(text)
    try:
        return _Parser(tokens).parse()
    except RecursionError as exc:
        raise InvalidExpressionError("expression is nested too deeply") from exc


_BINARY_OPS: dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}


def _evaluate_node(node: Node, x: np.ndarray) -> np.ndarray | float:
    """Post-order walk with an explicit stack; long `x+x+...` chains are left-deep."""
    values: list[np.ndarray | float] = []
    pending: list[tuple[Node, bool]] = [(node, False)]
    while pending:
        current, children_done = pending.pop()
        if isinstance(current, Number):
            values.append(current.value)
            continue
        if isinstance(current, Variable):
            values.append(x)
            continue
        if isinstance(current, Constant):
            values.append(current.value)
            continue
        if not children_done:
            pending.append((current, True))
            if isinstance(current, UnaryOp):
                pending.append((current.operand, False))
            elif isinstance(current, BinaryOp):
                pending.append((current.right, False))
                pending.append((current.left, False))
            elif isinstance(current, Call):
                pending.append((current.argument, False))
            else:
                raise TypeError(f"unsupported expression node: {type(current)!r}")
            continue
        if isinstance(current, UnaryOp):
            value = values.pop()
            values.append(np.negative(value) if current.op == "-" else value)
        elif isinstance(current, BinaryOp):
            right = np.asarray(values.pop(), dtype=np.float64)
            left = np.asarray(values.pop(), dtype=np.float64)
            values.append(_BINARY_OPS[current.op](left, right))
        else:
            argument = np.asarray(values.pop(), dtype=np.float64)
            values.append(FUNCTIONS[current.name](argument))
    return values.pop()


@dataclass(frozen=True)
class CompiledExpression:
    """Parsed expression, callable with a value for `x`."""

    source: str
    tree: Node

    def __call__(self, x: float) -> float:
        return float(self.evaluate_many(np.asarray([x], dtype=np.float64))[0])

    def evaluate_many(self, xs: np.ndarray) -> np.ndarray:
        arr = np.asarray(xs, dtype=np.float64)
        if arr.ndim != 1:
            raise ValueError("xs must be 1-D")
        try:
            with np.errstate(all="ignore"):
                out = _evaluate_node(self.tree, arr)
        except (ArithmeticError, TypeError, ValueError) as exc:
            raise InvalidExpressionError(str(exc)) from exc
        except RecursionError as exc:
            raise InvalidExpressionError("expression is nested too deeply") from exc
        return np.array(np.broadcast_to(np.asarray(out, dtype=np.float64), arr.shape))


def compile_expression(text: str) -> CompiledExpression:
    return CompiledExpression(source=text, tree=parse_expression(text))


def evaluate(text: str, x: float) -> float:
    return compile_expression(text)(x)
