"""Turn a parsed AstNode tree into a Value tree of the same shape."""

from __future__ import annotations

import logging

from lispy.errors import ErrorKind, LispyTypeError
from lispy.reader.ast import AstNode
from lispy.reader.parser import parse
from lispy.types.value import (
    NUMBER_MAX,
    NUMBER_MIN,
    Expression,
    Number,
    QExpr,
    SExpr,
    Symbol,
    Value,
    make_error,
)

logger = logging.getLogger(__name__)

_DELIMITERS = frozenset("(){}")


def read_number(node: AstNode) -> Value:
    try:
        num = int(node.contents, 10)
    except ValueError:
        num = None
    if num is None or not NUMBER_MIN <= num <= NUMBER_MAX:
        logger.debug("invalid number literal %r", node.contents)
        return make_error("invalid number", kind=ErrorKind.INVALID_NUMBER)
    return Number(num)


def read(node: AstNode) -> Value:
    """Convert `node` into a Value. The syntax tree is left untouched."""
    if "number" in node.tag:
        return read_number(node)
    if "symbol" in node.tag:
        return Symbol(node.contents)

    # The root and parenthesised groups become S-expressions
    x: Expression
    if node.tag == ">" or "sexpr" in node.tag:
        x = SExpr()
    elif "qexpr" in node.tag:
        x = QExpr()
    else:
        raise LispyTypeError(f"Cannot read syntax node tagged {node.tag!r}")

    for child in node.children:
        if child.contents in _DELIMITERS or child.tag == "regex":
            continue
        x.append(read(child))
    return x


def read_source(source: str) -> Value:
    """Parse `source` and read its root, giving one S-expression.

    Source nested deeper than the interpreter stack allows reads as a
    RecursionLimit error value.
    """
    try:
        return read(parse(source))
    except RecursionError:
        logger.warning("recursion limit reached while reading")
        return make_error("Recursion limit exceeded", kind=ErrorKind.RECURSION_LIMIT)
