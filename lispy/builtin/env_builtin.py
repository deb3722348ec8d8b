from __future__ import annotations

import logging
import operator
from typing import Callable

from lispy.errors import ErrorKind
from lispy.evaluation.evaluator import evaluate
from lispy.types.environment import Environment
from lispy.types.value import (
    NUMBER_MAX,
    NUMBER_MIN,
    Builtin,
    Error,
    Number,
    QExpr,
    SExpr,
    Symbol,
    Value,
    make_error,
    make_lambda,
)

logger = logging.getLogger(__name__)

# Every builtin takes the caller's environment and an argument S-expression
# that it consumes: arguments are either handed back in the result or
# destroyed.


# -------------------------------
# Argument checks
# -------------------------------
# Each check returns None on success. On failure it destroys `args` and
# returns the Error, so checks chain with `or`.

def assert_count(fname: str, args: SExpr, expected: int) -> Error | None:
    got = len(args)
    if got == expected:
        return None
    args.destroy()
    return make_error(
        "Function '%s' passed incorrect number of arguments. Got %i, Expected %i.",
        fname, got, expected,
        kind=ErrorKind.ARITY_MISMATCH,
    )

def assert_min_count(fname: str, args: SExpr, minimum: int) -> Error | None:
    got = len(args)
    if got >= minimum:
        return None
    args.destroy()
    return make_error(
        "Function '%s' passed incorrect number of arguments. Got %i, Expected at least %i.",
        fname, got, minimum,
        kind=ErrorKind.ARITY_MISMATCH,
    )

def assert_type(fname: str, args: SExpr, index: int, expected: type[Value]) -> Error | None:
    got = args.cells[index]
    if isinstance(got, expected):
        return None
    args.destroy()
    return make_error(
        "Function '%s' passed incorrect type for argument %i. Got %s, Expected %s.",
        fname, index, got.type_name, expected.type_name,
        kind=ErrorKind.TYPE_MISMATCH,
    )

def assert_all_types(fname: str, args: SExpr, expected: type[Value]) -> Error | None:
    for i in range(len(args)):
        if (err := assert_type(fname, args, i, expected)) is not None:
            return err
    return None

def assert_not_empty(fname: str, args: SExpr, index: int) -> Error | None:
    if len(args.cells[index]):
        return None
    args.destroy()
    return make_error(
        "Function '%s' passed {} for argument %i.",
        fname, index,
        kind=ErrorKind.EMPTY_ARGUMENT,
    )

def assert_symbols(fname: str, args: SExpr, index: int) -> Error | None:
    for cell in args.cells[index]:
        if not isinstance(cell, Symbol):
            got = cell.type_name
            args.destroy()
            return make_error(
                "Function '%s' cannot define non-symbol. Got %s, Expected %s.",
                fname, got, Symbol.type_name,
                kind=ErrorKind.TYPE_MISMATCH,
            )
    return None


# -------------------------------
# List operations
# -------------------------------
def list_builtin(env: Environment, args: SExpr) -> Value:
    return args.retag(QExpr)

def head(env: Environment, args: SExpr) -> Value:
    err = (
        assert_count("head", args, 1)
        or assert_type("head", args, 0, QExpr)
        or assert_not_empty("head", args, 0)
    )
    if err is not None:
        return err
    v = args.take(0)
    while len(v) > 1:
        v.pop(1).destroy()
    return v

def tail(env: Environment, args: SExpr) -> Value:
    err = (
        assert_count("tail", args, 1)
        or assert_type("tail", args, 0, QExpr)
        or assert_not_empty("tail", args, 0)
    )
    if err is not None:
        return err
    v = args.take(0)
    v.pop(0).destroy()
    return v

def eval_builtin(env: Environment, args: SExpr) -> Value:
    err = assert_count("eval", args, 1) or assert_type("eval", args, 0, QExpr)
    if err is not None:
        return err
    x = args.take(0).retag(SExpr)
    return evaluate(env, x)

def join(env: Environment, args: SExpr) -> Value:
    err = assert_min_count("join", args, 1) or assert_all_types("join", args, QExpr)
    if err is not None:
        return err
    x = args.pop(0)
    while args.cells:
        x.join(args.pop(0))
    args.destroy()
    return x


# -------------------------------
# Arithmetic
# -------------------------------
def _truncating_div(a: int, b: int) -> int:
    # Integer division rounding toward zero
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

OPERATORS: dict[str, Callable[[int, int], int]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _truncating_div,
}

def _out_of_range(op: str) -> Error:
    return make_error(
        "Function '%s' result out of range.", op, kind=ErrorKind.INVALID_NUMBER
    )

def builtin_op(env: Environment, args: SExpr, op: str) -> Value:
    """Left fold of `op` over the arguments; unary `-` negates.

    Results stay in the signed 64-bit range accepted for number literals;
    leaving it is an InvalidNumber error.
    """
    err = assert_min_count(op, args, 1) or assert_all_types(op, args, Number)
    if err is not None:
        return err

    fold = OPERATORS[op]
    acc = args.pop(0).num
    if op == "-" and not args.cells:
        acc = -acc
        if not NUMBER_MIN <= acc <= NUMBER_MAX:
            return _out_of_range(op)

    while args.cells:
        y = args.pop(0).num
        if op == "/" and y == 0:
            args.destroy()
            return make_error("Division By Zero!", kind=ErrorKind.DIVISION_BY_ZERO)
        acc = fold(acc, y)
        if not NUMBER_MIN <= acc <= NUMBER_MAX:
            args.destroy()
            return _out_of_range(op)
    return Number(acc)

def add(env: Environment, args: SExpr) -> Value:
    return builtin_op(env, args, "+")

def sub(env: Environment, args: SExpr) -> Value:
    return builtin_op(env, args, "-")

def mul(env: Environment, args: SExpr) -> Value:
    return builtin_op(env, args, "*")

def div(env: Environment, args: SExpr) -> Value:
    return builtin_op(env, args, "/")


# -------------------------------
# Variables and functions
# -------------------------------
def define(env: Environment, args: SExpr) -> Value:
    """(def {a b} 1 2): bind each symbol to the matching value in `env`."""
    err = (
        assert_min_count("def", args, 1)
        or assert_type("def", args, 0, QExpr)
        or assert_symbols("def", args, 0)
    )
    if err is not None:
        return err

    syms = args.cells[0]
    values = args.cells[1:]
    if len(syms) != len(values):
        got, expected = len(values), len(syms)
        args.destroy()
        return make_error(
            "Function 'def' passed incorrect number of values to symbols. Got %i, Expected %i.",
            got, expected,
            kind=ErrorKind.ARITY_MISMATCH,
        )

    for sym, value in zip(syms, values):
        env.bind(sym, value)
        logger.debug("def %s", sym.name)
    args.destroy()
    return SExpr()

def lambda_builtin(env: Environment, args: SExpr) -> Value:
    """(\\ {formals} {body}): build a Lambda with a fresh environment."""
    err = (
        assert_count("\\", args, 2)
        or assert_type("\\", args, 0, QExpr)
        or assert_type("\\", args, 1, QExpr)
        or assert_symbols("\\", args, 0)
    )
    if err is not None:
        return err

    formals = args.pop(0)
    body = args.pop(0)
    args.destroy()
    return make_lambda(formals, body)


# -------------------------------
# Registration
# -------------------------------
BUILTINS: dict[str, Callable[[Environment, SExpr], Value]] = {
    # Variables and functions
    "def": define,
    "\\": lambda_builtin,
    # List functions
    "list": list_builtin,
    "head": head,
    "tail": tail,
    "eval": eval_builtin,
    "join": join,
    # Mathematical functions
    "+": add,
    "-": sub,
    "*": mul,
    "/": div,
}

def register(env: Environment) -> None:
    for name, fn in BUILTINS.items():
        env.bind(name, Builtin(name, fn))
