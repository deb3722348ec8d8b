"""Core evaluator for Lispy.

Symbols are looked up, S-expressions are reduced left to right and applied,
everything else evaluates to itself. Faults come back as Error values; the
first one found while reducing an S-expression is the result and its later
siblings are never evaluated.
"""

from __future__ import annotations

import logging

from lispy.errors import ErrorKind
from lispy.evaluation.apply import apply
from lispy.types.environment import Environment
from lispy.types.value import Error, Function, SExpr, Symbol, Value, make_error

logger = logging.getLogger(__name__)


def evaluate(env: Environment, value: Value) -> Value:
    """Evaluate `value` in `env`. Consumes `value`, returns an owned result.

    Running out of interpreter stack is reported as a RecursionLimit error.
    """
    try:
        return evaluate0(env, value)
    except RecursionError:
        logger.warning("recursion limit reached while evaluating")
        return make_error("Recursion limit exceeded", kind=ErrorKind.RECURSION_LIMIT)


def evaluate0(env: Environment, value: Value) -> Value:
    match value:
        case Symbol():
            result = env.lookup(value)
            value.destroy()
            return result
        case SExpr():
            return evaluate_sexpr(env, value)
    # Numbers, errors, functions and Q-expressions evaluate to themselves
    return value


def evaluate_sexpr(env: Environment, sexpr: SExpr) -> Value:
    if not sexpr.cells:
        return sexpr

    for i in range(len(sexpr.cells)):
        sexpr.cells[i] = evaluate(env, sexpr.cells[i])
        if isinstance(sexpr.cells[i], Error):
            return sexpr.take(i)

    if len(sexpr.cells) == 1:
        return sexpr.take(0)

    fn = sexpr.pop(0)
    if not isinstance(fn, Function):
        err = make_error(
            "S-Expression starts with incorrect type. Got %s, Expected %s.",
            fn.type_name, Function.type_name,
            kind=ErrorKind.TYPE_MISMATCH,
        )
        fn.destroy()
        sexpr.destroy()
        return err

    return apply(env, fn, sexpr, evaluate)
