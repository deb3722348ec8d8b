"""Application engine for Lispy.

Applies a Function value to an S-expression of already reduced arguments:
- Builtins are called directly with the caller's environment.
- Lambdas bind their formals positionally into their own environment.
  Supplying fewer arguments than formals returns the partially applied
  lambda; a `&` formal collects the remaining arguments into a Q-expression.

Both the function and the argument list are consumed.
"""

from __future__ import annotations

import logging
from typing import Callable

from lispy.errors import ErrorKind, LispyTypeError
from lispy.types.environment import Environment
from lispy.types.value import (
    Builtin,
    Function,
    Lambda,
    QExpr,
    SExpr,
    Value,
    make_error,
)

logger = logging.getLogger(__name__)

EvaluatorFn = Callable[[Environment, Value], Value]

# Formal that binds the rest of the arguments as a list: {x & rest}
VARIADIC = "&"


def _variadic_format_error() -> Value:
    return make_error(
        "Function format invalid. Symbol '&' not followed by single symbol.",
        kind=ErrorKind.TYPE_MISMATCH,
    )


def apply_lambda(
    env: Environment, fn: Lambda, args: SExpr, evaluate_fn: EvaluatorFn
) -> Value:
    """Bind `args` to the formals of `fn` and evaluate its body once all are bound.

    `fn` must be exclusively owned by the caller (it is a copy looked up
    from an environment), so its environment is extended in place.
    """
    given = len(args)
    total = len(fn.formals)

    while args.cells:
        if not fn.formals.cells:
            args.destroy()
            fn.destroy()
            return make_error(
                "Function passed too many arguments. Got %i, Expected %i.",
                given, total,
                kind=ErrorKind.ARITY_MISMATCH,
            )

        formal = fn.formals.pop(0)

        if formal.name == VARIADIC:
            if len(fn.formals) != 1:
                args.destroy()
                fn.destroy()
                return _variadic_format_error()
            rest_name = fn.formals.pop(0)
            rest = args.retag(QExpr)
            fn.env.bind(rest_name, rest)
            rest.destroy()
            break

        value = args.pop(0)
        fn.env.bind(formal, value)
        value.destroy()

    args.destroy()

    # A trailing `& rest` with nothing left to collect binds the empty list
    if fn.formals.cells and fn.formals.cells[0].name == VARIADIC:
        if len(fn.formals) != 2:
            fn.destroy()
            return _variadic_format_error()
        fn.formals.pop(0)
        rest_name = fn.formals.pop(0)
        fn.env.bind(rest_name, QExpr())

    if fn.formals.cells:
        logger.debug("partial application, %d formal(s) left", len(fn.formals))
        return fn

    fn.env.outer = env
    body = fn.body.copy().retag(SExpr)
    result = evaluate_fn(fn.env, body)
    fn.destroy()
    return result


def apply(
    env: Environment, fn: Function, args: SExpr, evaluate_fn: EvaluatorFn
) -> Value:
    """Apply either a Builtin or a Lambda to `args`."""
    if isinstance(fn, Builtin):
        logger.debug("calling builtin %s with %d argument(s)", fn.name, len(args))
        return fn.fn(env, args)
    if isinstance(fn, Lambda):
        return apply_lambda(env, fn, args, evaluate_fn)
    raise LispyTypeError(f"Cannot apply non-function {fn}")
