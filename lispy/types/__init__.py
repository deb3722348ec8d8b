from lispy.types.value import (
    Value,
    Number,
    Error,
    Symbol,
    Function,
    Builtin,
    Lambda,
    Expression,
    SExpr,
    QExpr,
    make_error,
    make_lambda,
    render,
)
from lispy.types.environment import Environment
