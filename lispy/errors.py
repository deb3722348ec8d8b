from enum import Enum


class ErrorKind(Enum):
    """Classification carried by every Error value."""
    GENERIC = "Generic"
    UNBOUND_SYMBOL = "UnboundSymbol"
    TYPE_MISMATCH = "TypeMismatch"
    ARITY_MISMATCH = "ArityMismatch"
    EMPTY_ARGUMENT = "EmptyArgument"
    DIVISION_BY_ZERO = "DivisionByZero"
    INVALID_NUMBER = "InvalidNumber"
    RECURSION_LIMIT = "RecursionLimit"


# Host-level exceptions. Faults inside the language are Error values, these
# are only raised for misuse of the Python API or unparsable source.

class LispyError(Exception):
    """ Base class for all Lispy host errors"""
    pass

class LispySyntaxError(LispyError):
    """ Raised when source text does not match the grammar"""

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message if position is None else f"{message} at position {position}")
        self.position = position

class LispyIndexError(LispyError, IndexError):
    """ Raised when popping an element outside of a list"""

class LispyTypeError(LispyError, TypeError):
    """ Raised when a host operation receives the wrong kind of node or value"""
