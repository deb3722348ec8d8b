"""Value model for Lispy.

Every runtime and syntactic object is a `Value`: numbers, errors, symbols,
functions (builtin or lambda) and the two list forms. S-expressions are
active (evaluated by application), Q-expressions are inert data.

Lists own their cells and a lambda owns its captured Environment. Nothing is
shared between two live locations: storing a value somewhere else goes
through `copy()`, and a value that is no longer needed can be torn down with
`destroy()`.
"""

from __future__ import annotations

import sys
from io import StringIO
from typing import Callable, Iterable, Iterator, TYPE_CHECKING

from lispy.errors import ErrorKind, LispyIndexError

if TYPE_CHECKING:
    from lispy.types.environment import Environment


# Range accepted for number literals (signed 64-bit).
NUMBER_MIN = -(2 ** 63)
NUMBER_MAX = 2 ** 63 - 1


class Value:
    """Base class of every Lispy value."""

    __slots__ = ()
    type_name = "Unknown"

    def copy(self) -> Value:
        raise NotImplementedError

    def destroy(self) -> None:
        """Release owned children. Scalars own nothing."""

    def __str__(self) -> str:
        return render(self)


class Number(Value):
    __slots__ = ("num",)
    type_name = "Number"

    def __init__(self, num: int):
        self.num: int = num

    def copy(self) -> Number:
        return Number(self.num)

    def __eq__(self, other) -> bool:
        return isinstance(other, Number) and self.num == other.num

    def __repr__(self):
        return f"Number({self.num})"


class Error(Value):
    """An error is an ordinary value: it is returned, stored and printed."""

    __slots__ = ("message", "kind")
    type_name = "Error"

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.GENERIC):
        self.message: str = message
        self.kind: ErrorKind = kind

    def copy(self) -> Error:
        return Error(self.message, self.kind)

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Error)
            and self.message == other.message
            and self.kind == other.kind
        )

    def __repr__(self):
        return f"Error({self.message!r}, {self.kind.value})"


class Symbol(Value):
    __slots__ = ("name",)
    type_name = "Symbol"

    def __init__(self, name: str):
        # Intern to keep environment keys cheap to compare
        self.name: str = sys.intern(name)

    def copy(self) -> Symbol:
        return Symbol(self.name)

    def __eq__(self, other) -> bool:
        return isinstance(other, Symbol) and self.name == other.name

    def __repr__(self):
        return f"Symbol({self.name!r})"


class Function(Value):
    __slots__ = ()
    type_name = "Function"


BuiltinFn = Callable[["Environment", "SExpr"], Value]


class Builtin(Function):
    """A native primitive. Copies share the same Python callable."""

    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: BuiltinFn):
        self.name: str = name
        self.fn: BuiltinFn = fn

    def copy(self) -> Builtin:
        return Builtin(self.name, self.fn)

    def __eq__(self, other) -> bool:
        return isinstance(other, Builtin) and self.fn is other.fn

    def __repr__(self):
        return f"Builtin({self.name!r})"


class Lambda(Function):
    """A user defined function: formals, body and its own Environment."""

    __slots__ = ("formals", "body", "env")

    def __init__(self, formals: QExpr, body: QExpr, env: Environment | None = None):
        self.formals: QExpr = formals
        self.body: QExpr = body
        if env is None:
            from lispy.types.environment import Environment
            env = Environment()
        self.env: Environment = env

    def copy(self) -> Lambda:
        return Lambda(self.formals.copy(), self.body.copy(), self.env.duplicate())

    def destroy(self) -> None:
        self.env.destroy()
        self.formals.destroy()
        self.body.destroy()

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Lambda)
            and self.formals == other.formals
            and self.body == other.body
            and self.env == other.env
        )

    def __repr__(self):
        return f"Lambda({render(self)!r})"


class Expression(Value):
    """Ordered list of exclusively owned cells."""

    __slots__ = ("cells",)
    open_char = "("
    close_char = ")"

    def __init__(self, cells: Iterable[Value] = ()):
        self.cells: list[Value] = list(cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> Value:
        return self.cells[index]

    def append(self, value: Value) -> Expression:
        self.cells.append(value)
        return self

    def pop(self, index: int) -> Value:
        """Remove and return the cell at `index`, shifting the rest left."""
        if not 0 <= index < len(self.cells):
            raise LispyIndexError(
                f"Cannot pop index {index} from {self.type_name} of length {len(self.cells)}"
            )
        return self.cells.pop(index)

    def take(self, index: int) -> Value:
        """Pop the cell at `index` and destroy what is left of the list."""
        value = self.pop(index)
        self.destroy()
        return value

    def join(self, other: Expression) -> Expression:
        """Move every cell of `other` onto the end of this list."""
        self.cells.extend(other.cells)
        other.cells = []
        other.destroy()
        return self

    def retag(self, cls: type[Expression]) -> Expression:
        """Reinterpret this list as `cls`; the cells move without copying."""
        if type(self) is cls:
            return self
        retagged = cls()
        retagged.cells, self.cells = self.cells, []
        return retagged

    def copy(self) -> Expression:
        return type(self)(cell.copy() for cell in self.cells)

    def destroy(self) -> None:
        for cell in self.cells:
            cell.destroy()
        self.cells.clear()

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.cells == other.cells

    def __repr__(self):
        return f"{type(self).__name__}({self.cells!r})"


class SExpr(Expression):
    __slots__ = ()
    type_name = "S-Expression"


class QExpr(Expression):
    __slots__ = ()
    type_name = "Q-Expression"
    open_char = "{"
    close_char = "}"


# --- Constructors ---

def make_error(fmt: str, *args, kind: ErrorKind = ErrorKind.GENERIC) -> Error:
    """Build an Error value from a printf-style format string."""
    message = fmt % args if args else fmt
    return Error(message, kind)


def make_lambda(formals: QExpr, body: QExpr) -> Lambda:
    """Build a Lambda with a fresh, empty captured Environment."""
    return Lambda(formals, body)


# --- Rendering ---

def _write(value: Value, buffer: StringIO) -> None:
    match value:
        case Number(num=num):
            buffer.write(str(num))
        case Error(message=message):
            buffer.write(f"Error: {message}")
        case Symbol(name=name):
            buffer.write(name)
        case Builtin():
            buffer.write("<builtin>")
        case Lambda(formals=formals, body=body):
            buffer.write("(\\ ")
            _write(formals, buffer)
            buffer.write(" ")
            _write(body, buffer)
            buffer.write(")")
        case Expression():
            buffer.write(value.open_char)
            for i, cell in enumerate(value.cells):
                if i:
                    buffer.write(" ")
                _write(cell, buffer)
            buffer.write(value.close_char)
        case _:
            buffer.write(f"<{value.type_name}>")


def render(value: Value) -> str:
    """Canonical textual form of a value, as printed by the REPL."""
    with StringIO() as buffer:
        _write(value, buffer)
        return buffer.getvalue()
