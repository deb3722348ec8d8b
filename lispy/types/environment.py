"""Runtime environment for Lispy.

An Environment maps symbol names to values. Bindings are by value: `bind`
stores a copy and `lookup` hands out a copy, so the environment never
shares a value with its callers. The `outer` link is a non-owning reference
to the scope a lambda body is called from.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Optional

from lispy.errors import ErrorKind, LispyTypeError
from lispy.types.value import Symbol, Value, make_error

logger = logging.getLogger(__name__)


def _key(name: Symbol | str) -> str:
    if isinstance(name, Symbol):
        return name.name
    if isinstance(name, str):
        return name
    raise LispyTypeError(f"Cannot bind {name!r}, expected a Symbol or a name")


class Environment:
    """Mapping from symbol names to owned values, with an optional outer scope."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, Value] = {}
        self.outer: Environment | None = outer

    def find(self, name: Symbol | str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        key = _key(name)
        env: Optional[Environment] = self
        while env is not None:
            if key in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol | str) -> Value:
        """Return a copy of the value bound to `name`.

        A miss is not raised: it comes back as an UnboundSymbol Error value.
        """
        key = _key(name)
        env = self.find(key)
        if env is None:
            return make_error("Unbound Symbol '%s'", key, kind=ErrorKind.UNBOUND_SYMBOL)
        return env.vars[key].copy()

    def bind(self, name: Symbol | str, value: Value) -> None:
        """Bind a copy of `value` to `name` in this scope, replacing any old binding.

        The caller keeps ownership of `value`.
        """
        key = _key(name)
        stored = value.copy()
        old = self.vars.get(key)
        if old is not None:
            old.destroy()
        self.vars[key] = stored
        logger.debug("bound %s", key)

    def duplicate(self) -> Environment:
        """Independent copy of this scope; the outer scope is shared, not copied."""
        env = Environment(outer=self.outer)
        for key, value in self.vars.items():
            env.vars[key] = value.copy()
        return env

    def destroy(self) -> None:
        for value in self.vars.values():
            value.destroy()
        self.vars.clear()

    def names(self) -> list[str]:
        return list(self.vars)

    def __contains__(self, name: Symbol | str) -> bool:
        return _key(name) in self.vars

    def __len__(self) -> int:
        return len(self.vars)

    def __eq__(self, other) -> bool:
        return isinstance(other, Environment) and self.vars == other.vars

    def _write_vars(self, buffer: StringIO) -> None:
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            chain = []
            env = self
            while env is not None:
                env_buf = StringIO()
                env._write_vars(env_buf)
                chain.append(env_buf.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
