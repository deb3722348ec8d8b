import pytest

from lispy.builtin.env_builtin import register
from lispy.interpreter import Interpreter
from lispy.types.environment import Environment


@pytest.fixture
def env():
    """Fresh environment with builtins loaded."""
    e = Environment()
    register(e)
    return e


@pytest.fixture
def itp():
    """Fresh interpreter; each test gets its own top-level environment."""
    return Interpreter()
