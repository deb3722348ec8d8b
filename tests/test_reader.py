import copy

import pytest
from hypothesis import given, strategies as st

from lispy.errors import ErrorKind, LispyTypeError
from lispy.reader.ast import AstNode
from lispy.reader.parser import parse
from lispy.reader.reader import read, read_source
from lispy.types.value import Error, Number, QExpr, SExpr, Symbol, render


def test_read_leaves():
    assert read(AstNode("expr|number|regex", "42")) == Number(42)
    assert read(AstNode("expr|number|regex", "-7")) == Number(-7)
    assert read(AstNode("expr|symbol|regex", "head")) == Symbol("head")


def test_read_root_is_sexpr():
    assert read_source("+ 1 {2 x}") == SExpr([
        Symbol("+"), Number(1), QExpr([Number(2), Symbol("x")]),
    ])


def test_read_nested_groups():
    assert read_source("(a {b (c)})") == SExpr([
        SExpr([Symbol("a"), QExpr([Symbol("b"), SExpr([Symbol("c")])])]),
    ])


def test_read_skips_delimiters_and_anchors():
    node = AstNode(">", "", [
        AstNode("regex"),
        AstNode("expr|qexpr|>", "", [AstNode("char", "{"), AstNode("char", "}")]),
        AstNode("regex"),
    ])
    assert read(node) == SExpr([QExpr()])


@pytest.mark.parametrize("text", ["9223372036854775808", "-9223372036854775809", "99999999999999999999"])
def test_out_of_range_number_is_an_error_value(text):
    result = read(AstNode("expr|number|regex", text))
    assert isinstance(result, Error)
    assert result.kind == ErrorKind.INVALID_NUMBER
    assert render(result) == "Error: invalid number"


def test_invalid_number_does_not_abort_the_read():
    result = read_source("+ 1 99999999999999999999 x")
    assert len(result) == 4
    assert isinstance(result.cells[2], Error)
    assert result.cells[3] == Symbol("x")


def test_number_range_limits():
    assert read_source("9223372036854775807").cells[0] == Number(2 ** 63 - 1)
    assert read_source("-9223372036854775808").cells[0] == Number(-(2 ** 63))


def test_invalid_number_evaluates_to_error(itp):
    assert render(itp.eval("+ 1 99999999999999999999")) == "Error: invalid number"


def test_read_does_not_mutate_tree():
    tree = parse("(def {x} 1) {a b}")
    snapshot = copy.deepcopy(tree)
    read(tree)
    assert tree == snapshot


def test_read_unknown_tag():
    with pytest.raises(LispyTypeError):
        read(AstNode("string", "abc"))


@given(st.integers(min_value=-(2 ** 63), max_value=2 ** 63 - 1))
def test_number_round_trip(n):
    source = str(n)
    assert render(read_source(source).cells[0]) == source


_SYMBOL_START = "abcxyzABCXYZ_+*/\\=<>!&"
_SYMBOL_REST = _SYMBOL_START + "-0123456789"


@given(st.text(alphabet=_SYMBOL_START, min_size=1, max_size=1),
       st.text(alphabet=_SYMBOL_REST, max_size=10))
def test_symbol_round_trip(first, rest):
    source = first + rest
    value = read_source(source).cells[0]
    assert isinstance(value, Symbol)
    assert render(value) == source


def test_read_source_too_deep_is_an_error_value():
    result = read_source("{" * 20000 + "}" * 20000)
    assert isinstance(result, Error)
    assert result.kind == ErrorKind.RECURSION_LIMIT
