import logging
import sys
from io import StringIO

import pytest

from lispy import config
from lispy.errors import LispySyntaxError
from lispy.interpreter import Interpreter, main
from lispy.types.value import render


def test_eval_one_line_is_one_expression(itp):
    assert render(itp.eval("+ 1 2")) == "3"
    assert render(itp.eval("5")) == "5"
    assert render(itp.eval("")) == "()"


def test_eval_syntax_error(itp):
    with pytest.raises(LispySyntaxError):
        itp.eval("(+ 1 2")


def test_environment_persists_between_calls(itp):
    itp.eval("def {x} 5")
    assert render(itp.eval("* x 2")) == "10"


def test_prelude_evaluates_each_expression():
    itp = Interpreter(prelude="(def {a} 1) (def {b} 2) (/ 1 0)")
    assert render(itp.eval("+ a b")) == "3"


def test_load_prelude_files(tmp_path):
    p = tmp_path / "prelude.lspy"
    p.write_text("(def {double} (\\ {x} {* 2 x}))\n", encoding="utf-8")
    itp = Interpreter()
    itp.load_prelude_files([p])
    assert render(itp.eval("double 21")) == "42"


def test_repl_session(itp):
    stdin = StringIO("+ 1 2\ndef {x} 5\nx\n(1\nhead {}\nexit\nx\n")
    stdout = StringIO()
    itp.repl(stdin, stdout, prompt="> ")
    out = stdout.getvalue()
    assert out.startswith("Lispy Version 0.0.0.0.7\nType exit to exit\n\n")
    lines = out.split("> ")[1:]
    assert lines == [
        "3\n",
        "()\n",
        "5\n",
        "<stdin>: Unmatched '(' at position 0\n",
        "Error: Function 'head' passed {} for argument 0.\n",
        "",
    ]


def test_repl_survives_deeply_nested_line(itp):
    stdout = StringIO()
    stdin = StringIO("(" * 20000 + ")" * 20000 + "\n+ 1 2\nexit\n")
    itp.repl(stdin, stdout, prompt="> ")
    lines = stdout.getvalue().split("> ")[1:]
    assert lines == ["Error: Recursion limit exceeded\n", "3\n", ""]


def test_prelude_too_deep_is_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        itp = Interpreter(prelude="(" * 20000 + ")" * 20000)
    assert "Recursion limit exceeded" in caplog.text
    assert render(itp.eval("+ 1 2")) == "3"


def test_repl_stops_at_end_of_input(itp):
    stdout = StringIO()
    itp.repl(StringIO("list 1\n"), stdout, prompt="> ")
    assert stdout.getvalue().endswith("> {1}\n> \n")


def test_config_defaults(monkeypatch):
    for var in ("LISPY_PROMPT", "LISPY_LOG_LEVEL", "LISPY_RECURSION_LIMIT", "LISPY_PRELUDE_PATH"):
        monkeypatch.delenv(var, raising=False)
    assert config.get_prompt() == "lispy> "
    assert config.get_log_level() == logging.WARNING
    assert config.get_recursion_limit() is None
    assert config.get_prelude_paths() == []


def test_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("LISPY_PROMPT", ">> ")
    monkeypatch.setenv("LISPY_LOG_LEVEL", "debug")
    monkeypatch.setenv("LISPY_RECURSION_LIMIT", "5000")
    monkeypatch.setenv("LISPY_PRELUDE_PATH", str(tmp_path / "a.lspy"))
    assert config.get_prompt() == ">> "
    assert config.get_log_level() == logging.DEBUG
    assert config.get_recursion_limit() == 5000
    assert config.get_prelude_paths() == [tmp_path / "a.lspy"]


@pytest.mark.parametrize("raw", ["abc", "-3", "0"])
def test_config_ignores_bad_recursion_limit(monkeypatch, raw):
    monkeypatch.setenv("LISPY_RECURSION_LIMIT", raw)
    assert config.get_recursion_limit() is None


def test_config_unknown_log_level(monkeypatch):
    monkeypatch.setenv("LISPY_LOG_LEVEL", "chatty")
    assert config.get_log_level() == logging.WARNING


def test_main(monkeypatch, capsys, tmp_path):
    prelude = tmp_path / "p.lspy"
    prelude.write_text("(def {seven} 7)", encoding="utf-8")
    monkeypatch.setenv("LISPY_PRELUDE_PATH", str(prelude))
    monkeypatch.setenv("LISPY_PROMPT", "$ ")
    monkeypatch.setattr(sys, "stdin", StringIO("seven\nexit\n"))
    assert main() == 0
    assert "$ 7\n" in capsys.readouterr().out
