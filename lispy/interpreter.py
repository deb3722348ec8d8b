from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, TextIO

from lispy import __version__
from lispy.builtin.env_builtin import register
from lispy.config import get_log_level, get_prelude_paths, get_prompt, get_recursion_limit
from lispy.errors import LispySyntaxError
from lispy.evaluation.evaluator import evaluate
from lispy.reader.reader import read_source
from lispy.types.environment import Environment
from lispy.types.value import Error, Value, render

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Reads and evaluates Lispy code against one top-level Environment.
    The environment, with the builtins registered, lives as long as the interpreter.
    """
    def __init__(self, prelude: str | None = None):
        self.env = Environment()
        register(self.env)

        if prelude:
            self.eval_prelude(prelude)

    def eval(self, code: str) -> Value:
        """Evaluate one line of input as a single S-expression.

        Raises LispySyntaxError when `code` does not parse.
        """
        expr = read_source(code)
        logger.debug("read %s", expr)
        return evaluate(self.env, expr)

    def eval_prelude(self, code: str) -> None:
        """Evaluate each top-level expression of `code` on its own."""
        root = read_source(code)
        if isinstance(root, Error):
            logger.warning("prelude: %s", render(root))
            return
        while root.cells:
            result = evaluate(self.env, root.pop(0))
            if isinstance(result, Error):
                logger.warning("prelude: %s", render(result))
            result.destroy()

    def load_prelude_files(self, paths: Iterable[Path]) -> None:
        for path in paths:
            logger.info("loading prelude %s", path)
            self.eval_prelude(Path(path).read_text(encoding='utf-8'))

    def repl(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        prompt: str | None = None,
    ) -> None:
        """Read-eval-print loop: one printed result per input line, `exit` to leave."""
        stdin = sys.stdin if stdin is None else stdin
        stdout = sys.stdout if stdout is None else stdout
        prompt = get_prompt() if prompt is None else prompt
        stdout.write(f"Lispy Version {__version__}\n")
        stdout.write("Type exit to exit\n\n")
        while True:
            stdout.write(prompt)
            stdout.flush()
            line = stdin.readline()
            if not line:
                stdout.write("\n")
                break
            line = line.rstrip("\n")
            if line.strip() == "exit":
                break
            try:
                result = self.eval(line)
            except LispySyntaxError as e:
                stdout.write(f"<stdin>: {e}\n")
                continue
            stdout.write(render(result) + "\n")
            result.destroy()


def main() -> int:
    logging.basicConfig(level=get_log_level())
    limit = get_recursion_limit()
    if limit is not None and limit > sys.getrecursionlimit():
        sys.setrecursionlimit(limit)

    itp = Interpreter()
    itp.load_prelude_files(get_prelude_paths())
    itp.repl()
    return 0


if __name__ == "__main__":
    sys.exit(main())
