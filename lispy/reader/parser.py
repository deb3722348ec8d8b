"""
  Lexer and parser for Lispy source text.

  Grammar:

      number : /-?[0-9]+/
      symbol : /[a-zA-Z0-9_+\\-*\\/\\\\=<>!&]+/
      sexpr  : '(' <expr>* ')'
      qexpr  : '{' <expr>* '}'
      expr   : <number> | <symbol> | <sexpr> | <qexpr>
      lispy  : /^/ <expr>* /$/

  The parser does not build values. It emits an AstNode tree (tag, contents,
  children) which lispy.reader.reader turns into Values.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from lispy.errors import LispySyntaxError
from lispy.reader.ast import AstNode


# Order matters: a number is tried before a symbol, so "-5" is a number
# while "-" and "-x" are symbols.
TOKEN_RE = re.compile(
    r"(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<lbrace>\{)"
    r"|(?P<rbrace>\})"
    r"|(?P<number>-?[0-9]+)"
    r"|(?P<symbol>[a-zA-Z0-9_+\-*/\\=<>!&]+)"
)

Token = tuple[Optional[str], Optional[str], Optional[int]]

_CLOSERS = {"lparen": "rparen", "lbrace": "rbrace"}
_GROUP_TAGS = {"lparen": "expr|sexpr|>", "lbrace": "expr|qexpr|>"}


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields (token_type, token_value, position) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise LispySyntaxError(f"Unexpected character {source[pos]!r}", pos)
        yield m.lastgroup, m.group(), pos
        pos = m.end()


class TokenStream:
    def __init__(self, token_iter: Iterator[Token]):
        self.tokens = iter(token_iter)
        self.buffer: list[Token] = []

    def peek(self) -> Token:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None, None
        return self.buffer[0]

    def advance(self) -> Token:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None, None))

    def parse_expr(self) -> AstNode | None:
        tok_type, tok_val, pos = self.peek()
        if tok_type is None:
            return None

        if tok_type in ("number", "symbol"):
            self.advance()
            return AstNode(f"expr|{tok_type}|regex", tok_val)

        if tok_type in _CLOSERS:
            return self._parse_group(tok_type)

        raise LispySyntaxError(f"Unexpected {tok_val!r}", pos)

    def _parse_group(self, open_type: str) -> AstNode:
        _, open_val, open_pos = self.advance()
        close_type = _CLOSERS[open_type]
        children = [AstNode("char", open_val)]
        while True:
            tok_type, tok_val, _ = self.peek()
            if tok_type is None:
                raise LispySyntaxError(f"Unmatched {open_val!r}", open_pos)
            if tok_type == close_type:
                self.advance()
                children.append(AstNode("char", tok_val))
                break
            children.append(self.parse_expr())
        return AstNode(_GROUP_TAGS[open_type], "", children)

    def parse_all(self) -> Iterator[AstNode]:
        while (node := self.parse_expr()) is not None:
            yield node

    def parse_program(self) -> AstNode:
        """Parse every expression into a single root node tagged '>'."""
        children = [AstNode("regex")]
        children.extend(self.parse_all())
        children.append(AstNode("regex"))
        return AstNode(">", "", children)


def parse(source: str) -> AstNode:
    return TokenStream(lex(source)).parse_program()
