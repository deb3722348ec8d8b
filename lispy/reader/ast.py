from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AstNode:
    """A node of the syntax tree produced by the parser.

    `tag` is a `|`-separated list of grammar rule names (``expr|number|regex``),
    `contents` holds the literal text of leaves, `children` the ordered sub-nodes.
    The root is tagged ``>``, delimiters ``char`` and the input anchors ``regex``.
    """
    tag: str
    contents: str = ""
    children: list[AstNode] = field(default_factory=list)
