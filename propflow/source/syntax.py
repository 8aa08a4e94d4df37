"""Tree-sitter syntax model for TypeScript and JSX files.

A SyntaxModel is one parsed file: its path, the exact text that was parsed and
the resulting tree. Models are never mutated; re-parsing produces a new one.
"""

import logging
from pathlib import PurePath
from typing import Iterable, Iterator, Optional

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

TSX_LANGUAGE = Language(tstypescript.language_tsx())
TS_LANGUAGE = Language(tstypescript.language_typescript())

# Plain .ts files allow `<T>expr` casts, which the TSX grammar reads as tags
_TS_SUFFIXES = {".ts", ".mts", ".cts"}


def language_for(path: str) -> Language:
    """Pick the grammar for a file by its extension."""
    if PurePath(path).suffix.lower() in _TS_SUFFIXES:
        return TS_LANGUAGE
    return TSX_LANGUAGE


class SyntaxModel:
    """One source file's parsed syntax tree."""

    def __init__(self, path: str, text: str, tree: Tree):
        self.path = path
        self.text = text
        self.tree = tree

    @classmethod
    def parse(cls, path: str, text: str) -> "SyntaxModel":
        """Parse text as the contents of path."""
        parser = Parser(language_for(path))
        tree = parser.parse(text.encode("utf-8"))
        model = cls(path, text, tree)
        if model.has_errors:
            logger.debug(f"Syntax errors in {path}")
        return model

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        """True when the parser had to recover from malformed input."""
        return self.root.has_error

    @staticmethod
    def text_of(node: Optional[Node]) -> str:
        """Source text covered by a node ("" for None)."""
        if node is None or node.text is None:
            return ""
        return node.text.decode("utf-8", errors="replace")

    @staticmethod
    def line_of(node: Node) -> int:
        """1-based line where a node starts."""
        return node.start_point[0] + 1

    def walk(self, node: Optional[Node] = None, types: Optional[Iterable[str]] = None) -> Iterator[Node]:
        """Yield nodes in document order (pre-order).

        Args:
            node: Subtree to walk (defaults to the whole file).
            types: When given, only nodes of these types are yielded.
        """
        wanted = set(types) if types is not None else None
        stack = [node if node is not None else self.root]
        while stack:
            current = stack.pop()
            if wanted is None or current.type in wanted:
                yield current
            stack.extend(reversed(current.children))

    def line_at(self, offset: int) -> int:
        """1-based line of a character offset into text."""
        return self.text.count("\n", 0, offset) + 1

    def __repr__(self) -> str:
        return f"SyntaxModel({self.path!r})"
