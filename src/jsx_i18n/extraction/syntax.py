"""
Parsed source trees with in-place editing.

``SourceTree`` wraps a tree-sitter parse of a JSX/TSX file and offers the
three capabilities the scanner and transformer are built on: visiting nodes
by type, looking up a node's parent, and replacing node text. Replacements
are recorded as byte-range edits against the original source and applied by
``render()``; ``reparse()`` parses the rendered output so a rewritten file
can be traversed again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..utils.core.exceptions import ParseFailureError

logger = logging.getLogger(__name__)

NodeHandler = Callable[[Node], None]

# Files parsed with the plain TypeScript grammar; everything else uses TSX,
# which also accepts JavaScript with JSX.
TYPESCRIPT_EXTENSIONS = frozenset({".ts", ".mts", ".cts"})


@lru_cache(maxsize=None)
def get_language(name: str) -> Language:
    """Return the tree-sitter language for ``"tsx"`` or ``"typescript"``."""
    match name:
        case "typescript":
            return Language(tree_sitter_typescript.language_typescript())
        case "tsx":
            return Language(tree_sitter_typescript.language_tsx())
        case _:
            raise ValueError(f"Unsupported grammar: {name}")


def grammar_for(path: Path) -> str:
    """Pick the grammar for a file based on its extension."""
    return "typescript" if path.suffix.lower() in TYPESCRIPT_EXTENSIONS else "tsx"


@dataclass(frozen=True)
class Edit:
    """A pending replacement of ``source[start:end]``."""

    start: int
    end: int
    text: bytes
    order: int

    def overlaps(self, start: int, end: int) -> bool:
        if self.start == self.end:
            return start < self.start < end
        if start == end:
            return self.start < start < self.end
        return start < self.end and self.start < end


def _first_error(node: Node) -> Node | None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class SourceTree:
    """A parsed source file plus the edits made to it."""

    def __init__(self, source: bytes, path: Path, tree: Tree) -> None:
        self.source: bytes = source
        self.path: Path = path
        self.tree: Tree = tree
        self._edits: list[Edit] = []

    @classmethod
    def parse(cls, source: str | bytes, path: Path | str = Path("<memory>.tsx")) -> SourceTree:
        """
        Parse source code.

        Args:
            source: File content
            path: File path, used for grammar selection and error messages

        Raises:
            ParseFailureError: If the source is not UTF-8 or contains syntax errors
        """
        path = Path(path)
        if isinstance(source, str):
            data = source.encode("utf-8")
        else:
            data = source
            try:
                _ = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseFailureError(path, f"invalid UTF-8 at byte {e.start}") from e
        parser = Parser(get_language(grammar_for(path)))
        tree = parser.parse(data)

        if tree.root_node.has_error:
            error = _first_error(tree.root_node)
            if error is not None:
                row, column = error.start_point[0] + 1, error.start_point[1] + 1
                reason = f"syntax error at line {row}, column {column}"
            else:
                reason = "syntax error"
            raise ParseFailureError(path, reason)

        return cls(data, path, tree)

    @classmethod
    def from_file(cls, path: Path) -> SourceTree:
        """Read and parse a file; unreadable files are reported as parse failures."""
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ParseFailureError(path, str(e)) from e
        return cls.parse(data, path)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text_of(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def line_at(self, offset: int) -> int:
        """1-based line number of a byte offset."""
        return self.source.count(b"\n", 0, offset) + 1

    def line_of(self, node: Node) -> int:
        return node.start_point[0] + 1

    def parent_of(self, node: Node) -> Node | None:
        return node.parent

    def visit(self, handlers: Mapping[str, NodeHandler]) -> None:
        """
        Walk the tree once in document order, calling the handler registered
        for each node type. Nodes inside a replaced range are skipped.
        """
        stack: list[Node] = [self.root]
        while stack:
            node = stack.pop()
            if self._is_replaced(node):
                continue
            handler = handlers.get(node.type)
            if handler is not None:
                handler(node)
                if self._is_replaced(node):
                    continue
            stack.extend(reversed(node.children))

    def replace(self, node: Node, text: str) -> None:
        self.replace_range(node.start_byte, node.end_byte, text)

    def replace_range(self, start: int, end: int, text: str) -> None:
        """
        Replace ``source[start:end]`` (byte offsets) with text.

        Raises:
            ValueError: If the range overlaps an earlier edit
        """
        if not 0 <= start <= end <= len(self.source):
            raise ValueError(f"Edit range {start}:{end} is outside the source")
        for edit in self._edits:
            if edit.overlaps(start, end):
                raise ValueError(f"Edit {start}:{end} overlaps an earlier edit {edit.start}:{edit.end}")
        self._edits.append(Edit(start, end, text.encode("utf-8"), len(self._edits)))

    def insert(self, offset: int, text: str) -> None:
        self.replace_range(offset, offset, text)

    @property
    def edits(self) -> list[Edit]:
        return list(self._edits)

    @property
    def has_edits(self) -> bool:
        return bool(self._edits)

    def render(self) -> str:
        """Return the source with every recorded edit applied."""
        result = bytearray(self.source)
        for edit in sorted(self._edits, key=lambda e: (e.start, e.order), reverse=True):
            result[edit.start : edit.end] = edit.text
        return result.decode("utf-8")

    def reparse(self) -> SourceTree:
        """Parse the rendered output into a fresh tree without edits."""
        return SourceTree.parse(self.render(), self.path)

    def _is_replaced(self, node: Node) -> bool:
        for edit in self._edits:
            if edit.start < edit.end and edit.start <= node.start_byte and node.end_byte <= edit.end:
                return True
        return False
