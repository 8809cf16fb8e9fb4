"""Aggregate values: the document tree and the editor state around it."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, Iterator, Optional, Tuple

from rich_editor.model.elements import BlockKind, BlockNode, Mark, Node, TextRun
from rich_editor.model.selection import Path, Range


@dataclass(frozen=True, slots=True)
class Document:
    """Ordered, never-empty sequence of top-level blocks."""

    blocks: Tuple[BlockNode, ...]

    def __post_init__(self) -> None:
        if not self.blocks:
            raise ValueError("A document holds at least one block")

    def node_at(self, path: Path) -> Node:
        """Return the node addressed by ``path``."""
        if not path:
            raise ValueError("The document root has no node representation")
        node: Node = self.blocks[path[0]]
        for index in path[1:]:
            if isinstance(node, TextRun):
                raise IndexError(f"Path {path} descends into a text run")
            node = node.children[index]
        return node

    def leaves(self) -> Iterator[Tuple[Path, TextRun]]:
        """Yield every text run with its path, in document order."""
        for index, block in enumerate(self.blocks):
            yield from _leaves(block, (index,))

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.blocks)


def _leaves(node: Node, path: Path) -> Iterator[Tuple[Path, TextRun]]:
    if isinstance(node, TextRun):
        yield path, node
        return
    for index, child in enumerate(node.children):
        yield from _leaves(child, path + (index,))


def empty_document() -> Document:
    """The canonical empty document: one paragraph holding one empty run."""
    return Document((BlockNode(BlockKind.PARAGRAPH, (TextRun(),)),))


@dataclass(frozen=True, slots=True)
class EditorState:
    """Document plus the session-scoped selection and pending marks."""

    document: Document
    selection: Optional[Range] = None
    marks: Optional[FrozenSet[Mark]] = None

    @classmethod
    def create(cls, document: Optional[Document] = None) -> "EditorState":
        return cls(document if document is not None else empty_document())

    @property
    def is_focused(self) -> bool:
        return self.selection is not None

    def with_document(self, document: Document, selection: Optional[Range]) -> "EditorState":
        return replace(self, document=document, selection=selection, marks=None)

    def with_selection(self, selection: Optional[Range]) -> "EditorState":
        return replace(self, selection=selection, marks=None)

    def with_marks(self, marks: Optional[FrozenSet[Mark]]) -> "EditorState":
        return replace(self, marks=marks)
