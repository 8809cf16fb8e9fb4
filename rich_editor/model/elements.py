"""Node types that make up a rich document tree."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple, Union


class Mark(str, Enum):
    """Inline style flags a text run may carry."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"


class Alignment(str, Enum):
    """Horizontal alignment of a block. Absent means left."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BlockKind(str, Enum):
    """Closed set of element kinds."""

    PARAGRAPH = "paragraph"
    HEADING_ONE = "heading-one"
    HEADING_TWO = "heading-two"
    BLOCKQUOTE = "blockquote"
    BULLETED_LIST = "bulleted-list"
    NUMBERED_LIST = "numbered-list"
    LIST_ITEM = "list-item"
    IMAGE = "image"
    LINK = "link"
    VIDEO = "video"

    @property
    def is_text_block(self) -> bool:
        return self in TEXT_BLOCK_KINDS

    @property
    def is_list(self) -> bool:
        return self in LIST_KINDS

    @property
    def is_void(self) -> bool:
        return self in VOID_KINDS

    @property
    def is_inline(self) -> bool:
        return self in INLINE_KINDS

    @property
    def requires_url(self) -> bool:
        return self in VOID_KINDS or self in INLINE_KINDS


TEXT_BLOCK_KINDS: FrozenSet[BlockKind] = frozenset(
    {
        BlockKind.PARAGRAPH,
        BlockKind.HEADING_ONE,
        BlockKind.HEADING_TWO,
        BlockKind.BLOCKQUOTE,
        BlockKind.LIST_ITEM,
    }
)
LIST_KINDS: FrozenSet[BlockKind] = frozenset({BlockKind.BULLETED_LIST, BlockKind.NUMBERED_LIST})
VOID_KINDS: FrozenSet[BlockKind] = frozenset({BlockKind.IMAGE, BlockKind.VIDEO})
INLINE_KINDS: FrozenSet[BlockKind] = frozenset({BlockKind.LINK})

# Kinds accepted by toggle_block.
TOGGLEABLE_KINDS: FrozenSet[BlockKind] = frozenset(
    {
        BlockKind.PARAGRAPH,
        BlockKind.HEADING_ONE,
        BlockKind.HEADING_TWO,
        BlockKind.BLOCKQUOTE,
        BlockKind.BULLETED_LIST,
        BlockKind.NUMBERED_LIST,
    }
)


def _check_classification() -> None:
    groups = (TEXT_BLOCK_KINDS, LIST_KINDS, VOID_KINDS, INLINE_KINDS)
    for kind in BlockKind:
        owners = sum(1 for group in groups if kind in group)
        if owners != 1:
            raise RuntimeError(f"Block kind {kind.value!r} must belong to exactly one group, found {owners}")


_check_classification()


@dataclass(frozen=True, slots=True)
class TextRun:
    """Leaf node: a string plus the marks applied to it."""

    text: str = ""
    marks: FrozenSet[Mark] = frozenset()

    def has_mark(self, mark: Mark) -> bool:
        return mark in self.marks

    def with_text(self, text: str) -> "TextRun":
        return replace(self, text=text)

    def with_marks(self, marks: Iterable[Mark]) -> "TextRun":
        return replace(self, marks=frozenset(marks))


@dataclass(frozen=True, slots=True)
class BlockNode:
    """Element node. Text blocks and links hold inline children, lists hold list-items."""

    kind: BlockKind
    children: Tuple["Node", ...] = (TextRun(),)
    alignment: Optional[Alignment] = None
    url: Optional[str] = None

    def with_children(self, children: Iterable["Node"]) -> "BlockNode":
        return replace(self, children=tuple(children))

    def with_kind(self, kind: BlockKind) -> "BlockNode":
        return replace(self, kind=kind)

    def with_alignment(self, alignment: Optional[Alignment]) -> "BlockNode":
        return replace(self, alignment=alignment)

    @property
    def text(self) -> str:
        """Concatenated text of every run below this node."""
        parts = []
        for child in self.children:
            parts.append(child.text)
        return "".join(parts)


Node = Union[BlockNode, TextRun]


def text(value: str = "", *marks: Union[Mark, str]) -> TextRun:
    return TextRun(value, frozenset(Mark(mark) for mark in marks))


def paragraph(*children: Node, alignment: Optional[Alignment] = None) -> BlockNode:
    return BlockNode(BlockKind.PARAGRAPH, tuple(children) or (TextRun(),), alignment)


def heading_one(*children: Node) -> BlockNode:
    return BlockNode(BlockKind.HEADING_ONE, tuple(children) or (TextRun(),))


def heading_two(*children: Node) -> BlockNode:
    return BlockNode(BlockKind.HEADING_TWO, tuple(children) or (TextRun(),))


def blockquote(*children: Node) -> BlockNode:
    return BlockNode(BlockKind.BLOCKQUOTE, tuple(children) or (TextRun(),))


def list_item(*children: Node) -> BlockNode:
    return BlockNode(BlockKind.LIST_ITEM, tuple(children) or (TextRun(),))


def bulleted_list(*items: BlockNode) -> BlockNode:
    return BlockNode(BlockKind.BULLETED_LIST, tuple(items))


def numbered_list(*items: BlockNode) -> BlockNode:
    return BlockNode(BlockKind.NUMBERED_LIST, tuple(items))


def link(url: str, *children: TextRun) -> BlockNode:
    return BlockNode(BlockKind.LINK, tuple(children) or (TextRun(url),), url=url)


def image(url: str) -> BlockNode:
    return BlockNode(BlockKind.IMAGE, (TextRun(),), url=url)


def video(url: str) -> BlockNode:
    return BlockNode(BlockKind.VIDEO, (TextRun(),), url=url)
