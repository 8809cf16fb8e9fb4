"""Addressing helpers over the immutable document tree.

Edits copy the path from the root to the changed node and share every other
subtree. Structural edits (lifting list items, splitting blocks, removing
blocks) go through :class:`BlockLayout`, a flat view of the leaf blocks of the
document with their list membership.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from rich_editor.model.document_model import Document, empty_document
from rich_editor.model.elements import BlockNode, Node, TextRun
from rich_editor.model.selection import Path, Point, Range


def replace_node(document: Document, path: Path, node: Node) -> Document:
    """Return a copy of ``document`` with the node at ``path`` replaced."""
    blocks = list(document.blocks)
    blocks[path[0]] = _replace_in(blocks[path[0]], path[1:], node)
    return Document(tuple(blocks))


def _replace_in(parent: Node, path: Path, node: Node) -> Node:
    if not path:
        return node
    if isinstance(parent, TextRun):
        raise IndexError("Cannot descend into a text run")
    children = list(parent.children)
    children[path[0]] = _replace_in(children[path[0]], path[1:], node)
    return parent.with_children(children)


def block_path_of(document: Document, path: Path) -> Path:
    """Path of the text block or void holding the text run at ``path``."""
    top = document.blocks[path[0]]
    if top.kind.is_list:
        return tuple(path[:2])
    return tuple(path[:1])


def leaf_blocks(document: Document) -> Iterator[Tuple[Path, BlockNode]]:
    """Yield text blocks and voids in document order."""
    for index, block in enumerate(document.blocks):
        if block.kind.is_list:
            for item_index, item in enumerate(block.children):
                yield (index, item_index), item
        else:
            yield (index,), block


def touched_blocks(document: Document, selection: Range) -> List[Tuple[Path, BlockNode]]:
    """Text blocks and voids intersecting the selection."""
    first = block_path_of(document, selection.start.path)
    last = block_path_of(document, selection.end.path)
    return [(path, block) for path, block in leaf_blocks(document) if first <= path <= last]


def first_leaf_path(node: Node) -> Path:
    path: List[int] = []
    while not isinstance(node, TextRun):
        path.append(0)
        node = node.children[0]
    return tuple(path)


def last_leaf_path(node: Node) -> Tuple[Path, TextRun]:
    path: List[int] = []
    while not isinstance(node, TextRun):
        path.append(len(node.children) - 1)
        node = node.children[-1]
    return tuple(path), node


def start_of(document: Document, block_path: Path) -> Point:
    block = document.node_at(block_path)
    return Point(tuple(block_path) + first_leaf_path(block), 0)


def end_of(document: Document, block_path: Path) -> Point:
    block = document.node_at(block_path)
    relative, run = last_leaf_path(block)
    return Point(tuple(block_path) + relative, len(run.text))


def document_start(document: Document) -> Point:
    return start_of(document, (0,) if not document.blocks[0].kind.is_list else (0, 0))


def document_end(document: Document) -> Point:
    last = len(document.blocks) - 1
    block = document.blocks[last]
    if block.kind.is_list:
        return end_of(document, (last, len(block.children) - 1))
    return end_of(document, (last,))


@dataclass(slots=True, eq=False)
class Entry:
    """One text block or void of a :class:`BlockLayout`.

    ``group`` identifies the list instance the block belongs to and
    ``container`` carries that list's kind and attributes. ``target`` is the
    block path assigned by the last :meth:`BlockLayout.build`.
    """

    block: BlockNode
    source: Optional[Path] = None
    container: Optional[BlockNode] = None
    group: Optional[int] = None
    target: Optional[Path] = None

    @property
    def list_kind(self):
        return self.container.kind if self.container is not None else None


class BlockLayout:
    """Flat, mutable list of the leaf blocks of a document."""

    def __init__(self, document: Document) -> None:
        self._document = document
        self.entries: List[Entry] = []
        for index, block in enumerate(document.blocks):
            if block.kind.is_list:
                for item_index, item in enumerate(block.children):
                    self.entries.append(Entry(item, (index, item_index), block, index))
            else:
                self.entries.append(Entry(block, (index,)))
        self._next_group = len(document.blocks)
        self._by_source: Dict[Path, Entry] = {entry.source: entry for entry in self.entries}

    def index_of(self, block_path: Path) -> int:
        return self.entries.index(self._by_source[tuple(block_path)])

    def new_group(self) -> int:
        group = self._next_group
        self._next_group += 1
        return group

    def insert(self, index: int, entry: Entry) -> None:
        self.entries.insert(index, entry)

    def remove(self, start: int, stop: int) -> None:
        del self.entries[start:stop]

    def lift(self, entry: Entry, block: BlockNode) -> None:
        """Take an entry out of its list, replacing its block."""
        entry.block = block
        entry.container = None
        entry.group = None

    def merge_lists_around(self, start: int, stop: int) -> None:
        """Join the list covering ``entries[start:stop]`` with same-kind neighbours."""
        entries = self.entries
        group, container = entries[start].group, entries[start].container
        if group is None or container is None:
            return
        if start > 0:
            previous = entries[start - 1]
            if previous.group is not None and previous.list_kind is container.kind:
                for entry in entries[start:stop]:
                    entry.group, entry.container = previous.group, previous.container
                group, container = previous.group, previous.container
        index = stop
        if index < len(entries) and entries[index].group is not None and entries[index].group != group:
            if entries[index].list_kind is container.kind:
                absorbed = entries[index].group
                while index < len(entries) and entries[index].group == absorbed:
                    entries[index].group, entries[index].container = group, container
                    index += 1

    def build(self) -> Document:
        """Rebuild the document, grouping consecutive list entries into lists."""
        blocks: List[BlockNode] = []
        entries = self.entries
        index = 0
        while index < len(entries):
            entry = entries[index]
            if entry.group is None:
                entry.target = (len(blocks),)
                blocks.append(entry.block)
                index += 1
                continue
            position = len(blocks)
            items: List[BlockNode] = []
            while index < len(entries) and entries[index].group == entry.group:
                entries[index].target = (position, len(items))
                items.append(entries[index].block)
                index += 1
            blocks.append(entry.container.with_children(items))
        if not blocks:
            return empty_document()
        return Document(tuple(blocks))

    def remap_point(self, point: Point) -> Point:
        """Map a point of the original document into the rebuilt one.

        Only valid for points inside blocks whose inline content did not change.
        """
        source = block_path_of(self._document, point.path)
        entry = self._by_source.get(source)
        if entry is None or entry.target is None:
            raise KeyError(f"Block {source} is no longer part of the document")
        return Point(entry.target + point.path[len(source) :], point.offset)


def entries_between(layout: BlockLayout, first: Path, last: Path) -> Sequence[Entry]:
    return layout.entries[layout.index_of(first) : layout.index_of(last) + 1]
