"""Typing, line breaks and deletion."""
from __future__ import annotations

from typing import Optional

from rich_editor.editor.tree import (
    BlockLayout,
    Entry,
    block_path_of,
    document_end,
    document_start,
    end_of,
    replace_node,
    start_of,
)
from rich_editor.model.document_model import EditorState, empty_document
from rich_editor.model.elements import BlockKind, BlockNode, TextRun
from rich_editor.model.inline import BACKWARD, FORWARD, InlineContent, Segment
from rich_editor.model.selection import Point, Range
from rich_editor.utils.logger import get_logger
from rich_editor.utils.text_normalizer import TextNormalizer

LOGGER = get_logger(__name__)

_NORMALIZER = TextNormalizer(preserve_whitespace=True)

_HEADINGS = (BlockKind.HEADING_ONE, BlockKind.HEADING_TWO)


def select(state: EditorState, anchor: Point, focus: Optional[Point] = None) -> EditorState:
    """Place the selection. Points must address text runs of the document."""
    for point in (anchor, focus or anchor):
        node = state.document.node_at(point.path)
        if not isinstance(node, TextRun) or not 0 <= point.offset <= len(node.text):
            raise ValueError(f"{point} does not address a position inside a text run")
    return state.with_selection(Range(anchor, focus or anchor))


def select_all(state: EditorState) -> EditorState:
    document = state.document
    return state.with_selection(Range(document_start(document), document_end(document)))


def insert_text(state: EditorState, text: str) -> EditorState:
    """Type ``text`` at the cursor, replacing an expanded selection."""
    if state.selection is None:
        LOGGER.debug("insert_text ignored: editor is not focused")
        return state
    text = _NORMALIZER.normalize_text(text)
    if not text:
        return state
    pending = state.marks
    if not state.selection.is_collapsed:
        state = delete_fragment(state)

    document = state.document
    point = state.selection.anchor
    block_path = block_path_of(document, point.path)
    block = document.node_at(block_path)
    if not block.kind.is_text_block:
        return state

    content = InlineContent.from_block(block)
    cursor = content.track_path(point.path[len(block_path) :], point.offset, FORWARD)
    segment = content.segments[cursor.ordinal]
    if pending is None or pending == segment.run.marks:
        content.insert_text(cursor.ordinal, cursor.offset, text)
        caret = cursor
    else:
        boundary = content.split(cursor.ordinal, cursor.offset)
        content.insert(boundary, Segment(TextRun(text, pending), segment.link))
        caret = content.track(boundary, len(text), BACKWARD)
    content.normalize()
    document = replace_node(document, block_path, content.to_block(block))
    return state.with_document(document, Range.collapsed(content.point(block_path, caret)))


def insert_break(state: EditorState) -> EditorState:
    """Split the block at the cursor (Enter)."""
    if state.selection is None:
        LOGGER.debug("insert_break ignored: editor is not focused")
        return state
    if not state.selection.is_collapsed:
        state = delete_fragment(state)

    document = state.document
    point = state.selection.anchor
    block_path = block_path_of(document, point.path)
    layout = BlockLayout(document)
    index = layout.index_of(block_path)
    entry = layout.entries[index]

    if entry.block.kind.is_void:
        layout.insert(index + 1, Entry(BlockNode(BlockKind.PARAGRAPH, (TextRun(),))))
        document = layout.build()
        return state.with_document(document, Range.collapsed(start_of(document, layout.entries[index + 1].target)))

    block = entry.block
    content = InlineContent.from_block(block)
    cursor = content.track_path(point.path[len(block_path) :], point.offset, FORWARD)

    if block.kind is BlockKind.LIST_ITEM and content.is_empty:
        layout.lift(entry, block.with_kind(BlockKind.PARAGRAPH))
        document = layout.build()
        return state.with_document(document, state.selection.map(layout.remap_point))

    at_start = content.is_at_start(cursor) and not content.is_empty
    right = content.split_off(cursor.ordinal, cursor.offset)
    content.normalize()
    right.normalize()
    next_kind = block.kind
    if block.kind in _HEADINGS and not at_start:
        next_kind = BlockKind.PARAGRAPH
    entry.block = content.to_block(block)
    layout.insert(index + 1, Entry(right.to_block(block.with_kind(next_kind)), container=entry.container, group=entry.group))
    document = layout.build()
    return state.with_document(document, Range.collapsed(start_of(document, layout.entries[index + 1].target)))


def delete_fragment(state: EditorState) -> EditorState:
    """Remove the selected content and merge the blocks at its edges."""
    selection = state.selection
    if selection is None or selection.is_collapsed:
        return state

    document = state.document
    start, end = selection.edges()
    start_block = block_path_of(document, start.path)
    end_block = block_path_of(document, end.path)

    if start_block == end_block:
        block = document.node_at(start_block)
        if not block.kind.is_text_block:
            return state.with_selection(selection.collapse_to_start())
        content = InlineContent.from_block(block)
        lo = content.track_path(start.path[len(start_block) :], start.offset, BACKWARD)
        hi = content.track_path(end.path[len(end_block) :], end.offset, FORWARD)
        content.delete(lo, hi)
        content.normalize()
        document = replace_node(document, start_block, content.to_block(block))
        return state.with_document(document, Range.collapsed(content.point(start_block, lo)))

    layout = BlockLayout(document)
    first_index = layout.index_of(start_block)
    last_index = layout.index_of(end_block)
    first, last = layout.entries[first_index], layout.entries[last_index]

    tail = None
    if last.block.kind.is_text_block:
        tail_content = InlineContent.from_block(last.block)
        cut = tail_content.track_path(end.path[len(end_block) :], end.offset)
        tail = tail_content.split_off(cut.ordinal, cut.offset)

    if first.block.kind.is_text_block:
        content = InlineContent.from_block(first.block)
        lo = content.track_path(start.path[len(start_block) :], start.offset, BACKWARD)
        content.split_off(lo.ordinal, lo.offset)
        if tail is not None:
            content.append(tail)
        content.normalize()
        first.block = content.to_block(first.block)
        layout.remove(first_index + 1, last_index + 1)
        document = layout.build()
        return state.with_document(document, Range.collapsed(content.point(first.target, lo)))

    # The selection starts on a void: drop it with everything up to the end block.
    if tail is not None:
        tail.normalize()
        last.block = tail.to_block(last.block)
        layout.remove(first_index, last_index)
        document = layout.build()
        return state.with_document(document, Range.collapsed(start_of(document, last.target)))
    layout.remove(first_index, last_index + 1)
    return _rebuild_at(state, layout, first_index)


def delete_backward(state: EditorState) -> EditorState:
    """Backspace."""
    selection = state.selection
    if selection is None:
        LOGGER.debug("delete_backward ignored: editor is not focused")
        return state
    if not selection.is_collapsed:
        return delete_fragment(state)

    document = state.document
    point = selection.anchor
    block_path = block_path_of(document, point.path)
    layout = BlockLayout(document)
    index = layout.index_of(block_path)
    entry = layout.entries[index]

    if entry.block.kind.is_void:
        layout.remove(index, index + 1)
        return _rebuild_at(state, layout, index, prefer_previous=True)

    content = InlineContent.from_block(entry.block)
    cursor = content.track_path(point.path[len(block_path) :], point.offset, FORWARD)
    before = content.position_before(cursor)
    if before is not None:
        lo = content.track(before[0], before[1], BACKWARD)
        content.delete(lo, cursor)
        content.normalize()
        document = replace_node(document, block_path, content.to_block(entry.block))
        return state.with_document(document, Range.collapsed(content.point(block_path, lo)))

    if entry.block.kind is not BlockKind.PARAGRAPH:
        layout.lift(entry, entry.block.with_kind(BlockKind.PARAGRAPH))
        document = layout.build()
        return state.with_document(document, selection.map(layout.remap_point))

    if index == 0:
        return state
    previous = layout.entries[index - 1]
    if previous.block.kind.is_void:
        layout.remove(index - 1, index)
        document = layout.build()
        return state.with_document(document, selection.map(layout.remap_point))

    merged = InlineContent.from_block(previous.block)
    joint = merged.track_end(BACKWARD)
    merged.append(content)
    merged.normalize()
    previous.block = merged.to_block(previous.block)
    layout.remove(index, index + 1)
    document = layout.build()
    return state.with_document(document, Range.collapsed(merged.point(previous.target, joint)))


def clear(state: EditorState) -> EditorState:
    """Replace everything with the empty document."""
    if state.selection is None:
        LOGGER.debug("clear ignored: editor is not focused")
        return state
    document = empty_document()
    return state.with_document(document, Range.collapsed(document_start(document)))


def _rebuild_at(state: EditorState, layout: BlockLayout, index: int, prefer_previous: bool = False) -> EditorState:
    """Rebuild after removing blocks and put the cursor near ``index``."""
    if not layout.entries:
        return clear(state)
    document = layout.build()
    if prefer_previous and index > 0:
        caret = end_of(document, layout.entries[index - 1].target)
    elif index < len(layout.entries):
        caret = start_of(document, layout.entries[index].target)
    else:
        caret = end_of(document, layout.entries[-1].target)
    return state.with_document(document, Range.collapsed(caret))
