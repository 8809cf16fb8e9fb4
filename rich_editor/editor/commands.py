"""Formatting and insertion commands.

Every command takes an :class:`EditorState` and returns a new one. A state
without a selection (editor not focused) is returned unchanged.
"""
from __future__ import annotations

from typing import Callable, FrozenSet, Iterator, List, Union

from rich_editor.editor.editing import delete_fragment
from rich_editor.editor.media import youtube_embed_url
from rich_editor.editor.tree import (
    BlockLayout,
    Entry,
    block_path_of,
    entries_between,
    replace_node,
    start_of,
    touched_blocks,
)
from rich_editor.model.document_model import Document, EditorState
from rich_editor.model.elements import (
    TOGGLEABLE_KINDS,
    Alignment,
    BlockKind,
    BlockNode,
    Mark,
    TextRun,
    image,
    video,
)
from rich_editor.model.inline import BACKWARD, FORWARD, InlineContent, PositionRef, Segment
from rich_editor.model.selection import Point, Range
from rich_editor.utils.logger import get_logger

LOGGER = get_logger(__name__)

InlineEdit = Callable[[InlineContent, PositionRef, PositionRef], None]


def _unfocused(command: str) -> None:
    LOGGER.debug("%s ignored: editor is not focused", command)


# ----------------------------------------------------------------------
# Marks


def covered_runs(document: Document, selection: Range) -> Iterator[TextRun]:
    """Text runs with at least one character inside the selection."""
    start, end = selection.edges()
    for path, run in document.leaves():
        if path < start.path:
            continue
        if path > end.path:
            break
        lo = start.offset if path == start.path else 0
        hi = end.offset if path == end.path else len(run.text)
        if hi > lo:
            yield run


def marks_at(document: Document, point: Point) -> FrozenSet[Mark]:
    node = document.node_at(point.path)
    if isinstance(node, TextRun):
        return node.marks
    return frozenset()


def active_marks(state: EditorState) -> FrozenSet[Mark]:
    """Marks a toolbar would show as active for the current selection."""
    selection = state.selection
    if selection is None:
        return frozenset()
    if selection.is_collapsed:
        if state.marks is not None:
            return state.marks
        return marks_at(state.document, selection.anchor)
    runs = list(covered_runs(state.document, selection))
    if not runs:
        return frozenset()
    common = set(runs[0].marks)
    for run in runs[1:]:
        common &= run.marks
    return frozenset(common)


def is_mark_active(document: Document, selection: Range, mark: Mark) -> bool:
    runs = list(covered_runs(document, selection))
    return bool(runs) and all(run.has_mark(mark) for run in runs)


def toggle_mark(state: EditorState, mark: Union[Mark, str]) -> EditorState:
    mark = Mark(mark)
    selection = state.selection
    if selection is None:
        _unfocused("toggle_mark")
        return state
    if selection.is_collapsed:
        current = state.marks if state.marks is not None else marks_at(state.document, selection.anchor)
        return state.with_marks(frozenset(current ^ {mark}))

    if next(covered_runs(state.document, selection), None) is None:
        LOGGER.debug("toggle_mark ignored: selection covers no text")
        return state
    add = not is_mark_active(state.document, selection, mark)

    def restyle(content: InlineContent, lo: PositionRef, hi: PositionRef) -> None:
        first = content.split(lo.ordinal, lo.offset)
        last = content.split(hi.ordinal, hi.offset)
        for index in range(first, last):
            if not content.segments[index].text:
                continue
            marks = content.segments[index].run.marks
            content.restyle(index, marks | {mark} if add else marks - {mark})

    return _edit_inline(state, restyle)


def _edit_inline(state: EditorState, edit: InlineEdit) -> EditorState:
    """Apply ``edit`` to the selected part of every touched text block."""
    document = state.document
    selection = state.selection
    start, end = selection.edges()
    start_block = block_path_of(document, start.path)
    end_block = block_path_of(document, end.path)
    new_start, new_end = start, end
    for block_path, block in touched_blocks(document, selection):
        if not block.kind.is_text_block:
            continue
        content = InlineContent.from_block(block)
        if block_path == start_block:
            lo = content.track_path(start.path[len(block_path) :], start.offset, FORWARD)
        else:
            lo = content.track_start()
        if block_path == end_block:
            hi = content.track_path(end.path[len(block_path) :], end.offset, BACKWARD)
        else:
            hi = content.track_end()
        edit(content, lo, hi)
        content.normalize()
        document = replace_node(document, block_path, content.to_block(block))
        if block_path == start_block:
            new_start = content.point(block_path, lo)
        if block_path == end_block:
            new_end = content.point(block_path, hi)
    return state.with_document(document, selection.with_edges(new_start, new_end))


# ----------------------------------------------------------------------
# Blocks


def is_block_active(state: EditorState, kind: Union[BlockKind, str]) -> bool:
    kind = BlockKind(kind)
    if state.selection is None:
        return False
    entries = _touched_text_entries(BlockLayout(state.document), state)
    return bool(entries) and _all_have_kind(entries, kind)


def _touched_text_entries(layout: BlockLayout, state: EditorState) -> List[Entry]:
    document = state.document
    first = block_path_of(document, state.selection.start.path)
    last = block_path_of(document, state.selection.end.path)
    return [entry for entry in entries_between(layout, first, last) if entry.block.kind.is_text_block]


def _all_have_kind(entries: List[Entry], kind: BlockKind) -> bool:
    if kind.is_list:
        return all(entry.list_kind is kind for entry in entries)
    return all(entry.block.kind is kind for entry in entries)


def toggle_block(state: EditorState, kind: Union[BlockKind, str]) -> EditorState:
    """Toggle the kind of the selected blocks, wrapping or unwrapping lists."""
    kind = BlockKind(kind)
    if kind not in TOGGLEABLE_KINDS:
        raise ValueError(f"{kind.value} cannot be toggled on a block")
    if state.selection is None:
        _unfocused("toggle_block")
        return state

    layout = BlockLayout(state.document)
    touched = _touched_text_entries(layout, state)
    if not touched:
        return state
    target = BlockKind.PARAGRAPH if _all_have_kind(touched, kind) else kind

    if not target.is_list:
        for entry in touched:
            layout.lift(entry, entry.block.with_kind(target))
    else:
        runs: List[List[int]] = []
        for entry in touched:
            index = layout.entries.index(entry)
            if runs and runs[-1][1] == index:
                runs[-1][1] = index + 1
            else:
                runs.append([index, index + 1])
        for start, stop in runs:
            group = layout.new_group()
            container = BlockNode(target, ())
            for entry in layout.entries[start:stop]:
                entry.block = entry.block.with_kind(BlockKind.LIST_ITEM)
                entry.group, entry.container = group, container
            layout.merge_lists_around(start, stop)

    document = layout.build()
    LOGGER.debug("toggle_block(%s) set %d block(s) to %s", kind.value, len(touched), target.value)
    return state.with_document(document, state.selection.map(layout.remap_point))


def set_alignment(state: EditorState, value: Union[Alignment, str]) -> EditorState:
    alignment = Alignment(value)
    if state.selection is None:
        _unfocused("set_alignment")
        return state
    document = state.document
    for block_path, block in touched_blocks(document, state.selection):
        document = replace_node(document, block_path, block.with_alignment(alignment))
    return state.with_document(document, state.selection)


# ----------------------------------------------------------------------
# Links and media


def insert_link(state: EditorState, url: str) -> EditorState:
    """Insert a link at the cursor, or turn the selected text into a link."""
    selection = state.selection
    if selection is None:
        _unfocused("insert_link")
        return state
    url = (url or "").strip()
    if not url:
        LOGGER.debug("insert_link ignored: empty url")
        return state

    if not selection.is_collapsed:

        def wrap(content: InlineContent, lo: PositionRef, hi: PositionRef) -> None:
            first = content.split(lo.ordinal, lo.offset)
            last = content.split(hi.ordinal, hi.offset)
            if first >= last:
                return
            link = content.new_link(url)
            for index in range(first, last):
                content.relink(index, link)

        wrapped = _edit_inline(state, wrap)
        return wrapped.with_selection(wrapped.selection.collapse_to_end())

    document = state.document
    point = selection.anchor
    block_path = block_path_of(document, point.path)
    block = document.node_at(block_path)
    if not block.kind.is_text_block:
        return state
    content = InlineContent.from_block(block)
    cursor = content.track_path(point.path[len(block_path) :], point.offset)
    boundary = content.split(cursor.ordinal, cursor.offset)
    content.insert(boundary, Segment(TextRun(url), content.new_link(url)))
    inserted = content.track(boundary, len(url), BACKWARD)
    content.normalize()
    document = replace_node(document, block_path, content.to_block(block))
    # Normalization guarantees a text run right after every link.
    caret = content.point_at(block_path, inserted.ordinal + 1, 0)
    return state.with_document(document, Range.collapsed(caret))


def insert_image(state: EditorState, url: str) -> EditorState:
    url = (url or "").strip()
    if not url:
        LOGGER.debug("insert_image ignored: empty url")
        return state
    return _insert_void(state, image(url), "insert_image")


def insert_video(state: EditorState, url: str) -> EditorState:
    """Embed a YouTube video; unrecognized URLs are ignored."""
    embed = youtube_embed_url((url or "").strip())
    if embed is None:
        LOGGER.debug("insert_video ignored: %r is not a YouTube URL", url)
        return state
    return _insert_void(state, video(embed), "insert_video")


def _insert_void(state: EditorState, node: BlockNode, command: str) -> EditorState:
    if state.selection is None:
        _unfocused(command)
        return state
    if not state.selection.is_collapsed:
        state = delete_fragment(state)

    document = state.document
    point = state.selection.anchor
    block_path = block_path_of(document, point.path)
    layout = BlockLayout(document)
    index = layout.index_of(block_path)
    entry = layout.entries[index]
    void_entry = Entry(node)

    if entry.block.kind.is_void:
        layout.insert(index + 1, void_entry)
        follow = index + 2
    else:
        content = InlineContent.from_block(entry.block)
        cursor = content.track_path(point.path[len(block_path) :], point.offset)
        if content.is_at_start(cursor) and not content.is_empty:
            layout.insert(index, void_entry)
            follow = index + 1
        elif content.is_at_end(cursor):
            layout.insert(index + 1, void_entry)
            follow = index + 2
        else:
            right = content.split_off(cursor.ordinal, cursor.offset)
            content.normalize()
            right.normalize()
            entry.block = content.to_block(entry.block)
            tail = Entry(right.to_block(entry.block), container=entry.container, group=entry.group)
            layout.insert(index + 1, void_entry)
            layout.insert(index + 2, tail)
            follow = index + 2

    if follow >= len(layout.entries):
        layout.insert(follow, Entry(BlockNode(BlockKind.PARAGRAPH, (TextRun(),))))
    document = layout.build()
    caret = start_of(document, layout.entries[follow].target)
    return state.with_document(document, Range.collapsed(caret))
