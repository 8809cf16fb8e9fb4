"""Flat, editable view of the inline content of a text block.

A text block holds text runs and links, and links hold text runs. Editing
works on a flat list of segments (one per text run) where each segment
remembers the link it belongs to. Positions inside the content are
``(ordinal, offset)`` pairs; :class:`PositionRef` objects registered with
:meth:`InlineContent.track` are kept up to date by every edit, so callers can
map a cursor through splits, merges and deletions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from rich_editor.model.elements import BlockKind, BlockNode, Mark, Node, TextRun
from rich_editor.model.selection import Path, Point

FORWARD = "forward"
BACKWARD = "backward"


@dataclass(frozen=True, slots=True)
class LinkRef:
    """Identity of one link within a block."""

    token: int
    url: str


@dataclass(frozen=True, slots=True)
class Segment:
    run: TextRun
    link: Optional[LinkRef] = None

    @property
    def text(self) -> str:
        return self.run.text


class PositionRef:
    """Mutable position that follows the content through edits.

    ``affinity`` decides which side of an insertion or split a position
    sitting exactly on the boundary ends up on.
    """

    __slots__ = ("ordinal", "offset", "affinity")

    def __init__(self, ordinal: int, offset: int, affinity: str = FORWARD) -> None:
        self.ordinal = ordinal
        self.offset = offset
        self.affinity = affinity

    def __repr__(self) -> str:
        return f"PositionRef({self.ordinal}, {self.offset}, {self.affinity})"


class InlineContent:
    """Segments of one text block plus the positions tracked inside them."""

    def __init__(self, segments: Iterable[Segment] = (), next_token: int = 0) -> None:
        self.segments: List[Segment] = list(segments) or [Segment(TextRun())]
        self._refs: List[PositionRef] = []
        self._next_token = next_token
        self._source_paths: List[Path] = []

    @classmethod
    def from_block(cls, block: BlockNode) -> "InlineContent":
        segments: List[Segment] = []
        paths: List[Path] = []
        for index, child in enumerate(block.children):
            if isinstance(child, TextRun):
                segments.append(Segment(child))
                paths.append((index,))
                continue
            if child.kind is not BlockKind.LINK:
                raise ValueError(f"{child.kind.value} cannot appear inside {block.kind.value}")
            ref = LinkRef(index, child.url or "")
            for inner, run in enumerate(child.children):
                if not isinstance(run, TextRun):
                    raise ValueError("Links hold text runs only")
                segments.append(Segment(run, ref))
                paths.append((index, inner))
        content = cls(segments, next_token=len(block.children))
        if segments:
            content._source_paths = paths
        else:
            content._source_paths = [(0,)]
        return content

    # ------------------------------------------------------------------
    # Queries

    def __len__(self) -> int:
        return len(self.segments)

    def length(self, ordinal: int) -> int:
        return len(self.segments[ordinal].text)

    @property
    def is_empty(self) -> bool:
        return all(not segment.text for segment in self.segments)

    def is_at_start(self, ref: PositionRef) -> bool:
        if ref.offset:
            return False
        return all(not segment.text for segment in self.segments[: ref.ordinal])

    def is_at_end(self, ref: PositionRef) -> bool:
        if ref.offset < self.length(ref.ordinal):
            return False
        return all(not segment.text for segment in self.segments[ref.ordinal + 1 :])

    def marks_at(self, ref: PositionRef) -> FrozenSet[Mark]:
        return self.segments[ref.ordinal].run.marks

    def position_before(self, ref: PositionRef) -> Optional[Tuple[int, int]]:
        """Position one character before ``ref``, or None at the block start."""
        if ref.offset > 0:
            return ref.ordinal, ref.offset - 1
        for ordinal in range(ref.ordinal - 1, -1, -1):
            length = self.length(ordinal)
            if length:
                return ordinal, length - 1
        return None

    # ------------------------------------------------------------------
    # Position tracking

    def track(self, ordinal: int, offset: int, affinity: str = FORWARD) -> PositionRef:
        ordinal = max(0, min(ordinal, len(self.segments) - 1))
        offset = max(0, min(offset, self.length(ordinal)))
        ref = PositionRef(ordinal, offset, affinity)
        self._refs.append(ref)
        return ref

    def track_path(self, relative_path: Path, offset: int, affinity: str = FORWARD) -> PositionRef:
        """Track a position given by a leaf path relative to the block."""
        try:
            ordinal = self._source_paths.index(tuple(relative_path))
        except ValueError:
            raise ValueError(f"No text run at relative path {relative_path}") from None
        return self.track(ordinal, offset, affinity)

    def track_start(self) -> PositionRef:
        return self.track(0, 0, FORWARD)

    def track_end(self, affinity: str = BACKWARD) -> PositionRef:
        last = len(self.segments) - 1
        return self.track(last, self.length(last), affinity)

    # ------------------------------------------------------------------
    # Primitive edits

    def split(self, ordinal: int, offset: int) -> int:
        """Make a segment boundary at the position and return its index."""
        if offset <= 0:
            return ordinal
        segment = self.segments[ordinal]
        if offset >= len(segment.text):
            return ordinal + 1
        left = Segment(segment.run.with_text(segment.text[:offset]), segment.link)
        right = Segment(segment.run.with_text(segment.text[offset:]), segment.link)
        self.segments[ordinal : ordinal + 1] = [left, right]
        for ref in self._refs:
            if ref.ordinal > ordinal:
                ref.ordinal += 1
            elif ref.ordinal == ordinal:
                if ref.offset > offset or (ref.offset == offset and ref.affinity == FORWARD):
                    ref.ordinal += 1
                    ref.offset -= offset
        return ordinal + 1

    def insert(self, index: int, segment: Segment) -> None:
        self.segments.insert(index, segment)
        for ref in self._refs:
            if ref.ordinal >= index:
                ref.ordinal += 1

    def insert_text(self, ordinal: int, offset: int, value: str) -> None:
        segment = self.segments[ordinal]
        text = segment.text[:offset] + value + segment.text[offset:]
        self.segments[ordinal] = Segment(segment.run.with_text(text), segment.link)
        for ref in self._refs:
            if ref.ordinal != ordinal:
                continue
            if ref.offset > offset or (ref.offset == offset and ref.affinity == FORWARD):
                ref.offset += len(value)

    def restyle(self, index: int, marks: Iterable[Mark]) -> None:
        segment = self.segments[index]
        self.segments[index] = Segment(segment.run.with_marks(marks), segment.link)

    def relink(self, index: int, link: Optional[LinkRef]) -> None:
        self.segments[index] = Segment(self.segments[index].run, link)

    def new_link(self, url: str) -> LinkRef:
        ref = LinkRef(self._next_token, url)
        self._next_token += 1
        return ref

    def delete(self, lo: PositionRef, hi: PositionRef) -> None:
        """Remove the text between two tracked positions."""
        first = self.split(lo.ordinal, lo.offset)
        last = self.split(hi.ordinal, hi.offset)
        self._remove_span(first, last)

    def split_off(self, ordinal: int, offset: int) -> "InlineContent":
        """Cut the content at the position and return the right-hand part.

        Positions tracked in the right-hand part stop being tracked, except
        one sitting exactly on the cut, which stays at the end of the left part.
        """
        boundary = self.split(ordinal, offset)
        right = InlineContent(self.segments[boundary:], next_token=self._next_token)
        left = self.segments[:boundary]
        if not left:
            marks = self.segments[0].run.marks if self.segments else frozenset()
            left = [Segment(TextRun("", marks))]
        kept: List[PositionRef] = []
        for ref in self._refs:
            if ref.ordinal < boundary:
                kept.append(ref)
            elif ref.ordinal == boundary and ref.offset == 0:
                if boundary > 0:
                    ref.ordinal, ref.offset = boundary - 1, len(left[boundary - 1].text)
                else:
                    ref.ordinal, ref.offset = 0, 0
                kept.append(ref)
        self.segments = left
        self._refs = kept
        return right

    def append(self, other: "InlineContent") -> int:
        """Append another block's content; returns the ordinal where it starts."""
        start = len(self.segments)
        shift = self._next_token
        for segment in other.segments:
            link = segment.link
            if link is not None:
                link = LinkRef(link.token + shift, link.url)
            self.segments.append(Segment(segment.run, link))
        self._next_token += other._next_token
        return start

    # ------------------------------------------------------------------
    # Normalization

    def normalize(self) -> None:
        """Restore the inline invariants after edits.

        Drops links left without text, merges adjacent runs that are empty or
        carry equal marks, and keeps a text run at both ends and between
        adjacent links.
        """
        index = 0
        while index < len(self.segments):
            segment = self.segments[index]
            if segment.link is not None and not self._link_has_text(segment.link):
                self._remove_span(index, index + 1)
                continue
            index += 1

        index = 0
        while index < len(self.segments) - 1:
            current, following = self.segments[index], self.segments[index + 1]
            if current.link == following.link and (
                not current.text or not following.text or current.run.marks == following.run.marks
            ):
                self._merge_next(index)
            else:
                index += 1

        if self.segments[0].link is not None:
            self.insert(0, Segment(TextRun()))
        index = 0
        while index < len(self.segments) - 1:
            current, following = self.segments[index], self.segments[index + 1]
            if current.link is not None and following.link is not None and current.link != following.link:
                self.insert(index + 1, Segment(TextRun()))
                index += 1
            index += 1
        if self.segments[-1].link is not None:
            self.insert(len(self.segments), Segment(TextRun()))

    def _link_has_text(self, link: LinkRef) -> bool:
        return any(segment.text for segment in self.segments if segment.link == link)

    def _merge_next(self, index: int) -> None:
        current, following = self.segments[index], self.segments[index + 1]
        marks = following.run.marks if not current.text and following.text else current.run.marks
        joined = TextRun(current.text + following.text, marks)
        self.segments[index : index + 2] = [Segment(joined, current.link)]
        for ref in self._refs:
            if ref.ordinal == index + 1:
                ref.ordinal = index
                ref.offset += len(current.text)
            elif ref.ordinal > index + 1:
                ref.ordinal -= 1

    def _remove_span(self, first: int, last: int) -> None:
        count = last - first
        if count <= 0:
            return
        removed_marks = self.segments[first].run.marks
        del self.segments[first:last]
        if not self.segments:
            self.segments.append(Segment(TextRun("", removed_marks)))
        for ref in self._refs:
            if ref.ordinal >= last:
                ref.ordinal -= count
            elif ref.ordinal >= first:
                if first > 0:
                    ref.ordinal, ref.offset = first - 1, len(self.segments[first - 1].text)
                else:
                    ref.ordinal, ref.offset = 0, 0

    # ------------------------------------------------------------------
    # Output

    def children(self) -> Tuple[Node, ...]:
        """Group segments back into text runs and link nodes."""
        nodes: List[Node] = []
        index = 0
        while index < len(self.segments):
            segment = self.segments[index]
            if segment.link is None:
                nodes.append(segment.run)
                index += 1
                continue
            runs: List[TextRun] = []
            while index < len(self.segments) and self.segments[index].link == segment.link:
                runs.append(self.segments[index].run)
                index += 1
            nodes.append(BlockNode(BlockKind.LINK, tuple(runs), url=segment.link.url))
        return tuple(nodes)

    def segment_paths(self) -> List[Path]:
        """Path of every segment relative to the block, matching :meth:`children`."""
        paths: List[Path] = []
        position = -1
        previous: Optional[LinkRef] = None
        inner = 0
        for segment in self.segments:
            if segment.link is not None and segment.link == previous:
                inner += 1
            else:
                position += 1
                inner = 0
            paths.append((position,) if segment.link is None else (position, inner))
            previous = segment.link
        return paths

    def to_block(self, block: BlockNode) -> BlockNode:
        return block.with_children(self.children())

    def point(self, block_path: Sequence[int], ref: PositionRef) -> Point:
        """Document point of a tracked position in the current content."""
        return self.point_at(block_path, ref.ordinal, ref.offset)

    def point_at(self, block_path: Sequence[int], ordinal: int, offset: int = 0) -> Point:
        return Point(tuple(block_path) + self.segment_paths()[ordinal], offset)


def normalize_block(block: BlockNode) -> BlockNode:
    """Return ``block`` with normalized inline content."""
    content = InlineContent.from_block(block)
    content.normalize()
    return content.to_block(block)
