"""Cursor and selection values.

A point addresses a text run by its path from the document root plus a
character offset into that run. Paths of text runs never prefix one another,
so tuple ordering of ``(path, offset)`` is document order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

Path = Tuple[int, ...]


@dataclass(frozen=True, slots=True, order=True)
class Point:
    """Position inside a text run."""

    path: Path
    offset: int = 0


@dataclass(frozen=True, slots=True)
class Range:
    """Anchor/focus pair. Collapsed when both points are equal."""

    anchor: Point
    focus: Point

    @classmethod
    def collapsed(cls, point: Point) -> "Range":
        return cls(point, point)

    @classmethod
    def at(cls, path: Path, offset: int = 0) -> "Range":
        point = Point(tuple(path), offset)
        return cls(point, point)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus

    @property
    def is_backward(self) -> bool:
        return self.focus < self.anchor

    @property
    def start(self) -> Point:
        return self.focus if self.is_backward else self.anchor

    @property
    def end(self) -> Point:
        return self.anchor if self.is_backward else self.focus

    def edges(self) -> Tuple[Point, Point]:
        return self.start, self.end

    def collapse_to_start(self) -> "Range":
        return Range.collapsed(self.start)

    def collapse_to_end(self) -> "Range":
        return Range.collapsed(self.end)

    def with_edges(self, start: Point, end: Point) -> "Range":
        """Rebuild the range from new edges, keeping its direction."""
        if self.is_backward:
            return Range(end, start)
        return Range(start, end)

    def map(self, transform: Callable[[Point], Point]) -> "Range":
        return Range(transform(self.anchor), transform(self.focus))
