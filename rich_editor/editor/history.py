"""Undo/redo stacks of editor snapshots."""
from __future__ import annotations

from collections import deque
from typing import Deque, Optional

from rich_editor.model.document_model import EditorState

DEFAULT_HISTORY_LIMIT = 100


class History:
    """Keeps previous states; documents are immutable so a snapshot is a reference."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 0:
            raise ValueError("history limit must be >= 0")
        self._undo: Deque[EditorState] = deque(maxlen=limit)
        self._redo: Deque[EditorState] = deque(maxlen=limit)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def record(self, previous: EditorState) -> None:
        self._undo.append(previous)
        self._redo.clear()

    def undo(self, current: EditorState) -> Optional[EditorState]:
        if not self._undo:
            return None
        self._redo.append(current)
        return self._undo.pop()

    def redo(self, current: EditorState) -> Optional[EditorState]:
        if not self._redo:
            return None
        self._undo.append(current)
        return self._redo.pop()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
