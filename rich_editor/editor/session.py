"""Stateful editing session around the pure command functions."""
from __future__ import annotations

from typing import Callable, Optional, Union

from rich_editor.editor import commands, editing
from rich_editor.editor.history import DEFAULT_HISTORY_LIMIT, History
from rich_editor.editor.tree import document_end, document_start
from rich_editor.model.document_model import Document, EditorState
from rich_editor.model.elements import Alignment, BlockKind, Mark
from rich_editor.model.selection import Point, Range
from rich_editor.parser.document_parser import DocumentParser
from rich_editor.parser.document_serializer import serialize
from rich_editor.utils.logger import get_logger

LOGGER = get_logger(__name__)

Command = Callable[..., EditorState]
ChangeHandler = Callable[[str], None]


class Editor:
    """One editing session over one document.

    ``value`` is the persisted JSON (possibly empty or invalid) and
    ``on_change`` receives the freshly serialized document after every
    command, undo and redo.
    """

    def __init__(
        self,
        value: Optional[str] = "",
        on_change: Optional[ChangeHandler] = None,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        parser: Optional[DocumentParser] = None,
    ) -> None:
        self._parser = parser or DocumentParser()
        self._state = EditorState.create(self._parser.parse(value))
        self._on_change = on_change
        self._history = History(history_limit)

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def document(self) -> Document:
        return self._state.document

    @property
    def selection(self) -> Optional[Range]:
        return self._state.selection

    @property
    def value(self) -> str:
        return serialize(self._state.document)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    # ------------------------------------------------------------------
    # Focus and selection

    def focus(self, *, at_end: bool = False) -> None:
        if self._state.is_focused:
            return
        document = self._state.document
        point = document_end(document) if at_end else document_start(document)
        self._state = self._state.with_selection(Range.collapsed(point))

    def blur(self) -> None:
        self._state = self._state.with_selection(None)

    def select(self, anchor: Point, focus: Optional[Point] = None) -> None:
        self._state = editing.select(self._state, anchor, focus)

    def select_all(self) -> None:
        self._state = editing.select_all(self._state)

    def load(self, value: Optional[str]) -> None:
        """Replace the document with a persisted one; drops selection and history."""
        self._state = EditorState.create(self._parser.parse(value))
        self._history.clear()

    # ------------------------------------------------------------------
    # Commands

    def apply(self, command: Command, *args: object) -> EditorState:
        """Run a command against the current state and notify ``on_change``."""
        previous = self._state
        state = command(previous, *args)
        if state.document is not previous.document:
            self._history.record(previous)
        self._state = state
        self._notify()
        return state

    def toggle_mark(self, mark: Union[Mark, str]) -> EditorState:
        return self.apply(commands.toggle_mark, mark)

    def toggle_block(self, kind: Union[BlockKind, str]) -> EditorState:
        return self.apply(commands.toggle_block, kind)

    def set_alignment(self, value: Union[Alignment, str]) -> EditorState:
        return self.apply(commands.set_alignment, value)

    def insert_link(self, url: str) -> EditorState:
        return self.apply(commands.insert_link, url)

    def insert_image(self, url: str) -> EditorState:
        return self.apply(commands.insert_image, url)

    def insert_video(self, url: str) -> EditorState:
        return self.apply(commands.insert_video, url)

    def insert_text(self, text: str) -> EditorState:
        return self.apply(editing.insert_text, text)

    def insert_break(self) -> EditorState:
        return self.apply(editing.insert_break)

    def delete_backward(self) -> EditorState:
        return self.apply(editing.delete_backward)

    def delete_fragment(self) -> EditorState:
        return self.apply(editing.delete_fragment)

    def clear(self) -> EditorState:
        return self.apply(editing.clear)

    def is_mark_active(self, mark: Union[Mark, str]) -> bool:
        return Mark(mark) in commands.active_marks(self._state)

    def is_block_active(self, kind: Union[BlockKind, str]) -> bool:
        return commands.is_block_active(self._state, kind)

    # ------------------------------------------------------------------
    # History

    def undo(self) -> bool:
        previous = self._history.undo(self._state)
        if previous is None:
            return False
        self._state = previous
        self._notify()
        return True

    def redo(self) -> bool:
        following = self._history.redo(self._state)
        if following is None:
            return False
        self._state = following
        self._notify()
        return True

    def _notify(self) -> None:
        if self._on_change is None:
            return
        self._on_change(serialize(self._state.document))
