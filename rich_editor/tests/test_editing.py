"""Tests for typing, line breaks and deletion."""
import unittest

from rich_editor.editor.editing import (
    clear,
    delete_backward,
    delete_fragment,
    insert_break,
    insert_text,
    select,
    select_all,
)
from rich_editor.model.document_model import Document, EditorState, empty_document
from rich_editor.model.elements import (
    BlockKind,
    bulleted_list,
    heading_one,
    image,
    list_item,
    paragraph,
    text,
)
from rich_editor.model.selection import Point, Range


def make_state(*blocks, anchor=None, focus=None):
    selection = None
    if anchor is not None:
        selection = Range(Point(*anchor), Point(*(focus or anchor)))
    return EditorState(Document(tuple(blocks)), selection)


class SelectTest(unittest.TestCase):
    """Test selection placement."""

    def test_select_validates_points(self):
        state = make_state(paragraph(text("ab")))

        for point in (Point((0, 0), 3), Point((0,), 0)):
            with self.subTest(point=point), self.assertRaises(ValueError):
                select(state, point)

    def test_select_all_spans_document(self):
        state = select_all(make_state(paragraph(text("ab")), bulleted_list(list_item(text("cd")))))

        self.assertEqual(state.selection, Range(Point((0, 0), 0), Point((1, 0, 0), 2)))


class InsertTextTest(unittest.TestCase):
    """Test typing."""

    def test_insert_in_middle(self):
        state = make_state(paragraph(text("Hllo")), anchor=((0, 0), 1))

        state = insert_text(state, "e")

        self.assertEqual(state.document.blocks[0].children, (text("Hello"),))
        self.assertEqual(state.selection, Range.at((0, 0), 2))

    def test_typing_replaces_selection(self):
        state = make_state(paragraph(text("Hello world")), anchor=((0, 0), 0), focus=((0, 0), 5))

        state = insert_text(state, "Bye")

        self.assertEqual(state.document.blocks[0].children, (text("Bye world"),))
        self.assertEqual(state.selection, Range.at((0, 0), 3))

    def test_typed_text_is_cleaned(self):
        state = make_state(paragraph(text("")), anchor=((0, 0), 0))

        state = insert_text(state, "a\u200bb\r\nc")

        self.assertEqual(state.document.blocks[0].children, (text("ab\nc"),))

    def test_typing_in_void_is_ignored(self):
        state = make_state(image("/a.png"), anchor=((0, 0), 0))

        self.assertIs(insert_text(state, "x"), state)

    def test_unfocused_state_is_returned_unchanged(self):
        state = make_state(paragraph(text("a")))

        self.assertIs(insert_text(state, "x"), state)


class InsertBreakTest(unittest.TestCase):
    """Test Enter."""

    def test_split_paragraph(self):
        state = make_state(paragraph(text("Hello")), anchor=((0, 0), 2))

        state = insert_break(state)

        self.assertEqual(state.document, Document((paragraph(text("He")), paragraph(text("llo")))))
        self.assertEqual(state.selection, Range.at((1, 0), 0))

    def test_heading_continues_as_paragraph(self):
        state = make_state(heading_one(text("Title")), anchor=((0, 0), 5))

        state = insert_break(state)

        self.assertEqual(state.document, Document((heading_one(text("Title")), paragraph())))

    def test_break_at_heading_start_keeps_heading(self):
        state = make_state(heading_one(text("Title")), anchor=((0, 0), 0))

        state = insert_break(state)

        self.assertEqual(state.document, Document((heading_one(), heading_one(text("Title")))))
        self.assertEqual(state.selection, Range.at((1, 0), 0))

    def test_break_in_list_item_adds_item(self):
        state = make_state(bulleted_list(list_item(text("ab"))), anchor=((0, 0, 0), 1))

        state = insert_break(state)

        self.assertEqual(state.document, Document((bulleted_list(list_item(text("a")), list_item(text("b"))),)))
        self.assertEqual(state.selection, Range.at((0, 1, 0), 0))

    def test_break_in_empty_list_item_leaves_list(self):
        state = make_state(bulleted_list(list_item(text("a")), list_item()), anchor=((0, 1, 0), 0))

        state = insert_break(state)

        self.assertEqual(state.document, Document((bulleted_list(list_item(text("a"))), paragraph())))
        self.assertEqual(state.selection, Range.at((1, 0), 0))

    def test_break_on_void_adds_paragraph_after(self):
        state = make_state(image("/a.png"), anchor=((0, 0), 0))

        state = insert_break(state)

        self.assertEqual(state.document, Document((image("/a.png"), paragraph())))
        self.assertEqual(state.selection, Range.at((1, 0), 0))


class DeleteBackwardTest(unittest.TestCase):
    """Test Backspace."""

    def test_removes_previous_character(self):
        state = make_state(paragraph(text("Hello")), anchor=((0, 0), 5))

        state = delete_backward(state)

        self.assertEqual(state.document.blocks[0].children, (text("Hell"),))
        self.assertEqual(state.selection, Range.at((0, 0), 4))

    def test_merges_with_previous_block(self):
        state = make_state(paragraph(text("ab")), paragraph(text("cd")), anchor=((1, 0), 0))

        state = delete_backward(state)

        self.assertEqual(state.document, Document((paragraph(text("abcd")),)))
        self.assertEqual(state.selection, Range.at((0, 0), 2))

    def test_heading_start_turns_into_paragraph(self):
        state = make_state(paragraph(text("a")), heading_one(text("b")), anchor=((1, 0), 0))

        state = delete_backward(state)

        self.assertEqual(state.document.blocks[1].kind, BlockKind.PARAGRAPH)
        self.assertEqual(state.selection, Range.at((1, 0), 0))

    def test_list_item_start_leaves_list(self):
        state = make_state(bulleted_list(list_item(text("a")), list_item(text("b"))), anchor=((0, 1, 0), 0))

        state = delete_backward(state)

        self.assertEqual(state.document, Document((bulleted_list(list_item(text("a"))), paragraph(text("b")))))
        self.assertEqual(state.selection, Range.at((1, 0), 0))

    def test_removes_previous_void(self):
        state = make_state(image("/a.png"), paragraph(text("x")), anchor=((1, 0), 0))

        state = delete_backward(state)

        self.assertEqual(state.document, Document((paragraph(text("x")),)))
        self.assertEqual(state.selection, Range.at((0, 0), 0))

    def test_removes_selected_void(self):
        state = make_state(paragraph(text("a")), image("/a.png"), anchor=((1, 0), 0))

        state = delete_backward(state)

        self.assertEqual(state.document, Document((paragraph(text("a")),)))
        self.assertEqual(state.selection, Range.at((0, 0), 1))

    def test_start_of_document_is_a_no_op(self):
        state = make_state(paragraph(text("a")), anchor=((0, 0), 0))

        self.assertIs(delete_backward(state), state)


class DeleteFragmentTest(unittest.TestCase):
    """Test removal of expanded selections."""

    def test_delete_across_blocks(self):
        state = make_state(
            paragraph(text("Hello")),
            bulleted_list(list_item(text("big")), list_item(text("world"))),
            anchor=((0, 0), 2),
            focus=((1, 1, 0), 3),
        )

        state = delete_fragment(state)

        self.assertEqual(state.document, Document((paragraph(text("Held")),)))
        self.assertEqual(state.selection, Range.at((0, 0), 2))

    def test_delete_everything(self):
        state = select_all(make_state(paragraph(text("ab")), paragraph(text("cd"))))

        state = delete_fragment(state)

        self.assertEqual(state.document, empty_document())
        self.assertEqual(state.selection, Range.at((0, 0), 0))

    def test_delete_starting_on_void(self):
        state = make_state(
            image("/a.png"),
            paragraph(text("abc")),
            anchor=((0, 0), 0),
            focus=((1, 0), 1),
        )

        state = delete_fragment(state)

        self.assertEqual(state.document, Document((paragraph(text("bc")),)))
        self.assertEqual(state.selection, Range.at((0, 0), 0))

    def test_collapsed_selection_is_a_no_op(self):
        state = make_state(paragraph(text("a")), anchor=((0, 0), 1))

        self.assertIs(delete_fragment(state), state)


class ClearTest(unittest.TestCase):
    """Test clearing the editor."""

    def test_clear_resets_document(self):
        state = make_state(heading_one(text("a")), image("/a.png"), anchor=((0, 0), 1))

        state = clear(state)

        self.assertEqual(state.document, empty_document())
        self.assertEqual(state.selection, Range.at((0, 0), 0))

    def test_clear_requires_focus(self):
        state = make_state(paragraph(text("a")))

        self.assertIs(clear(state), state)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
