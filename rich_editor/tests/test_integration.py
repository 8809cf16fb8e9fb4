"""
Integration tests for the complete editing pipeline.

Covers persisted JSON → editing session → persisted JSON, and the
JSON → HTML preview entry point.
"""

import json
import random
import tempfile
import unittest
from pathlib import Path

from rich_editor.editor import commands, editing
from rich_editor.editor.session import Editor
from rich_editor.main import load_document, main
from rich_editor.model.document_model import EditorState, empty_document
from rich_editor.model.elements import TOGGLEABLE_KINDS, Alignment, BlockKind, Mark
from rich_editor.model.selection import Point
from rich_editor.parser.document_parser import parse
from rich_editor.parser.document_serializer import serialize

SAMPLE = json.dumps(
    [
        {"type": "h1", "children": [{"text": "Release notes"}]},
        {"type": "paragraph", "align": "center", "children": [{"text": "Read "}, {"type": "a", "url": "https://example.com/notes", "children": [{"text": "the notes"}]}]},
        {"type": "ul", "children": [{"type": "li", "children": [{"text": "Faster"}]}, {"type": "li", "children": [{"text": "Smaller", "italic": True}]}]},
        {"type": "img", "url": "/uploads/chart.png", "children": [{"text": ""}]},
    ]
)


class EditingPipelineTest(unittest.TestCase):
    """Integration tests for an editing session over persisted content."""

    def test_session_output_parses_back(self):
        values = []
        editor = Editor("", values.append)
        editor.focus()
        editor.toggle_block(BlockKind.HEADING_ONE)
        editor.insert_text("Title")
        editor.insert_break()
        editor.insert_text("Body ")
        editor.toggle_mark(Mark.BOLD)
        editor.insert_text("bold")
        editor.insert_break()
        editor.toggle_block(BlockKind.BULLETED_LIST)
        editor.insert_text("one")
        editor.insert_break()
        editor.insert_text("two")
        editor.insert_image("/uploads/a.png")
        editor.insert_link("https://example.com")

        stored = values[-1]
        document = parse(stored)

        self.assertEqual(document, editor.document)
        self.assertEqual(serialize(document), stored)
        kinds = [block.kind for block in document.blocks]
        self.assertEqual(
            kinds,
            [BlockKind.HEADING_ONE, BlockKind.PARAGRAPH, BlockKind.BULLETED_LIST, BlockKind.IMAGE, BlockKind.PARAGRAPH],
        )
        self.assertEqual(document.blocks[1].children[1].marks, frozenset({Mark.BOLD}))
        self.assertEqual(len(document.blocks[2].children), 2)

    def test_legacy_content_is_upgraded_on_save(self):
        editor = Editor(SAMPLE)
        editor.select(Point((0, 0), 0))
        editor.insert_text("v2 ")

        saved = json.loads(editor.value)

        self.assertEqual(saved[0], {"type": "heading-one", "children": [{"text": "v2 Release notes"}]})
        self.assertEqual(saved[1]["children"][1]["type"], "link")
        self.assertEqual(saved[2]["type"], "bulleted-list")
        self.assertEqual(saved[3]["type"], "image")

    def test_clear_then_save(self):
        editor = Editor(SAMPLE)
        editor.focus()
        editor.clear()

        self.assertEqual(editor.document, empty_document())
        self.assertTrue(editor.undo())
        self.assertEqual(editor.document, parse(SAMPLE))


class PreviewEntryPointTest(unittest.TestCase):
    """Integration tests for the JSON → HTML entry point."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.source = Path(self.tmp.name) / "notes.json"
        self.source.write_text(SAMPLE, encoding="utf-8")

    def test_main_writes_html_and_debug_dump(self):
        output_dir = Path(self.tmp.name) / "out"

        html_path = main(str(self.source), str(output_dir))

        html = html_path.read_text(encoding="utf-8")
        self.assertIn("<h1>Release notes</h1>", html)
        self.assertIn('<a href="https://example.com/notes">the notes</a>', html)
        self.assertIn("<li><em>Smaller</em></li>", html)
        self.assertIn("<title>notes</title>", html)

        dumped = json.loads((output_dir / "debug" / "document.json").read_text(encoding="utf-8"))
        self.assertEqual(dumped[0]["type"], "heading-one")
        tree = json.loads((output_dir / "debug" / "tree.json").read_text(encoding="utf-8"))
        self.assertEqual(tree["document"]["blocks"][0]["kind"], "heading-one")
        self.assertIsNone(tree["selection"])

    def test_default_output_directory(self):
        html_path = main(str(self.source), debug=False)

        self.assertEqual(html_path.parent, self.source.with_suffix("").resolve())
        self.assertFalse((html_path.parent / "debug").exists())

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            main(str(Path(self.tmp.name) / "missing.json"))

    def test_load_document_falls_back_on_bad_content(self):
        self.source.write_text("<html>", encoding="utf-8")

        with self.assertLogs("rich_editor.parser.document_parser", level="WARNING"):
            document = load_document(self.source)

        self.assertEqual(document, empty_document())


class RandomEditingTest(unittest.TestCase):
    """Seeded command sequences keep the document persistable."""

    SEEDS = range(20)
    STEPS = 60
    WORDS = ("alpha", "beta ", " gamma", "x", "Hello world")
    URLS = ("https://example.com", "  https://example.com/a ", "\thttps://x.io\n", "   ")
    VIDEOS = ("https://youtu.be/dQw4w9WgXcQ", " https://www.youtube.com/watch?v=dQw4w9WgXcQ ", "https://vimeo.com/1")

    def random_point(self, rng, document):
        path, run = rng.choice(list(document.leaves()))
        return Point(path, rng.randint(0, len(run.text)))

    def step(self, rng, state):
        document = state.document
        actions = [
            lambda: editing.insert_text(state, rng.choice(self.WORDS)),
            lambda: editing.insert_break(state),
            lambda: editing.delete_backward(state),
            lambda: editing.delete_fragment(state),
            lambda: commands.toggle_mark(state, rng.choice(list(Mark))),
            lambda: commands.toggle_block(state, rng.choice(sorted(TOGGLEABLE_KINDS, key=lambda kind: kind.value))),
            lambda: commands.set_alignment(state, rng.choice(list(Alignment))),
            lambda: commands.insert_link(state, rng.choice(self.URLS)),
            lambda: commands.insert_image(state, rng.choice(self.URLS)),
            lambda: commands.insert_video(state, rng.choice(self.VIDEOS)),
            lambda: editing.select(state, self.random_point(rng, document), self.random_point(rng, document)),
            lambda: editing.select(state, self.random_point(rng, document)),
            lambda: editing.select_all(state),
        ]
        if rng.random() < 0.02:
            return editing.clear(state)
        return rng.choice(actions)()

    def test_random_command_sequences_round_trip(self):
        for seed in self.SEEDS:
            with self.subTest(seed=seed):
                rng = random.Random(seed)
                state = editing.select(EditorState.create(), Point((0, 0), 0))
                for _ in range(self.STEPS):
                    state = self.step(rng, state)

                    self.assertTrue(state.document.blocks)
                    self.assertEqual(parse(serialize(state.document)), state.document)
                    self.assertIsNotNone(state.selection)
                    editing.select(state, state.selection.anchor, state.selection.focus)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
