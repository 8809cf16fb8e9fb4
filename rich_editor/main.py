"""Entry-point: render a persisted editor document into an HTML preview."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from rich_editor.model.document_model import Document
from rich_editor.parser.document_parser import DocumentParser
from rich_editor.renderer.html_renderer import HtmlRenderer
from rich_editor.utils.debug import DebugDumper
from rich_editor.utils.logger import get_logger

LOGGER = get_logger(__name__)


def load_document(json_path: Union[str, Path]) -> Document:
    """Read a persisted document; unreadable content yields the empty document."""
    return DocumentParser().parse(Path(json_path).read_text(encoding="utf-8"))


def render_outputs(document: Document, output_dir: Path, *, title: str = "Document Preview") -> Path:
    """Write the HTML preview into ``output_dir`` and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / "document.html"
    HtmlRenderer(html_path, title=title).write(document)
    return html_path


def main(json_file: str, output_dir: Optional[str] = None, *, debug: bool = True) -> Path:
    """Run the persisted JSON → document tree → HTML pipeline."""
    json_path = Path(json_file).resolve()
    if not json_path.exists():
        raise FileNotFoundError(f"Document file not found: {json_path}")

    LOGGER.info("Loading document from %s", json_path.name)
    document = load_document(json_path)

    if output_dir is None:
        output_dir = json_path.with_suffix("")

    output_path = Path(output_dir).resolve()
    LOGGER.info("Rendering preview into %s", output_path)
    html_path = render_outputs(document, output_path, title=json_path.stem)

    if debug:
        DebugDumper(output_path / "debug").dump(document)
    return html_path


if __name__ == "__main__":  # pragma: no cover
    import argparse

    parser = argparse.ArgumentParser(description="Render a persisted rich-text document into an HTML preview")
    parser.add_argument("json_file", help="Path to the persisted document JSON")
    parser.add_argument("--output", help="Directory to write generated artifacts")
    parser.add_argument("--no-debug", action="store_true", help="Skip writing the debug dump")

    args = parser.parse_args()
    main(args.json_file, args.output, debug=not args.no_debug)
