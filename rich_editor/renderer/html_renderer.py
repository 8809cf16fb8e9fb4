"""Render a document tree into HTML for read-only display."""
from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Dict, Optional

from rich_editor.model.document_model import Document
from rich_editor.model.elements import BlockKind, BlockNode, Node, TextRun
from rich_editor.renderer.utils import is_safe_url, mark_tags, style_to_css
from rich_editor.utils.logger import get_logger

LOGGER = get_logger(__name__)

BLOCK_TAGS: Dict[BlockKind, str] = {
    BlockKind.PARAGRAPH: "p",
    BlockKind.HEADING_ONE: "h1",
    BlockKind.HEADING_TWO: "h2",
    BlockKind.BLOCKQUOTE: "blockquote",
    BlockKind.BULLETED_LIST: "ul",
    BlockKind.NUMBERED_LIST: "ol",
    BlockKind.LIST_ITEM: "li",
}


class HtmlRenderer:
    """Produce an HTML fragment, or a full page, from a document."""

    def __init__(self, output_path: Optional[Path] = None, *, title: str = "Document Preview") -> None:
        self._output_path = output_path
        self._title = title

    def render(self, document: Document) -> str:
        return "\n".join(self._render_node(block) for block in document.blocks)

    def write(self, document: Document) -> None:
        if self._output_path is None:
            raise ValueError("HtmlRenderer was created without an output path")
        self._output_path.write_text(self._build_html(self.render(document)), encoding="utf-8")

    def _build_html(self, body: str) -> str:
        return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>{escape(self._title)}</title>
  <style>
    body {{ max-width: 48rem; margin: 2rem auto; font-family: sans-serif; }}
    img, iframe {{ max-width: 100%; }}
    iframe {{ width: 560px; height: 315px; border: 0; }}
  </style>
</head>
<body>
{body}
</body>
</html>
"""

    def _render_node(self, node: Node) -> str:
        if isinstance(node, TextRun):
            return self._render_text(node)
        if node.kind is BlockKind.LINK:
            return self._render_link(node)
        if node.kind is BlockKind.IMAGE:
            return self._render_image(node)
        if node.kind is BlockKind.VIDEO:
            return self._render_video(node)
        tag = BLOCK_TAGS[node.kind]
        inner = "".join(self._render_node(child) for child in node.children)
        return f"<{tag}{self._style_attr(node)}>{inner}</{tag}>"

    def _render_text(self, run: TextRun) -> str:
        html = escape(run.text).replace("\n", "<br />")
        for tag in reversed(mark_tags(run.marks)):
            html = f"<{tag}>{html}</{tag}>"
        return html

    def _render_link(self, node: BlockNode) -> str:
        inner = "".join(self._render_text(child) for child in node.children)
        if not is_safe_url(node.url):
            LOGGER.warning("Dropping link with unsafe url %r", node.url)
            return inner
        return f'<a href="{escape(node.url)}">{inner}</a>'

    def _render_image(self, node: BlockNode) -> str:
        if not is_safe_url(node.url):
            LOGGER.warning("Dropping image with unsafe url %r", node.url)
            return ""
        return f'<img src="{escape(node.url)}" alt=""{self._style_attr(node)} />'

    def _render_video(self, node: BlockNode) -> str:
        if not is_safe_url(node.url):
            LOGGER.warning("Dropping video with unsafe url %r", node.url)
            return ""
        return f'<iframe src="{escape(node.url)}"{self._style_attr(node)} allowfullscreen></iframe>'

    def _style_attr(self, node: BlockNode) -> str:
        css = style_to_css(node.alignment)
        if not css:
            return ""
        style_str = "; ".join(f"{k}: {v}" for k, v in css.items())
        return f' style="{style_str}"'
