"""Parse persisted editor JSON into a document tree."""
from __future__ import annotations

import json
from typing import Dict, List, Optional

from rich_editor.model.document_model import Document, empty_document
from rich_editor.model.elements import Alignment, BlockKind, BlockNode, Mark, Node, TextRun
from rich_editor.model.inline import normalize_block
from rich_editor.utils.logger import get_logger
from rich_editor.utils.text_normalizer import TextNormalizer

LOGGER = get_logger(__name__)

# Type names written by the previous editor.
LEGACY_TYPES: Dict[str, BlockKind] = {
    "p": BlockKind.PARAGRAPH,
    "h1": BlockKind.HEADING_ONE,
    "h2": BlockKind.HEADING_TWO,
    "ul": BlockKind.BULLETED_LIST,
    "ol": BlockKind.NUMBERED_LIST,
    "li": BlockKind.LIST_ITEM,
    "a": BlockKind.LINK,
    "img": BlockKind.IMAGE,
}

_MARK_KEYS = tuple(mark.value for mark in Mark)


class DocumentFormatError(ValueError):
    """Payload does not follow the document schema."""


class DocumentParser:
    """Turns the persisted JSON string back into a :class:`Document`.

    Parsing never fails: anything that cannot be read yields the empty
    document so the editor can always mount.
    """

    def __init__(self, normalizer: Optional[TextNormalizer] = None) -> None:
        self._normalizer = normalizer or TextNormalizer(preserve_whitespace=True)

    def parse(self, raw: Optional[str]) -> Document:
        if raw is None or not raw.strip():
            return empty_document()
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            LOGGER.warning("Discarding malformed document JSON: %s", exc)
            return empty_document()

        try:
            blocks = self._parse_blocks(payload)
        except DocumentFormatError as exc:
            LOGGER.warning("Discarding document that does not match the schema: %s", exc)
            return empty_document()

        if not blocks:
            LOGGER.debug("Document payload holds no blocks")
            return empty_document()
        return Document(tuple(blocks))

    def _parse_blocks(self, payload: object) -> List[BlockNode]:
        if not isinstance(payload, list):
            raise DocumentFormatError(f"expected a JSON array, got {type(payload).__name__}")
        blocks = []
        for node in payload:
            block = self._parse_top_level(node)
            if block is not None:
                blocks.append(block)
        return blocks

    def _parse_top_level(self, node: object) -> Optional[BlockNode]:
        kind = self._kind(node)
        if kind.is_list:
            return self._parse_list(node, kind)
        if kind.is_void:
            return self._parse_void(node, kind)
        if kind is BlockKind.LIST_ITEM or kind.is_inline:
            raise DocumentFormatError(f"{kind.value} cannot appear at the top level")
        return self._parse_text_block(node, kind)

    def _kind(self, node: object) -> BlockKind:
        if not isinstance(node, dict):
            raise DocumentFormatError(f"expected an element object, got {type(node).__name__}")
        value = node.get("type")
        if not isinstance(value, str):
            raise DocumentFormatError("element without a type")
        if value in LEGACY_TYPES:
            return LEGACY_TYPES[value]
        try:
            return BlockKind(value)
        except ValueError:
            raise DocumentFormatError(f"unknown element type {value!r}") from None

    def _children(self, node: Dict[str, object]) -> List[object]:
        children = node.get("children", [])
        if not isinstance(children, list):
            raise DocumentFormatError("children must be an array")
        return children

    def _parse_list(self, node: Dict[str, object], kind: BlockKind) -> Optional[BlockNode]:
        items = []
        for child in self._children(node):
            if self._kind(child) is not BlockKind.LIST_ITEM:
                raise DocumentFormatError(f"{kind.value} may only hold list-item elements")
            items.append(self._parse_text_block(child, BlockKind.LIST_ITEM))
        if not items:
            LOGGER.debug("Dropping empty %s", kind.value)
            return None
        return BlockNode(kind, tuple(items), self._alignment(node))

    def _parse_text_block(self, node: Dict[str, object], kind: BlockKind) -> BlockNode:
        children: List[Node] = []
        for child in self._children(node):
            if isinstance(child, dict) and "text" in child:
                children.append(self._parse_text(child))
            elif self._kind(child) is BlockKind.LINK:
                children.append(self._parse_link(child))
            else:
                raise DocumentFormatError(f"{kind.value} may only hold text and links")
        block = BlockNode(kind, tuple(children) or (TextRun(),), self._alignment(node))
        return normalize_block(block)

    def _parse_link(self, node: Dict[str, object]) -> BlockNode:
        url = self._url(node, BlockKind.LINK)
        runs = []
        for child in self._children(node):
            if not (isinstance(child, dict) and "text" in child):
                raise DocumentFormatError("links may only hold text")
            runs.append(self._parse_text(child))
        return BlockNode(BlockKind.LINK, tuple(runs) or (TextRun(),), url=url)

    def _parse_void(self, node: Dict[str, object], kind: BlockKind) -> BlockNode:
        return BlockNode(kind, (TextRun(),), self._alignment(node), self._url(node, kind))

    def _parse_text(self, node: Dict[str, object]) -> TextRun:
        value = node.get("text")
        if not isinstance(value, str):
            raise DocumentFormatError("text must be a string")
        marks = frozenset(Mark(key) for key in _MARK_KEYS if node.get(key) is True)
        return TextRun(self._normalizer.normalize_text(value), marks)

    def _url(self, node: Dict[str, object], kind: BlockKind) -> str:
        url = node.get("url")
        if not isinstance(url, str) or not url.strip():
            raise DocumentFormatError(f"{kind.value} requires a non-empty url")
        return url.strip()

    def _alignment(self, node: Dict[str, object]) -> Optional[Alignment]:
        value = node.get("align")
        if value is None:
            return None
        try:
            return Alignment(value)
        except ValueError:
            LOGGER.debug("Ignoring unknown alignment %r", value)
            return None


def parse(raw: Optional[str]) -> Document:
    """Parse a persisted document, falling back to the empty document."""
    return DocumentParser().parse(raw)
