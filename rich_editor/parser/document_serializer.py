"""Serialize a document tree into the persisted JSON representation."""
from __future__ import annotations

import json
from typing import Dict, List

from rich_editor.model.document_model import Document
from rich_editor.model.elements import Mark, Node, TextRun


def serialize(document: Document) -> str:
    """Return the compact JSON array stored by the content API."""
    return json.dumps(document_to_payload(document), ensure_ascii=False, separators=(",", ":"))


def document_to_payload(document: Document) -> List[Dict[str, object]]:
    return [node_to_payload(block) for block in document.blocks]


def node_to_payload(node: Node) -> Dict[str, object]:
    if isinstance(node, TextRun):
        payload: Dict[str, object] = {"text": node.text}
        for mark in Mark:
            if mark in node.marks:
                payload[mark.value] = True
        return payload

    payload = {"type": node.kind.value}
    if node.kind.requires_url:
        payload["url"] = node.url or ""
    payload["children"] = [node_to_payload(child) for child in node.children]
    if node.alignment is not None:
        payload["align"] = node.alignment.value
    return payload
