"""Helpers to persist editor state for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from rich_editor.model.document_model import Document
from rich_editor.model.selection import Range
from rich_editor.parser.document_serializer import document_to_payload


class DebugDumper:
    """Writes the document tree and selection onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: Document, selection: Optional[Range] = None) -> None:
        """Persist the persisted form and the raw tree as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / "document.json").write_text(
            json.dumps(document_to_payload(document), indent=2, ensure_ascii=False), encoding="utf-8"
        )
        tree = {"document": self._serialize(document), "selection": self._serialize(selection)}
        (self.directory / "tree.json").write_text(json.dumps(tree, indent=2, ensure_ascii=False), encoding="utf-8")

    def _serialize(self, value: Any) -> Any:
        # asdict() cannot be used: it deep-copies and keeps frozensets.
        if is_dataclass(value):
            return {item.name: self._serialize(getattr(value, item.name)) for item in fields(value)}
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (set, frozenset)):
            return sorted(self._serialize(v) for v in value)
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
