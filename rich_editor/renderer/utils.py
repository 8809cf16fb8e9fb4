"""Common helpers shared by renderer implementations."""
from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional
from urllib.parse import urlsplit

from rich_editor.model.elements import Alignment, Mark

# Outermost first.
MARK_TAGS = (
    (Mark.BOLD, "strong"),
    (Mark.ITALIC, "em"),
    (Mark.UNDERLINE, "u"),
    (Mark.STRIKETHROUGH, "s"),
    (Mark.CODE, "code"),
)

SAFE_URL_SCHEMES = frozenset({"", "http", "https", "mailto"})


def mark_tags(marks: FrozenSet[Mark]) -> List[str]:
    """HTML tags wrapping a run with ``marks``, outermost first."""
    return [tag for mark, tag in MARK_TAGS if mark in marks]


def style_to_css(alignment: Optional[Alignment]) -> Dict[str, str]:
    """Convert block attributes into CSS properties."""
    css: Dict[str, str] = {}
    if alignment is not None and alignment is not Alignment.LEFT:
        css["text-align"] = alignment.value
    return css


def is_safe_url(url: Optional[str]) -> bool:
    """Accept web, mail and relative URLs only."""
    if not url:
        return False
    try:
        scheme = urlsplit(url.strip()).scheme.lower()
    except ValueError:
        return False
    return scheme in SAFE_URL_SCHEMES
