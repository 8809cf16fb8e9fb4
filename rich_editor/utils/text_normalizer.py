"""
Text normalization utilities for editor content.

Cleans text that is typed, pasted or loaded into the editor: invisible
characters are removed, control characters dropped and, optionally,
typographic punctuation folded to ASCII and whitespace collapsed.
"""

import re
from typing import Optional


class TextNormalizer:
    """Normalizes text before it becomes part of a text run."""

    # Invisible characters that never belong in stored content
    INVISIBLE_CHARS = {
        '\u200b': '',       # Zero-width space → remove
        '\ufeff': '',       # Byte order mark → remove
        '\u00ad': '',       # Soft hyphen → remove
        '\u2028': '\n',     # Line separator → newline
        '\u2029': '\n',     # Paragraph separator → newline
    }

    # Typographic punctuation folded when ascii_punctuation is enabled
    TYPOGRAPHIC_CHARS = {
        '\u00a0': ' ',      # Non-breaking space → regular space
        '\u2009': ' ',      # Thin space → regular space
        '\u2018': "'",      # Left single quotation mark
        '\u2019': "'",      # Right single quotation mark
        '\u201c': '"',      # Left double quotation mark
        '\u201d': '"',      # Right double quotation mark
        '\u2026': '...',    # Horizontal ellipsis
    }

    # Regex for collapsing runs of spaces and tabs
    WHITESPACE_PATTERN = re.compile(r'[ \t]+')

    # Regex for removing control characters (except tabs and newlines)
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0d\x0e-\x1f\x7f-\x9f]')

    def __init__(self, preserve_whitespace: bool = True, ascii_punctuation: bool = False):
        """Initialize text normalizer.

        Args:
            preserve_whitespace: If True, keep spaces and tabs as typed.
                                If False, collapse runs of them to one space.
            ascii_punctuation: If True, fold smart quotes, ellipses and
                               special spaces to their ASCII equivalents.
        """
        self.preserve_whitespace = preserve_whitespace
        self.ascii_punctuation = ascii_punctuation

    def normalize_text(self, text: Optional[str]) -> str:
        """Normalize a piece of editor text."""
        if not text:
            return ""

        normalized = text.replace('\r\n', '\n')
        normalized = self._replace_chars(normalized, self.INVISIBLE_CHARS)
        if self.ascii_punctuation:
            normalized = self._replace_chars(normalized, self.TYPOGRAPHIC_CHARS)

        normalized = self._remove_control_chars(normalized)

        if not self.preserve_whitespace:
            normalized = self._normalize_whitespace(normalized)

        return normalized

    def _replace_chars(self, text: str, table: dict) -> str:
        for original, replacement in table.items():
            text = text.replace(original, replacement)
        return text

    def _remove_control_chars(self, text: str) -> str:
        """Remove control characters that shouldn't appear in document text."""
        return self.CONTROL_CHARS_PATTERN.sub('', text)

    def _normalize_whitespace(self, text: str) -> str:
        """Collapse runs of spaces and tabs to a single space."""
        return self.WHITESPACE_PATTERN.sub(' ', text)


def normalize_text(text: Optional[str],
                   preserve_whitespace: bool = True,
                   ascii_punctuation: bool = False) -> str:
    """Convenience function to normalize a piece of editor text.

    Args:
        text: Text to normalize
        preserve_whitespace: Whether to keep spaces and tabs as typed
        ascii_punctuation: Whether to fold typographic punctuation to ASCII

    Returns:
        Normalized text string
    """
    normalizer = TextNormalizer(preserve_whitespace=preserve_whitespace,
                                ascii_punctuation=ascii_punctuation)
    return normalizer.normalize_text(text)
