"""Test cases for text normalization functionality."""

import unittest

from rich_editor.utils.text_normalizer import TextNormalizer, normalize_text


class TextNormalizerTest(unittest.TestCase):
    """Test text normalization utilities."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = TextNormalizer(preserve_whitespace=True)
        self.collapsing_normalizer = TextNormalizer(preserve_whitespace=False, ascii_punctuation=True)

    def test_invisible_character_replacement(self):
        """Test removal of invisible Unicode characters."""
        test_cases = [
            ('\u200b', ''),               # Zero-width space
            ('\ufeffstart', 'start'),     # Byte order mark
            ('co\u00adop', 'coop'),       # Soft hyphen
            ('line\u2028next', 'line\nnext'),
            ('para\u2029next', 'para\nnext'),
        ]

        for input_text, expected in test_cases:
            result = self.normalizer.normalize_text(input_text)
            self.assertEqual(result, expected, f"Failed for input: {repr(input_text)}")

    def test_typographic_characters_kept_by_default(self):
        """Test that smart punctuation survives unless folding is enabled."""
        input_text = '\u201cquoted\u201d\u2026'

        self.assertEqual(self.normalizer.normalize_text(input_text), input_text)
        self.assertEqual(self.collapsing_normalizer.normalize_text(input_text), '"quoted"...')

    def test_ascii_punctuation_folding(self):
        """Test folding of special spaces and quotes."""
        test_cases = [
            ('a\u00a0b', 'a b'),      # Non-breaking space
            ('a\u2009b', 'a b'),      # Thin space
            ('\u2018\u2019', "''"),   # Smart quotes
        ]

        for input_text, expected in test_cases:
            result = self.collapsing_normalizer.normalize_text(input_text)
            self.assertEqual(result, expected, f"Failed for input: {repr(input_text)}")

    def test_preserve_whitespace_mode(self):
        """Test that whitespace preservation works correctly."""
        input_text = '  multiple   spaces\t\tand tabs  '

        # Preserve mode keeps whitespace as typed
        self.assertEqual(self.normalizer.normalize_text(input_text), input_text)

        # Collapsing mode folds runs but keeps the edges
        self.assertEqual(self.collapsing_normalizer.normalize_text(input_text), ' multiple spaces and tabs ')

    def test_newlines_are_kept(self):
        """Test that soft line breaks survive normalization."""
        self.assertEqual(self.normalizer.normalize_text('a\r\nb\nc'), 'a\nb\nc')

    def test_control_character_removal(self):
        """Test removal of control characters."""
        input_text = 'text\x00with\x08control\x1fchars\r'
        expected = 'textwithcontrolchars'

        result = self.normalizer.normalize_text(input_text)
        self.assertEqual(result, expected)

    def test_empty_and_none_handling(self):
        """Test handling of empty strings and None values."""
        self.assertEqual(self.normalizer.normalize_text(''), '')
        self.assertEqual(self.normalizer.normalize_text(None), '')


class NormalizeTextTest(unittest.TestCase):
    """Test the convenience function for editor text normalization."""

    def test_defaults_preserve_whitespace(self):
        self.assertEqual(normalize_text('  a  b  '), '  a  b  ')

    def test_options(self):
        result = normalize_text('a\u00a0\u00a0b', preserve_whitespace=False, ascii_punctuation=True)
        self.assertEqual(result, 'a b')

    def test_none_input(self):
        """Test handling of None input."""
        self.assertEqual(normalize_text(None), '')


if __name__ == '__main__':
    unittest.main()
