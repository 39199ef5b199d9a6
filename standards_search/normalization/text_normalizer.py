"""
Text normalization module for register fields.

Provides the canonical form used everywhere strings are compared:
trimmed, whitespace-collapsed and lowercased.
"""

import re
from typing import Any, List

_WHITESPACE = re.compile(r'\s+')


def normalize_text(text: Any) -> str:
    """
    Canonicalize free text for comparison.

    Trims leading/trailing whitespace, collapses internal whitespace runs
    to a single space and lowercases.

    Args:
        text: Raw field value (None and non-strings yield '')

    Returns:
        Normalized text

    Examples:
        >>> normalize_text("  Glucose   Standard ")
        'glucose standard'
        >>> normalize_text(None)
        ''
    """
    if not text or not isinstance(text, str):
        return ''
    return _WHITESPACE.sub(' ', text.strip()).lower()


class TextNormalizer:
    """
    Normalizes register text for indexing and matching.

    Unlike chemical-name normalizers this one is deliberately shallow:
    lot codes, registry ids and supplier names must stay recognisable,
    so only whitespace and case are canonicalized.
    """

    MIN_TOKEN_LENGTH = 2

    def normalize(self, text: Any) -> str:
        """Apply the full normalization (trim, collapse, lowercase)."""
        return normalize_text(text)

    def collapse(self, text: Any) -> str:
        """Trim and collapse whitespace without case folding."""
        if not text or not isinstance(text, str):
            return ''
        return _WHITESPACE.sub(' ', text.strip())

    def tokenize(self, text: Any, min_length: int = MIN_TOKEN_LENGTH,
                 case_sensitive: bool = False) -> List[str]:
        """
        Split text into normalized word tokens.

        Args:
            text: Raw text
            min_length: Tokens shorter than this are discarded
            case_sensitive: Skip case folding

        Returns:
            Tokens in order of appearance (duplicates kept)
        """
        prepared = self.collapse(text) if case_sensitive else self.normalize(text)
        if not prepared:
            return []
        return [word for word in prepared.split(' ') if len(word) >= min_length]
