#!/usr/bin/env python3
"""
Positional placeholder formatting.

Templates reference values by 1-based position:

    >>> format_text("Hello $1, welcome to $2!", "Alice", "Wonderland")
    'Hello Alice, welcome to Wonderland!'

A placeholder is ``$`` followed by one or more decimal digits. Placeholders
whose position has no value (including ``$0``) are left in the output as
written. Replacement values are inserted verbatim and never rescanned.
"""

import re
from typing import Optional

PLACEHOLDER_PATTERN = re.compile(r'\$([0-9]+)')


def has_placeholders(text: Optional[str]) -> bool:
    """Return True if text contains at least one ``$N`` placeholder."""
    if not text:
        return False
    return PLACEHOLDER_PATTERN.search(text) is not None


# Name used by the lookup facade
is_formattable = has_placeholders


def count_placeholders(text: Optional[str]) -> int:
    """Count ``$N`` placeholders (non-overlapping, left to right)."""
    if not text:
        return 0
    return sum(1 for _ in PLACEHOLDER_PATTERN.finditer(text))


def format_text(text: Optional[str], *values: str) -> str:
    """
    Replace ``$N`` placeholders with positional values.

    Args:
        text: Template text (None is treated as empty)
        *values: Replacement values; ``$1`` is ``values[0]``

    Returns:
        Formatted text. Out-of-range placeholders are kept unchanged.
    """
    if text is None:
        return ""

    def _substitute(match: re.Match) -> str:
        index = int(match.group(1)) - 1
        if 0 <= index < len(values):
            return str(values[index])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, text)


def extract_placeholders(text: Optional[str]) -> list[str]:
    """
    Extract placeholder tokens from text.

    Args:
        text: Text to scan

    Returns:
        List of placeholder strings found (deduplicated, order preserved)
    """
    if not text:
        return []
    return list(dict.fromkeys(m.group(0) for m in PLACEHOLDER_PATTERN.finditer(text)))


def validate_placeholders(source: Optional[str], translation: Optional[str]) -> list[str]:
    """
    Check that every placeholder of the source text survives in a translation.

    Args:
        source: Reference text
        translation: Translated text

    Returns:
        List of missing placeholder error messages
    """
    translated = set(extract_placeholders(translation))
    return [
        f"Missing placeholder in translation: {placeholder}"
        for placeholder in extract_placeholders(source)
        if placeholder not in translated
    ]


__all__ = [
    "PLACEHOLDER_PATTERN",
    "has_placeholders",
    "is_formattable",
    "count_placeholders",
    "format_text",
    "extract_placeholders",
    "validate_placeholders",
]
