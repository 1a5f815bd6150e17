"""Whitespace tokenizer for input lines."""

from __future__ import annotations

import re

# Space and horizontal tab only; other whitespace belongs to the token.
_DELIMITERS = re.compile(r"[ \t]+")


def tokenize(line: str) -> list[str]:
    """Split *line* into non-empty tokens separated by spaces and tabs.

    There is no quoting or escaping. Runs of delimiters collapse, so a blank
    line yields an empty list.
    """
    return [token for token in _DELIMITERS.split(line) if token]


def ends_with_delimiter(line: str) -> bool:
    """Return True if *line* is non-empty and its last character is whitespace."""
    return bool(line) and line[-1].isspace()
