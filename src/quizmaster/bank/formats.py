"""Classify extracted quiz text into one of the known authoring formats."""

from __future__ import annotations

import re

from .models import FormatKind

__all__ = [
    "BLOCK_SEPARATOR",
    "OPTION_PREFIX",
    "FormatKind",
    "detect_format",
]

BLOCK_SEPARATOR = "+++++"
OPTION_PREFIX = "====="

_STARRED_OPTION = re.compile(r"\*[A-D]\)")


def detect_format(text: str) -> FormatKind:
    """Return the format ``text`` is written in.

    Checks run in a fixed order and the first hit wins, so a document carrying
    both delimiter tokens and starred options is a delimiter-block document.
    Anything unrecognised falls through to :attr:`FormatKind.DEFAULT`; that
    parser reports a missing title when it does not match either.
    """

    if BLOCK_SEPARATOR in text and OPTION_PREFIX in text:
        return FormatKind.DELIMITER_BLOCK
    if _STARRED_OPTION.search(text):
        return FormatKind.ASTERISK_MARKED
    return FormatKind.DEFAULT
