"""Brace-depth heuristic for "is this offset inside block X"."""

import re
from functools import lru_cache
from typing import Pattern


@lru_cache(maxsize=64)
def _block_opening(block_name: str) -> Pattern[str]:
    return re.compile(rf"\b{re.escape(block_name)}\s*\{{")


def last_block_opening(text: str, offset: int, block_name: str) -> int:
    """
    Index of the last ``block_name {`` opening before ``offset``, or -1.

    Args:
        text: Full document text
        offset: Absolute cursor offset
        block_name: Name of the block, matched on a word boundary
    """
    last = -1
    for match in _block_opening(block_name).finditer(text, 0, offset):
        last = match.start()
    return last


def is_inside(text: str, offset: int, block_name: str) -> bool:
    """
    Check whether ``offset`` lies inside the most recent unclosed ``block_name``.

    Anchors on the last opening of the block before the cursor and counts the
    braces between that opening and the cursor. This is not a real parse: a
    block name that appears inside a string literal, or braces inside strings
    and comments, will fool it.

    Args:
        text: Full document text
        offset: Absolute cursor offset
        block_name: Name of the block

    Returns:
        True if more braces were opened than closed since the block started
    """
    start = last_block_opening(text, offset, block_name)
    if start == -1:
        return False

    segment = text[start:offset]
    return segment.count("{") > segment.count("}")
