"""Derive completion context flags from the text around the cursor."""

import logging
import re

from lsprotocol import types

from .block_oracle import is_inside
from .models import ContextFlags, Snapshot
from .reference_tables import ReferenceTables

logger = logging.getLogger(__name__)

# KDL identifiers may contain hyphens, so "word" below means [\w-].
AT_LINE_START = re.compile(r"^\s*$")
AFTER_OPEN_BRACE = re.compile(r"\{\s*$")
AFTER_PROPERTY_ASSIGNMENT = re.compile(r"(?P<name>[\w-]+)=\s*$")
AFTER_BARE_NODE_NAME = re.compile(r"^\s*[\w-]+[ \t]+$")


def classify_context(
    snapshot: Snapshot,
    position: types.Position,
    tables: ReferenceTables,
) -> ContextFlags:
    """
    Classify the cursor position for completion.

    Args:
        snapshot: Document snapshot
        position: Cursor position
        tables: Reference tables providing the recognized block names

    Returns:
        Context flags; several may be set at once
    """
    prefix = snapshot.line_prefix(position)
    offset = snapshot.offset_at(position)

    assignment = AFTER_PROPERTY_ASSIGNMENT.search(prefix)
    enclosing = frozenset(
        name for name in tables.recognized_blocks
        if is_inside(snapshot.text, offset, name)
    )

    flags = ContextFlags(
        at_line_start=bool(AT_LINE_START.match(prefix)),
        after_open_brace=bool(AFTER_OPEN_BRACE.search(prefix)),
        after_property_assignment=assignment is not None,
        property_name=assignment.group("name") if assignment else None,
        after_bare_node_name=bool(AFTER_BARE_NODE_NAME.match(prefix)),
        enclosing_blocks=enclosing,
    )
    logger.debug(f"Completion context at {position.line}:{position.character}: {flags}")
    return flags
