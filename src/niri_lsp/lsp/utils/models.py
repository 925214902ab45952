"""
Data models for the Niri KDL language server.

This module defines the transient structures shared by the analysis core:
immutable document snapshots, validation findings and completion context
flags. None of them outlive a single request.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from functools import cached_property
from typing import FrozenSet, List, Optional

from lsprotocol import types
from pygls.workspace import TextDocument

LINE_BREAK = re.compile(r"\r?\n")


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units."""
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


def utf16_to_index(line: str, character: int) -> int:
    """Convert a UTF-16 column on ``line`` into a Python string index."""
    units = 0
    for index, ch in enumerate(line):
        if units >= character:
            return index
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(line)


@dataclass(frozen=True)
class Snapshot:
    """
    An immutable (version, text) view of a document.

    Every diagnostic, completion or hover computation works on exactly one
    snapshot, so results can never mix two versions of the same document.

    Attributes:
        uri: Document identity
        version: Monotonically increasing document version
        language_id: Language tag reported by the client (may be None)
        text: Full document content
    """
    uri: str
    version: int
    language_id: Optional[str]
    text: str

    @classmethod
    def from_document(cls, document: TextDocument) -> "Snapshot":
        return cls(
            uri=document.uri,
            version=document.version or 0,
            language_id=document.language_id,
            text=document.source,
        )

    @cached_property
    def lines(self) -> List[str]:
        return LINE_BREAK.split(self.text)

    @cached_property
    def line_starts(self) -> List[int]:
        starts = [0]
        for match in LINE_BREAK.finditer(self.text):
            starts.append(match.end())
        return starts

    def offset_at(self, position: types.Position) -> int:
        """
        Convert an LSP position into an absolute string offset.

        Lines past the end clamp to the end of the document, and characters
        past the end of a line clamp to the end of that line.
        """
        if position.line >= len(self.lines):
            return len(self.text)
        line = self.lines[position.line]
        return self.line_starts[position.line] + utf16_to_index(line, position.character)

    def position_at(self, offset: int) -> types.Position:
        """
        Convert an absolute string offset into an LSP position.

        Uses binary search over the line start table, then measures the
        column in UTF-16 code units.

        Raises:
            ValueError: If offset is outside the document
        """
        if offset < 0 or offset > len(self.text):
            raise ValueError(f"Offset {offset} is outside text range [0, {len(self.text)}]")

        line = bisect_right(self.line_starts, offset) - 1
        column = min(offset - self.line_starts[line], len(self.lines[line]))
        return types.Position(line=line, character=utf16_length(self.lines[line][:column]))

    def line_prefix(self, position: types.Position) -> str:
        """Text from the start of the cursor's line up to the cursor."""
        if position.line >= len(self.lines):
            return ""
        line = self.lines[position.line]
        return line[:utf16_to_index(line, position.character)]


@dataclass(frozen=True)
class Finding:
    """
    A problem found by the validator pipeline, anchored by absolute offsets.

    Findings are converted into protocol diagnostics at the feature boundary,
    which keeps the scanners free of position arithmetic.
    """
    start: int
    end: int
    severity: types.DiagnosticSeverity
    message: str


@dataclass(frozen=True)
class ContextFlags:
    """
    Positional context derived from the text around the cursor.

    Flags are not mutually exclusive; the completion synthesizer unions
    the categories they enable.
    """
    at_line_start: bool = False
    after_open_brace: bool = False
    after_property_assignment: bool = False
    property_name: Optional[str] = None
    after_bare_node_name: bool = False
    enclosing_blocks: FrozenSet[str] = field(default_factory=frozenset)

    def is_inside(self, block_name: str) -> bool:
        return block_name in self.enclosing_blocks
