"""Hover documentation for tokens under the cursor."""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from lsprotocol import types

from .hover_docs import HOVER_DOCS, HoverDoc
from .models import Snapshot, utf16_length
from .reference_tables import ReferenceTables

logger = logging.getLogger(__name__)

TOKEN_CHARACTER = re.compile(r"[#\w.-]")
UNIVERSAL_LITERAL = re.compile(r"^#?(true|false|null|nan|-?inf)$")
TAG_MARKER = "#"


@dataclass(frozen=True)
class HoverEntry:
    """What the resolver found for a token, before formatting."""
    label: str
    description: str
    example: Optional[str] = None
    icon: Optional[str] = None


def token_at(line: str, index: int) -> Optional[Tuple[int, int]]:
    """
    Find the token around ``index`` on ``line``.

    Returns:
        (start, end) string indices, or None when the cursor is not on a token
    """
    start = end = index
    while start > 0 and TOKEN_CHARACTER.match(line[start - 1]):
        start -= 1
    while end < len(line) and TOKEN_CHARACTER.match(line[end]):
        end += 1
    if start == end:
        return None
    return start, end


class HoverResolver:
    """Looks tokens up in the reference tables and formats Markdown."""

    def __init__(self, tables: ReferenceTables, docs: Dict[str, HoverDoc] = HOVER_DOCS):
        self._tables = tables
        self._docs = docs

    def lookup(self, token: str) -> Optional[HoverEntry]:
        """
        Resolve a token to documentation.

        A leading tag marker is ignored for table lookups. Tables are tried
        in order: properties, nodes, flags, then the universal literals.
        """
        key = token[1:] if token.startswith(TAG_MARKER) else token

        definition = self._tables.get_property(key)
        if definition is not None:
            return HoverEntry(
                label=token,
                description=f"{definition.description} ({definition.value_kind})",
                example=f"{key}=",
                icon="🔧",
            )

        if key in self._tables.nodes:
            doc = self._docs.get(key)
            return HoverEntry(
                label=token,
                description=doc.description if doc else f"{key} configuration block",
                example=doc.example if doc else None,
                icon=doc.emoji if doc else "📦",
            )

        if key in self._tables.flags:
            doc = self._docs.get(key)
            return HoverEntry(
                label=token,
                description=doc.description if doc else "Toggle flag (enabled when present)",
                example=doc.example if doc else None,
                icon=doc.emoji if doc else "🚩",
            )

        if UNIVERSAL_LITERAL.match(token):
            doc = self._docs.get(token) or self._docs.get(key)
            return HoverEntry(
                label=token,
                description=doc.description if doc else "KDL literal value",
                example=doc.example if doc else None,
                icon=doc.emoji if doc else None,
            )

        return None

    @staticmethod
    def to_markdown(entry: HoverEntry) -> str:
        markdown = f"**{entry.label}**\n\n"
        if entry.icon:
            markdown += f"{entry.icon} "
        markdown += f"{entry.description}\n\n"
        if entry.example:
            markdown += f"```kdl\n{entry.example}\n```\n"
        return markdown

    def hover(self, snapshot: Snapshot, position: types.Position) -> Optional[types.Hover]:
        """
        Build hover content for the token at ``position``.

        Returns:
            Hover with Markdown content and the token range, or None when
            there is nothing to show
        """
        if position.line >= len(snapshot.lines):
            return None

        line = snapshot.lines[position.line]
        index = snapshot.offset_at(position) - snapshot.line_starts[position.line]
        span = token_at(line, index)
        if span is None:
            return None

        token = line[span[0]:span[1]]
        entry = self.lookup(token)
        if entry is None:
            logger.debug(f"No hover documentation for '{token}'")
            return None

        return types.Hover(
            contents=types.MarkupContent(kind=types.MarkupKind.Markdown, value=self.to_markdown(entry)),
            range=types.Range(
                start=types.Position(line=position.line, character=utf16_length(line[:span[0]])),
                end=types.Position(line=position.line, character=utf16_length(line[:span[1]])),
            ),
        )
