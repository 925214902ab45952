"""
Completion item synthesis.

Turns classified context flags into candidate completion items using the
static reference tables. The synthesizer holds no mutable state, so the same
flags always produce the same ordered list.
"""

import logging
from typing import List, Optional

from lsprotocol import types

from .models import ContextFlags
from .reference_tables import (
    BINDS_BLOCK,
    PropertyDefinition,
    ReferenceTables,
    ValueKind,
)

logger = logging.getLogger(__name__)

# Sort key prefixes inside the binds block: the next keystroke is most likely
# a modifier, then a key, then the action.
SORT_MODIFIER = "0"
SORT_SPECIAL_KEY = "1"
SORT_ACTION = "2"
SORT_PROPERTY = "3"
SORT_VALUE = "0"
SORT_LITERAL = "1"


def _sort_key(prefix: str, index: int) -> str:
    return f"{prefix}_{index:03d}"


class CompletionSynthesizer:
    """Builds and resolves completion items from context flags."""

    def __init__(self, tables: ReferenceTables):
        self._tables = tables

    def synthesize(self, flags: ContextFlags) -> List[types.CompletionItem]:
        """
        Produce the sorted candidate list for a completion request.

        A known property followed by ``=`` yields value completions only.
        Otherwise categories are unioned according to the flags. Items are
        never deduplicated across categories.

        Args:
            flags: Classified cursor context

        Returns:
            Completion items ordered by sort key, falling back to label
        """
        definition = None
        if flags.after_property_assignment and flags.property_name:
            definition = self._tables.get_property(flags.property_name)

        if definition is not None:
            items = self._value_items(definition) + self._literal_items(SORT_LITERAL)
        else:
            items = self._context_items(flags)

        return sorted(items, key=lambda item: item.sort_text or item.label)

    def _context_items(self, flags: ContextFlags) -> List[types.CompletionItem]:
        in_binds = flags.is_inside(BINDS_BLOCK)
        items: List[types.CompletionItem] = []

        if in_binds and flags.at_line_start:
            items.extend(self._modifier_items())
            items.extend(self._special_key_items())

        if (flags.at_line_start or flags.after_open_brace) and not in_binds:
            items.extend(self._node_items())
            items.extend(self._flag_items())

        if flags.after_property_assignment:
            # Unknown property: any literal is a plausible value.
            items.extend(self._literal_items(SORT_LITERAL))
            items.append(self._string_item())
        else:
            block = self._innermost_block(flags)
            items.extend(self._property_items(block, SORT_PROPERTY if in_binds else None))

        if flags.after_bare_node_name or in_binds:
            items.extend(self._action_items(SORT_ACTION if in_binds else None))

        if flags.after_bare_node_name:
            items.extend(self._literal_items(None))

        return items

    def _innermost_block(self, flags: ContextFlags) -> Optional[str]:
        for name in self._tables.block_priority:
            if name in flags.enclosing_blocks:
                return name
        return None

    def _modifier_items(self) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=f"{modifier}+",
                kind=types.CompletionItemKind.Keyword,
                detail="Key modifier",
                insert_text=f"{modifier}+",
                sort_text=_sort_key(SORT_MODIFIER, index),
                data=f"modifier_{index}",
            )
            for index, modifier in enumerate(self._tables.key_modifiers)
        ]

    def _special_key_items(self) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=key,
                kind=types.CompletionItemKind.Constant,
                detail="Special key",
                insert_text=key,
                sort_text=_sort_key(SORT_SPECIAL_KEY, index),
                data=f"key_{index}",
            )
            for index, key in enumerate(self._tables.special_keys)
        ]

    def _node_items(self) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=node,
                kind=types.CompletionItemKind.Class,
                detail=f"{node} configuration block",
                insert_text=node,
                data=f"node_{index}",
            )
            for index, node in enumerate(self._tables.nodes)
        ]

    def _flag_items(self) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=flag,
                kind=types.CompletionItemKind.Constant,
                detail="Toggle flag (enabled when present)",
                insert_text=flag,
                data=f"flag_{index}",
            )
            for index, flag in enumerate(self._tables.flags)
        ]

    def _property_items(self, block: Optional[str], sort_prefix: Optional[str]) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=definition.name,
                kind=types.CompletionItemKind.Property,
                detail=f"{definition.name} property ({definition.value_kind})",
                insert_text=f"{definition.name}=",
                sort_text=_sort_key(sort_prefix, index) if sort_prefix else None,
                data=f"prop_{index}",
            )
            for index, definition in enumerate(self._tables.properties_for_block(block))
        ]

    def _action_items(self, sort_prefix: Optional[str]) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=action,
                kind=types.CompletionItemKind.Function,
                detail=f"{action} action",
                insert_text=action,
                sort_text=_sort_key(sort_prefix, index) if sort_prefix else None,
                data=f"action_{index}",
            )
            for index, action in enumerate(self._tables.actions)
        ]

    def _literal_items(self, sort_prefix: Optional[str]) -> List[types.CompletionItem]:
        return [
            types.CompletionItem(
                label=spelling,
                kind=types.CompletionItemKind.Value,
                detail=description,
                insert_text=spelling,
                sort_text=_sort_key(sort_prefix, index) if sort_prefix else None,
                data=f"literal_{index}",
            )
            for index, (spelling, description) in enumerate(self._tables.universal_literals)
        ]

    def _string_item(self, sort_text: Optional[str] = None) -> types.CompletionItem:
        return types.CompletionItem(
            label='""',
            kind=types.CompletionItemKind.Snippet,
            detail="Empty string",
            insert_text='"$0"',
            insert_text_format=types.InsertTextFormat.Snippet,
            sort_text=sort_text,
            data="value_string",
        )

    def _value_items(self, definition: PropertyDefinition) -> List[types.CompletionItem]:
        """Value completions tailored to a property's declared value kind."""
        kind = definition.value_kind
        values: List[types.CompletionItem] = []

        def value(label: str, detail: str, insert_text: Optional[str] = None,
                  item_kind: types.CompletionItemKind = types.CompletionItemKind.Value,
                  snippet: bool = False) -> None:
            index = len(values)
            values.append(types.CompletionItem(
                label=label,
                kind=item_kind,
                detail=detail,
                insert_text=insert_text or label,
                insert_text_format=types.InsertTextFormat.Snippet if snippet else None,
                sort_text=_sort_key(SORT_VALUE, index),
                data=f"value_{kind}_{index}",
            ))

        if kind == ValueKind.BOOLEAN:
            value("#true", "Boolean true value")
            value("#false", "Boolean false value")
            value("true", "Bare true")
            value("false", "Bare false")
        elif kind == ValueKind.ENUM:
            for member in self._tables.enums.get(definition.enum_name or definition.name, ()):
                value(f'"{member}"', f"{definition.name} value", item_kind=types.CompletionItemKind.EnumMember)
        elif kind == ValueKind.NUMBER:
            value("0", "Number")
        elif kind == ValueKind.COLOR:
            for example in self._tables.color_examples:
                value(example, "Color", item_kind=types.CompletionItemKind.Color)
        elif kind == ValueKind.POSITION:
            value("x=0 y=0", "Position", "x=${1:0} y=${2:0}", types.CompletionItemKind.Snippet, snippet=True)
        elif kind == ValueKind.STRING:
            values.append(self._string_item(_sort_key(SORT_VALUE, 0)))
        else:
            logger.warning(f"Unknown value kind '{kind}' for property {definition.name}")

        return values

    def resolve(self, item: types.CompletionItem) -> types.CompletionItem:
        """
        Fill in an item's documentation from its data tag.

        Pure lookup: the context is not re-derived and unknown tags leave
        the item untouched.
        """
        tag = str(item.data) if item.data is not None else ""

        if tag.startswith("node_"):
            item.documentation = f"KDL configuration node. Use with child blocks: {item.label} {{ }}"
        elif tag.startswith("flag_"):
            item.documentation = (
                "Niri toggle flag. When present, this feature is enabled. "
                "Comment out or remove to disable."
            )
        elif tag.startswith("prop_"):
            definition = self._tables.get_property(item.label)
            description = f"{definition.description}. " if definition else ""
            item.documentation = f"{description}KDL property. Use with assignment: {item.label}=value"
        elif tag.startswith("action_"):
            item.documentation = "Niri action command. Can be bound to keys or triggered programmatically."
        elif tag.startswith("modifier_"):
            item.documentation = f"Key modifier. Combine with a key: {item.label}T"
        elif tag.startswith("key_"):
            item.documentation = f"Special key name, usable in a binding such as Mod+{item.label}"
        elif tag.startswith(("value_", "literal_")):
            item.documentation = f"KDL value: {item.label}"

        return item
