import pytest
from lsprotocol import types

from niri_lsp.lsp.utils.hover_resolver import token_at


@pytest.mark.parametrize(
    "line, index, expected",
    [
        ("    window-rule {", 8, (4, 15)),
        ("    window-rule {", 4, (4, 15)),
        ("    window-rule {", 15, (4, 15)),
        ("open-floating #true", 16, (14, 19)),
        ("scale 1.25", 8, (6, 10)),
        ("    ", 2, None),
    ],
)
def test_token_at(line, index, expected):
    assert token_at(line, index) == expected


def test_hover_on_node(resolver, make_snapshot):
    snapshot = make_snapshot("input {\n}")
    hover = resolver.hover(snapshot, types.Position(line=0, character=2))

    assert hover is not None
    assert hover.contents.kind == types.MarkupKind.Markdown
    assert hover.contents.value.startswith("**input**\n\n")
    assert "```kdl\n" in hover.contents.value
    assert hover.range == types.Range(
        start=types.Position(line=0, character=0),
        end=types.Position(line=0, character=5),
    )


def test_hover_on_tagged_literal(resolver, make_snapshot):
    snapshot = make_snapshot("    open-floating #true")
    hover = resolver.hover(snapshot, types.Position(line=0, character=20))

    assert hover is not None
    assert hover.contents.value.startswith("**#true**")
    assert "enabled" in hover.contents.value
    assert hover.range.start.character == 18


def test_hover_on_property_mentions_value_kind(resolver, make_snapshot):
    snapshot = make_snapshot("    accel-speed 0.2")
    hover = resolver.hover(snapshot, types.Position(line=0, character=6))

    assert hover is not None
    assert "(number)" in hover.contents.value


def test_hover_on_flag(resolver, make_snapshot):
    hover = resolver.hover(make_snapshot("prefer-no-csd"), types.Position(line=0, character=0))

    assert hover is not None
    assert hover.contents.value.startswith("**prefer-no-csd**")


def test_hover_on_unknown_token(resolver, make_snapshot):
    assert resolver.hover(make_snapshot("frobnicate 1"), types.Position(line=0, character=3)) is None


def test_hover_on_whitespace(resolver, make_snapshot):
    assert resolver.hover(make_snapshot("input   {"), types.Position(line=0, character=6)) is None


def test_hover_past_end_of_document(resolver, make_snapshot):
    assert resolver.hover(make_snapshot("input"), types.Position(line=5, character=0)) is None


def test_hover_range_counts_utf16_units(resolver, make_snapshot):
    snapshot = make_snapshot('"😀" #null')
    hover = resolver.hover(snapshot, types.Position(line=0, character=6))

    assert hover is not None
    assert hover.range.start.character == 5
    assert hover.range.end.character == 10


def test_lookup_literals_without_docs(tables):
    from niri_lsp.lsp.utils.hover_resolver import HoverResolver

    entry = HoverResolver(tables, docs={}).lookup("-inf")
    assert entry is not None
    assert entry.description == "KDL literal value"


def test_property_sharing_a_node_name_uses_property_docs(resolver, make_snapshot):
    snapshot = make_snapshot('input {\n    keyboard {\n        xkb {\n            layout "us"')
    hover = resolver.hover(snapshot, types.Position(line=3, character=14))

    assert hover is not None
    value = hover.contents.value
    assert "XKB keyboard layout" in value
    assert "🔧" in value
    assert "📐" not in value
    assert "gaps" not in value
    assert "```kdl\nlayout=\n```" in value
