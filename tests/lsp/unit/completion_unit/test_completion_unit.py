from lsprotocol import types

from niri_lsp.lsp.utils.models import ContextFlags


def labels(items):
    return [item.label for item in items]


def kinds(items, kind: types.CompletionItemKind):
    return {item.label for item in items if item.kind == kind}


def test_completion_is_idempotent(complete_at):
    marked = "input {\n    touchpad {\n        |"
    assert complete_at(marked) == complete_at(marked)


def test_input_block_offers_input_properties(complete_at):
    properties = kinds(complete_at("input {\n    |"), types.CompletionItemKind.Property)

    assert "accel-speed" in properties
    assert "scroll-method" in properties
    assert "mode" not in properties


def test_top_level_offers_nodes_and_flags(complete_at):
    items = complete_at("|")
    found = set(labels(items))

    assert {"input", "output", "binds", "layout"} <= found
    assert {"prefer-no-csd", "tap"} <= found
    assert "Mod+" not in found


def test_binds_offers_keys_not_nodes(complete_at):
    items = complete_at("binds {\n    |")
    found = labels(items)

    assert "Mod+" in found
    assert "Escape" in found
    assert "spawn" in found
    assert "input" not in found
    assert "prefer-no-csd" not in found


def test_binds_ordering_modifiers_then_keys_then_actions(complete_at):
    items = complete_at("binds {\n    |")
    order = [item.kind for item in items]

    last_modifier = max(i for i, item in enumerate(items) if item.label.endswith("+"))
    first_action = min(i for i, kind in enumerate(order) if kind == types.CompletionItemKind.Function)
    first_key = min(i for i, item in enumerate(items) if str(item.data).startswith("key_"))
    assert last_modifier < first_key < first_action


def test_boolean_property_values(complete_at):
    items = complete_at("binds {\n    Mod+Q allow-inhibiting=|")
    found = labels(items)

    assert found[:4] == ["#true", "#false", "true", "false"]
    assert {"#null", "#nan", "#inf", "#-inf", "null", "nan", "inf", "-inf"} <= set(found)
    assert not kinds(items, types.CompletionItemKind.EnumMember)
    assert not kinds(items, types.CompletionItemKind.Class)


def test_enum_property_values(complete_at):
    items = complete_at("input {\n    touchpad {\n        scroll-method=|")
    members = [item.label for item in items if item.kind == types.CompletionItemKind.EnumMember]

    assert members == ['"no-scroll"', '"two-finger"', '"edge"', '"on-button-down"']
    assert labels(items)[:len(members)] == members


def test_color_and_position_values(synthesizer):
    color = synthesizer.synthesize(ContextFlags(after_property_assignment=True, property_name="active-color"))
    assert '"#7fc8ff"' in labels(color)

    position = synthesizer.synthesize(ContextFlags(after_property_assignment=True, property_name="offset"))
    snippet = position[0]
    assert snippet.insert_text == "x=${1:0} y=${2:0}"
    assert snippet.insert_text_format == types.InsertTextFormat.Snippet


def test_string_property_offers_empty_string_snippet(synthesizer):
    items = synthesizer.synthesize(ContextFlags(after_property_assignment=True, property_name="app-id"))

    assert items[0].insert_text == '"$0"'
    assert items[0].insert_text_format == types.InsertTextFormat.Snippet


def test_unknown_property_offers_literals(synthesizer):
    items = synthesizer.synthesize(ContextFlags(after_property_assignment=True, property_name="no-such-thing"))
    found = labels(items)

    assert "#true" in found
    assert '""' in found
    assert not kinds(items, types.CompletionItemKind.Property)


def test_bare_node_name_offers_actions_and_literals(complete_at):
    found = set(labels(complete_at("spawn-at-startup |")))

    assert "spawn" in found
    assert "#true" in found


def test_innermost_block_wins(complete_at):
    properties = kinds(complete_at("window-rule {\n    border {\n        |"), types.CompletionItemKind.Property)

    assert "active-color" in properties
    assert "app-id" not in properties


def test_unknown_block_offers_every_property(complete_at, tables):
    properties = kinds(complete_at("animations {\n    |"), types.CompletionItemKind.Property)
    assert properties == {p.name for p in tables.properties}


def test_resolve_adds_documentation(synthesizer):
    node = synthesizer.resolve(types.CompletionItem(label="input", data="node_0"))
    assert "input { }" in node.documentation

    prop = synthesizer.resolve(types.CompletionItem(label="accel-speed", data="prop_0"))
    assert prop.documentation.startswith("Pointer acceleration speed")
    assert "accel-speed=value" in prop.documentation

    flag = synthesizer.resolve(types.CompletionItem(label="tap", data="flag_0"))
    assert "toggle flag" in flag.documentation

    action = synthesizer.resolve(types.CompletionItem(label="spawn", data="action_0"))
    assert "action" in action.documentation


def test_resolve_leaves_unknown_tags_untouched(synthesizer):
    item = types.CompletionItem(label="x", data="mystery_1")
    assert synthesizer.resolve(item).documentation is None

    untagged = types.CompletionItem(label="y")
    assert synthesizer.resolve(untagged).documentation is None
