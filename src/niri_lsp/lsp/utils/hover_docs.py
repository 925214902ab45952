"""Hover documentation for Niri configuration nodes and KDL literals."""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class HoverDoc:
    description: str
    example: Optional[str] = None
    emoji: Optional[str] = None


HOVER_DOCS: Dict[str, HoverDoc] = {
    # Top-level sections
    "input": HoverDoc(
        "Configure input devices and behavior (keyboard, touchpad, mouse, trackpoint, xkb).",
        'input {\n  keyboard {\n    xkb {\n      layout "us"\n    }\n  }\n}',
        "🛠️",
    ),
    "output": HoverDoc(
        "Configure display outputs (monitors): mode, scale, position, rotation.",
        'output "eDP-1" {\n  mode "1920x1080@60"\n  scale 1.2\n  position x=0 y=0\n}',
        "🖥️",
    ),
    "binds": HoverDoc(
        "Define keyboard shortcuts and actions. Each key binding is its own entry.",
        'binds {\n  Mod+T { spawn "alacritty"; }\n  Mod+Shift+Q { close-window; }\n}',
        "⌨️",
    ),
    "layout": HoverDoc(
        "Configure window layout, column widths, gaps, default size, etc.",
        "layout {\n  gaps 16\n  center-focused-column \"never\"\n}",
        "📐",
    ),
    "animations": HoverDoc(
        "Animation settings for window and workspace transitions.",
        "animations {\n  slowdown 1.5\n}",
        "🎞️",
    ),
    "window-rule": HoverDoc(
        "Defines how windows matching a given pattern should behave. "
        "You can nest `match` and configuration options inside.",
        'window-rule {\n  match app-id="org.wezfurlong.wezterm"\n  open-floating true\n}',
        "⚙️",
    ),
    "layer-rule": HoverDoc(
        "Rules for layer-shell surfaces such as panels and overlays.",
        'layer-rule {\n  match namespace="^notifications$"\n  block-out-from "screencast"\n}',
        "🧱",
    ),
    "match": HoverDoc(
        "Specifies matching rules for window conditions.\nCommon fields include `app-id` and `title`.",
        'match app-id="org.wezfurlong.wezterm" title="My Window"',
        "🔍",
    ),
    "switch-events": HoverDoc(
        "Actions to run on hardware switch events such as closing the lid.",
        'switch-events {\n  lid-close { spawn "systemctl" "suspend"; }\n}',
        "🔄",
    ),
    "gestures": HoverDoc("Configure touchpad and pointer gestures.", None, "✋"),
    "focus-ring": HoverDoc(
        "Ring drawn around the focused window.",
        'focus-ring {\n  width 4\n  active-color "#7fc8ff"\n}',
        "🔵",
    ),
    "border": HoverDoc(
        "Border drawn around every window.",
        'border {\n  width 2\n  inactive-color "#505050"\n}',
        "🔲",
    ),
    "shadow": HoverDoc(
        "Drop shadow rendered behind windows.",
        "shadow {\n  softness 30\n  spread 5\n  offset x=0 y=5\n}",
        "🌑",
    ),
    # Boolean literals
    "true": HoverDoc('Boolean literal representing "enabled" or "on"', "open-floating true", "✅"),
    "#true": HoverDoc('Boolean literal representing "enabled" or "on"', "open-floating #true", "✅"),
    "false": HoverDoc('Boolean literal representing "disabled" or "off"', "open-floating false", "❌"),
    "#false": HoverDoc('Boolean literal representing "disabled" or "off"', "open-floating #false", "❌"),
    # Special literals
    "null": HoverDoc("Represents a null value", "property=null", "⚪"),
    "#null": HoverDoc("Represents a null value", "property=#null", "⚪"),
    "nan": HoverDoc('Represents "not a number"', "property=nan", "⚠️"),
    "#nan": HoverDoc('Represents "not a number"', "property=#nan", "⚠️"),
    "inf": HoverDoc("Represents positive infinity", "property=inf", "♾️"),
    "#inf": HoverDoc("Represents positive infinity", "property=#inf", "♾️"),
    "-inf": HoverDoc("Represents negative infinity", "property=-inf", "♾️"),
    "#-inf": HoverDoc("Represents negative infinity", "property=#-inf", "♾️"),
}
