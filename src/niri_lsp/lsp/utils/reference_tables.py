"""Static reference data for Niri KDL configuration files."""

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


class ValueKind:
    """Declared value kinds for properties."""

    BOOLEAN = "boolean"
    ENUM = "enum"
    NUMBER = "number"
    COLOR = "color"
    POSITION = "position"
    STRING = "string"


@dataclass(frozen=True)
class PropertyDefinition:
    name: str
    value_kind: str
    description: str
    enum_name: Optional[str] = None


NODES: Tuple[str, ...] = (
    "input", "output", "binds", "layout", "animations", "window-rule",
    "keyboard", "touchpad", "mouse", "trackpoint", "xkb",
    "focus-ring", "border", "shadow", "struts", "hotkey-overlay",
    "preset-column-widths", "preset-window-heights",
    "match", "exclude", "layer-rule", "cursor", "environment",
    "spawn-at-startup", "gestures", "switch-events", "workspace",
)

FLAGS: Tuple[str, ...] = (
    "tap", "dwt", "dwtp", "drag", "drag-lock", "natural-scroll",
    "numlock", "off", "on", "prefer-no-csd", "warp-mouse-to-focus",
    "skip-at-startup", "disabled-on-external-mouse", "focus-follows-mouse",
    "always-center-single-column", "disable-power-key-handling",
)

KEY_MODIFIERS: Tuple[str, ...] = ("Mod", "Super", "Alt", "Ctrl", "Shift")

SPECIAL_KEYS: Tuple[str, ...] = (
    "Escape", "Return", "Space", "Tab", "Backspace", "Delete",
    "Left", "Right", "Up", "Down",
    "Home", "End", "Page_Up", "Page_Down",
    "F1", "F2", "F3", "F4", "F5", "F6", "F7", "F8", "F9", "F10", "F11", "F12",
    "XF86AudioRaiseVolume", "XF86AudioLowerVolume", "XF86AudioMute",
    "XF86AudioMicMute", "XF86AudioPlay", "XF86AudioStop", "XF86AudioPrev", "XF86AudioNext",
    "XF86MonBrightnessUp", "XF86MonBrightnessDown",
    "Print", "WheelScrollDown", "WheelScrollUp", "WheelScrollLeft", "WheelScrollRight",
    "TouchpadScrollDown", "TouchpadScrollUp",
)

ACTIONS: Tuple[str, ...] = (
    "spawn", "spawn-sh", "close-window", "quit",
    "focus-column-left", "focus-column-right", "focus-window-up", "focus-window-down",
    "move-column-left", "move-column-right", "move-window-up", "move-window-down",
    "focus-workspace-up", "focus-workspace-down", "focus-monitor-left", "focus-monitor-right",
    "maximize-column", "fullscreen-window", "toggle-window-floating",
    "screenshot", "screenshot-screen", "screenshot-window",
    "power-off-monitors", "show-hotkey-overlay",
)

ENUMS: Dict[str, Tuple[str, ...]] = {
    "accel-profile": ("adaptive", "flat"),
    "scroll-method": ("no-scroll", "two-finger", "edge", "on-button-down"),
    "transform": (
        "normal", "90", "180", "270",
        "flipped", "flipped-90", "flipped-180", "flipped-270",
    ),
    "center-focused-column": ("never", "always", "on-overflow"),
    "tap-button-map": ("left-right-middle", "left-middle-right"),
    "click-method": ("button-areas", "clickfinger"),
    "track-layout": ("global", "window"),
    "block-out-from": ("screencast", "screen-capture"),
}

_B, _E, _N, _C, _P, _S = (
    ValueKind.BOOLEAN, ValueKind.ENUM, ValueKind.NUMBER,
    ValueKind.COLOR, ValueKind.POSITION, ValueKind.STRING,
)

PROPERTIES: Tuple[PropertyDefinition, ...] = (
    # output
    PropertyDefinition("mode", _S, 'Output resolution and refresh rate, e.g. "1920x1080@60"'),
    PropertyDefinition("scale", _N, "Output scale factor"),
    PropertyDefinition("transform", _E, "Output rotation and flip", "transform"),
    PropertyDefinition("position", _P, "Output position in the global coordinate space"),
    PropertyDefinition("x", _N, "Horizontal coordinate"),
    PropertyDefinition("y", _N, "Vertical coordinate"),
    PropertyDefinition("on-demand", _B, "Only enable variable refresh rate when a window requests it"),
    PropertyDefinition("backdrop-color", _C, "Color shown behind workspaces in the overview"),
    # input
    PropertyDefinition("accel-speed", _N, "Pointer acceleration speed, from -1.0 to 1.0"),
    PropertyDefinition("accel-profile", _E, "Pointer acceleration profile", "accel-profile"),
    PropertyDefinition("scroll-method", _E, "How scroll events are generated", "scroll-method"),
    PropertyDefinition("scroll-button", _N, "Button code used for on-button-down scrolling"),
    PropertyDefinition("scroll-factor", _N, "Multiplier applied to scroll distances"),
    PropertyDefinition("tap-button-map", _E, "Button mapping for multi-finger taps", "tap-button-map"),
    PropertyDefinition("click-method", _E, "How clicks are generated on clickpads", "click-method"),
    PropertyDefinition("layout", _S, "XKB keyboard layout, e.g. \"us,ru\""),
    PropertyDefinition("variant", _S, "XKB layout variant"),
    PropertyDefinition("options", _S, "XKB options, e.g. \"grp:win_space_toggle\""),
    PropertyDefinition("model", _S, "XKB keyboard model"),
    PropertyDefinition("rules", _S, "XKB rules file"),
    PropertyDefinition("repeat-delay", _N, "Key repeat delay in milliseconds"),
    PropertyDefinition("repeat-rate", _N, "Key repeat rate in characters per second"),
    PropertyDefinition("track-layout", _E, "Whether the keyboard layout is global or per window", "track-layout"),
    # layout and decorations
    PropertyDefinition("gaps", _N, "Gap between windows and screen edges in logical pixels"),
    PropertyDefinition("center-focused-column", _E, "When to center the focused column", "center-focused-column"),
    PropertyDefinition("background-color", _C, "Workspace background color"),
    PropertyDefinition("width", _N, "Width in logical pixels"),
    PropertyDefinition("height", _N, "Height in logical pixels"),
    PropertyDefinition("active-color", _C, "Color used for the focused window"),
    PropertyDefinition("inactive-color", _C, "Color used for unfocused windows"),
    PropertyDefinition("urgent-color", _C, "Color used for windows requesting attention"),
    PropertyDefinition("softness", _N, "Shadow blur radius"),
    PropertyDefinition("spread", _N, "Shadow expansion beyond the window"),
    PropertyDefinition("offset", _P, "Shadow offset relative to the window"),
    PropertyDefinition("color", _C, "Shadow color"),
    PropertyDefinition("draw-behind-window", _B, "Draw the shadow behind the window as well"),
    # window rules
    PropertyDefinition("app-id", _S, "Regular expression matched against the window application ID"),
    PropertyDefinition("title", _S, "Regular expression matched against the window title"),
    PropertyDefinition("is-active", _B, "Match windows that are (not) focused"),
    PropertyDefinition("is-floating", _B, "Match windows that are (not) floating"),
    PropertyDefinition("at-startup", _B, "Match only during the first seconds after startup"),
    PropertyDefinition("open-on-output", _S, "Output to open the window on"),
    PropertyDefinition("open-on-workspace", _S, "Named workspace to open the window on"),
    PropertyDefinition("open-maximized", _B, "Open the window as a maximized column"),
    PropertyDefinition("open-fullscreen", _B, "Open the window fullscreen"),
    PropertyDefinition("open-floating", _B, "Open the window floating"),
    PropertyDefinition("opacity", _N, "Window opacity, from 0.0 to 1.0"),
    PropertyDefinition("geometry-corner-radius", _N, "Corner radius for window geometry"),
    PropertyDefinition("clip-to-geometry", _B, "Clip the window to its visual geometry"),
    PropertyDefinition("block-out-from", _E, "Hide the window from screen capture", "block-out-from"),
    # bindings
    PropertyDefinition("allow-inhibiting", _B, "Whether applications may inhibit this binding"),
    PropertyDefinition("allow-when-locked", _B, "Whether the binding works while the session is locked"),
    PropertyDefinition("repeat", _B, "Whether holding the keys repeats the action"),
    PropertyDefinition("cooldown-ms", _N, "Minimum delay between two triggers of the binding"),
    PropertyDefinition("hotkey-overlay-title", _S, "Title shown for the binding in the hotkey overlay"),
)

BLOCK_PROPERTIES: Dict[str, Tuple[str, ...]] = {
    "input": (
        "accel-speed", "accel-profile", "scroll-method", "scroll-button", "scroll-factor",
        "tap-button-map", "click-method", "layout", "variant", "options", "model", "rules",
        "repeat-delay", "repeat-rate", "track-layout",
    ),
    "output": ("mode", "scale", "transform", "position", "x", "y", "on-demand", "backdrop-color"),
    "layout": ("gaps", "center-focused-column", "background-color", "width", "height"),
    "focus-ring": ("width", "active-color", "inactive-color", "urgent-color"),
    "border": ("width", "active-color", "inactive-color", "urgent-color"),
    "shadow": ("softness", "spread", "offset", "color", "inactive-color", "draw-behind-window"),
    "window-rule": (
        "app-id", "title", "is-active", "is-floating", "at-startup",
        "open-on-output", "open-on-workspace", "open-maximized", "open-fullscreen",
        "open-floating", "opacity", "geometry-corner-radius", "clip-to-geometry",
        "block-out-from",
    ),
    "binds": ("allow-inhibiting", "allow-when-locked", "repeat", "cooldown-ms", "hotkey-overlay-title"),
}

# Most specific first: a border nested in a window-rule uses border properties.
BLOCK_PRIORITY: Tuple[str, ...] = (
    "focus-ring", "border", "shadow", "window-rule", "layout", "output", "input", "binds",
)

BINDS_BLOCK = "binds"

COLOR_EXAMPLES: Tuple[str, ...] = ('"#7fc8ff"', '"rgb(127 200 255)"', '"rgba(0 0 0 0.5)"')

# (spelling, description) in completion order
UNIVERSAL_LITERALS: Tuple[Tuple[str, str], ...] = (
    ("#true", "Boolean true value"),
    ("#false", "Boolean false value"),
    ("#null", "Null value"),
    ("#nan", "Not a number"),
    ("#inf", "Positive infinity"),
    ("#-inf", "Negative infinity"),
    ("true", "Bare true"),
    ("false", "Bare false"),
    ("null", "Bare null"),
    ("nan", "Bare not a number"),
    ("inf", "Bare positive infinity"),
    ("-inf", "Bare negative infinity"),
)


@dataclass(frozen=True)
class ReferenceTables:
    """
    Read-only lookup tables consumed by completion and hover.

    Built once by ``default_tables()`` and passed by reference; tests can
    construct smaller instances directly.
    """
    nodes: Tuple[str, ...] = NODES
    flags: Tuple[str, ...] = FLAGS
    properties: Tuple[PropertyDefinition, ...] = PROPERTIES
    enums: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType(ENUMS))
    actions: Tuple[str, ...] = ACTIONS
    key_modifiers: Tuple[str, ...] = KEY_MODIFIERS
    special_keys: Tuple[str, ...] = SPECIAL_KEYS
    block_properties: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType(BLOCK_PROPERTIES)
    )
    block_priority: Tuple[str, ...] = BLOCK_PRIORITY
    color_examples: Tuple[str, ...] = COLOR_EXAMPLES
    universal_literals: Tuple[Tuple[str, str], ...] = UNIVERSAL_LITERALS

    def get_property(self, name: str) -> Optional[PropertyDefinition]:
        for definition in self.properties:
            if definition.name == name:
                return definition
        return None

    def properties_for_block(self, block_name: Optional[str]) -> Tuple[PropertyDefinition, ...]:
        """Properties relevant inside ``block_name``; all of them if the block is unknown."""
        names = self.block_properties.get(block_name) if block_name else None
        if not names:
            return self.properties
        return tuple(p for p in self.properties if p.name in names)

    @property
    def recognized_blocks(self) -> Tuple[str, ...]:
        return self.block_priority


@lru_cache(maxsize=1)
def default_tables() -> ReferenceTables:
    return ReferenceTables()
