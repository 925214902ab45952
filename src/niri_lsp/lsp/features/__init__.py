"""LSP features for the Niri KDL language server."""

from .completion.completion import register_completion
from .diagnostics.diagnostics import register_diagnostics
from .hover.hover import register_hover

__all__ = [
    "register_completion",
    "register_diagnostics",
    "register_hover",
]
