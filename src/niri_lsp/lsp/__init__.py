"""
Language server for Niri KDL configuration files.

Key Components:
- NiriLSPServer: the pygls server wiring features to document events
- Language modes: capability bundles looked up by document language id
- Feature modules: completion, diagnostics and hover registration

Usage Example:
    from niri_lsp.config import load_server_config
    from niri_lsp.lsp import NiriLSPServer

    server = NiriLSPServer(config=load_server_config())
    server.start()                  # stdio, for editors
    server.start(use_tcp=True)      # localhost:3000
"""

from .server import NiriLSPServer, ServerInitializationState

from .features import (
    register_completion,
    register_diagnostics,
    register_hover,
)

from .modes import LanguageModes, get_language_modes

__all__ = [
    "NiriLSPServer",
    "ServerInitializationState",
    "register_completion",
    "register_diagnostics",
    "register_hover",
    "LanguageModes",
    "get_language_modes",
]
