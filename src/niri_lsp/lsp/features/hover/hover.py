import logging
from typing import Optional

from lsprotocol import types
from pygls.server import LanguageServer

from niri_lsp.lsp.modes import LanguageModes, get_capability
from niri_lsp.lsp.utils.models import Snapshot

logger = logging.getLogger(__name__)


def register_hover(server: LanguageServer, language_modes: LanguageModes):
    """
    Register hover with the LSP server.

    Args:
        server: The language server instance
        language_modes: Registry providing the hover capability
    """

    @server.feature(types.TEXT_DOCUMENT_HOVER)
    def hover(ls: LanguageServer, params: types.HoverParams) -> Optional[types.Hover]:
        """Show documentation for the token under the cursor."""
        logger.debug(f"Hover request received for {params.text_document.uri} at position {params.position}")

        try:
            document = ls.workspace.get_text_document(params.text_document.uri)
            snapshot = Snapshot.from_document(document)

            resolve = get_capability(language_modes.get_mode(snapshot.language_id), "do_hover")
            if resolve is None:
                return None
            return resolve(snapshot, params.position)

        except Exception as e:
            logger.error(f"Error in hover handler: {e}")
            return None
