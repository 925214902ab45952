import logging
from typing import Optional

from lsprotocol import types
from pygls.server import LanguageServer

from niri_lsp.lsp.modes import LanguageModes, get_capability
from niri_lsp.lsp.utils.models import Snapshot

logger = logging.getLogger(__name__)

TRIGGER_CHARACTERS = ['"', "(", "{", "=", " ", "#"]


def register_completion(server: LanguageServer, language_modes: LanguageModes):
    """
    Register completion and completion resolve with the LSP server.

    Args:
        server: The language server instance
        language_modes: Registry providing the completion capability
    """

    completion_options = types.CompletionOptions(
        trigger_characters=TRIGGER_CHARACTERS,
        resolve_provider=True,
    )

    @server.feature(types.TEXT_DOCUMENT_COMPLETION, completion_options)
    def completions(ls: LanguageServer, params: types.CompletionParams) -> Optional[types.CompletionList]:
        """Provide completions for the given text document position."""
        logger.debug(f"Completion request received for {params.text_document.uri} at position {params.position}")

        try:
            document = ls.workspace.get_text_document(params.text_document.uri)
            snapshot = Snapshot.from_document(document)

            complete = get_capability(language_modes.get_mode(snapshot.language_id), "do_complete")
            if complete is None:
                logger.debug(f"No completion support for language '{snapshot.language_id}'")
                return None

            items = complete(snapshot, params.position)
            logger.debug(f"Returning {len(items)} completion items")
            return types.CompletionList(is_incomplete=False, items=items)

        except Exception as e:
            logger.error(f"Error in completion handler: {e}")
            return None

    @server.feature(types.COMPLETION_ITEM_RESOLVE)
    def completion_resolve(ls: LanguageServer, item: types.CompletionItem) -> types.CompletionItem:
        """Attach documentation to the selected item."""
        resolve = get_capability(language_modes.get_mode(None), "resolve_completion")
        if resolve is None:
            return item

        try:
            return resolve(item)
        except Exception as e:
            logger.error(f"Error resolving completion item {item.label}: {e}")
            return item
