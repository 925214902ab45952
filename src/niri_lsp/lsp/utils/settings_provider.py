"""Per-document settings resolution with client fallbacks."""

import logging
from typing import Any, Dict, Mapping, Optional

from lsprotocol import types
from pygls.server import LanguageServer

from niri_lsp.config.models import SETTINGS_SECTION, ServerSettings

logger = logging.getLogger(__name__)


class SettingsProvider:
    """
    Resolves ServerSettings for a document.

    Clients supporting ``workspace/configuration`` are asked per document and
    the answer is cached until the configuration changes or the document is
    closed. Other clients push global settings through
    ``workspace/didChangeConfiguration``. Failures fall back to the defaults.
    """

    def __init__(self, defaults: Optional[ServerSettings] = None):
        self._defaults = defaults or ServerSettings()
        self._global_settings = self._defaults
        self._document_settings: Dict[str, ServerSettings] = {}
        self._server: Optional[LanguageServer] = None

    @property
    def defaults(self) -> ServerSettings:
        return self._defaults

    def set_server(self, server: LanguageServer) -> None:
        self._server = server

    def has_configuration_capability(self) -> bool:
        if self._server is None:
            return False
        try:
            workspace = self._server.client_capabilities.workspace
        except AttributeError:
            return False
        return bool(workspace and workspace.configuration)

    def from_payload(self, payload: Any) -> ServerSettings:
        """Validate a client payload on top of the defaults."""
        if isinstance(payload, Mapping):
            payload = {**self._defaults.model_dump(by_alias=True), **payload}
        return ServerSettings.from_client(payload, fallback=self._defaults)

    async def get_settings(self, uri: str) -> ServerSettings:
        if not self.has_configuration_capability():
            return self._global_settings

        cached = self._document_settings.get(uri)
        if cached is not None:
            return cached

        try:
            result = await self._server.get_configuration_async(
                types.ConfigurationParams(
                    items=[types.ConfigurationItem(scope_uri=uri, section=SETTINGS_SECTION)]
                )
            )
        except Exception as e:
            logger.warning(f"Could not fetch settings for {uri}, using defaults: {e}")
            return self._defaults

        settings = self.from_payload(result[0] if result else None)
        self._document_settings[uri] = settings
        return settings

    def on_configuration_changed(self, settings: Any) -> None:
        """Reset cached settings, or replace the global ones for push-only clients."""
        if self.has_configuration_capability():
            self._document_settings.clear()
            logger.debug("Cleared cached document settings")
            return

        section = settings.get(SETTINGS_SECTION) if isinstance(settings, Mapping) else None
        self._global_settings = self.from_payload(section)
        logger.debug(f"Global settings updated: {self._global_settings}")

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        self._document_settings.pop(params.text_document.uri, None)
