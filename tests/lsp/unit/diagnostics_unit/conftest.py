from unittest.mock import Mock

import pytest
from pygls.workspace import TextDocument

from niri_lsp.config.models import CacheConfig, ServerSettings
from niri_lsp.lsp.features.diagnostics.diagnostics import DiagnosticsService
from niri_lsp.lsp.modes import get_language_modes
from niri_lsp.lsp.utils.settings_provider import SettingsProvider


@pytest.fixture
def language_modes():
    modes = get_language_modes(cache_config=CacheConfig(cleanup_interval=0))
    try:
        yield modes
    finally:
        modes.dispose()


@pytest.fixture
def mock_server():
    """A stand-in for the pygls server: an open-document table and a publish spy."""
    server = Mock()
    server.workspace.text_documents = {}
    server.client_capabilities.workspace = None
    return server


@pytest.fixture
def open_document(mock_server):
    def _open(uri: str, text: str, version: int = 1, language_id: str = "kdl") -> TextDocument:
        document = TextDocument(uri, text, version=version, language_id=language_id)
        mock_server.workspace.text_documents[uri] = document
        return document

    return _open


@pytest.fixture
def settings_provider(mock_server):
    provider = SettingsProvider(ServerSettings())
    provider.set_server(mock_server)
    return provider


@pytest.fixture
def diagnostics_service(language_modes, settings_provider, mock_server):
    service = DiagnosticsService(language_modes, settings_provider)
    service.set_server(mock_server)
    return service
