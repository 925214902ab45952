from unittest.mock import AsyncMock, Mock

import pytest

from niri_lsp.config.models import ServerSettings
from niri_lsp.lsp.utils.settings_provider import SettingsProvider


@pytest.fixture
def configurable_server():
    """A server whose client answers workspace/configuration requests."""
    server = Mock()
    server.client_capabilities.workspace.configuration = True
    server.get_configuration_async = AsyncMock(return_value=[{"maxNumberOfProblems": 5}])
    return server


@pytest.fixture
def push_only_server():
    server = Mock()
    server.client_capabilities.workspace = None
    return server


@pytest.fixture
def provider_for():
    def _provider(server, defaults=None):
        provider = SettingsProvider(defaults or ServerSettings())
        provider.set_server(server)
        return provider

    return _provider
