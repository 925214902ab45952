import pytest
from lsprotocol import types

from niri_lsp.config.loader import CONFIG_ENV_VAR, ConfigError, load_server_config
from niri_lsp.config.models import ServerConfig, ServerSettings


def test_settings_defaults():
    settings = ServerSettings()
    assert settings.enabled is True
    assert settings.max_number_of_problems == 100


def test_settings_accept_client_spelling():
    settings = ServerSettings.from_client({"validate": False, "maxNumberOfProblems": 7, "trace": "off"})
    assert settings.enabled is False
    assert settings.max_number_of_problems == 7


@pytest.mark.parametrize("payload", [None, "nonsense", {"maxNumberOfProblems": -1}, {"maxNumberOfProblems": "many"}])
def test_invalid_client_settings_fall_back(payload):
    fallback = ServerSettings(max_number_of_problems=3)
    assert ServerSettings.from_client(payload, fallback=fallback) == fallback


def test_load_defaults_without_file(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert load_server_config() == ServerConfig()


def test_load_missing_file(tmp_path):
    assert load_server_config(tmp_path / "absent.yml") == ServerConfig()


def test_load_yaml(tmp_path):
    path = tmp_path / "lsp.yml"
    path.write_text(
        "settings:\n"
        "  maxNumberOfProblems: 20\n"
        "cache:\n"
        "  max_entries: 4\n"
        "  cleanup_interval: 0\n"
    )

    config = load_server_config(path)
    assert config.settings.max_number_of_problems == 20
    assert config.cache.max_entries == 4
    assert config.cache.cleanup_interval == 0


def test_load_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.yml"
    path.write_text("settings:\n  validate: false\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_server_config().settings.enabled is False


@pytest.mark.parametrize(
    "content",
    [
        "settings: [unclosed\n",
        "- just\n- a list\n",
        "cache:\n  max_entries: 0\n",
        "unknown_section: {}\n",
    ],
)
def test_bad_config_raises(tmp_path, content):
    path = tmp_path / "bad.yml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_server_config(path)


@pytest.mark.asyncio
async def test_settings_requested_per_document(configurable_server, provider_for):
    provider = provider_for(configurable_server)

    first = await provider.get_settings("file:///a.kdl")
    again = await provider.get_settings("file:///a.kdl")

    assert first.max_number_of_problems == 5
    assert first.enabled is True
    assert again is first
    configurable_server.get_configuration_async.assert_awaited_once()
    params = configurable_server.get_configuration_async.call_args.args[0]
    assert params.items[0].section == "kdlLanguageServer"
    assert params.items[0].scope_uri == "file:///a.kdl"


@pytest.mark.asyncio
async def test_configuration_change_clears_cache(configurable_server, provider_for):
    provider = provider_for(configurable_server)

    await provider.get_settings("file:///a.kdl")
    provider.on_configuration_changed({})
    await provider.get_settings("file:///a.kdl")

    assert configurable_server.get_configuration_async.await_count == 2


@pytest.mark.asyncio
async def test_document_close_forgets_settings(configurable_server, provider_for):
    provider = provider_for(configurable_server)

    await provider.get_settings("file:///a.kdl")
    provider.handle_document_close(
        types.DidCloseTextDocumentParams(text_document=types.TextDocumentIdentifier(uri="file:///a.kdl"))
    )
    await provider.get_settings("file:///a.kdl")

    assert configurable_server.get_configuration_async.await_count == 2


@pytest.mark.asyncio
async def test_failed_request_uses_defaults(configurable_server, provider_for):
    configurable_server.get_configuration_async.side_effect = RuntimeError("client went away")
    defaults = ServerSettings(max_number_of_problems=9)
    provider = provider_for(configurable_server, defaults)

    assert await provider.get_settings("file:///a.kdl") == defaults


@pytest.mark.asyncio
async def test_push_only_client_uses_global_settings(push_only_server, provider_for):
    provider = provider_for(push_only_server)

    provider.on_configuration_changed({"kdlLanguageServer": {"validate": False}})
    settings = await provider.get_settings("file:///a.kdl")

    assert settings.enabled is False
    assert settings.max_number_of_problems == 100
    push_only_server.get_configuration_async.assert_not_called()
