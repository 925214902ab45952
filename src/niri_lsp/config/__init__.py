from niri_lsp.config.loader import ConfigError, load_server_config
from niri_lsp.config.models import CacheConfig, ServerConfig, ServerSettings

__all__ = ["CacheConfig", "ConfigError", "ServerConfig", "ServerSettings", "load_server_config"]
