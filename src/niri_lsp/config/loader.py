import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from niri_lsp.config.models import ServerConfig

logger = logging.getLogger(__name__)

__all__ = ["ConfigError", "load_server_config", "CONFIG_ENV_VAR"]

CONFIG_ENV_VAR = "NIRI_LSP_CONFIG"


class ConfigError(Exception):
    """Raised when the server configuration file cannot be used."""


def load_server_config(path: Optional[Union[str, Path]] = None) -> ServerConfig:
    """Load the server configuration.

    The file is taken from ``path``, else from the NIRI_LSP_CONFIG environment
    variable. Without either, or when the file does not exist, defaults are used.

    Args:
        path: Optional path to a YAML configuration file

    Returns:
        The validated server configuration

    Raises:
        ConfigError: If the file is not valid YAML or does not match the schema
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return ServerConfig()

    config_path = Path(path).expanduser()
    if not config_path.exists():
        logger.info(f"Config file {config_path} not found, using defaults")
        return ServerConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    try:
        config = ServerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}")

    logger.debug(f"Loaded server config from {config_path}")
    return config
