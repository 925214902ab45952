from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "kdlLanguageServer"


class ServerSettings(BaseModel):
    """Per-document settings, spelled the way editor clients send them."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    enabled: bool = Field(default=True, alias="validate")
    max_number_of_problems: int = Field(default=100, alias="maxNumberOfProblems", ge=0)

    @classmethod
    def from_client(cls, payload: Any, fallback: ServerSettings | None = None) -> ServerSettings:
        """
        Build settings from a client configuration payload.

        Missing, malformed or invalid payloads yield ``fallback``, or the
        built-in defaults when no fallback is given.
        """
        fallback = fallback or cls()
        if payload is None:
            return fallback
        if not isinstance(payload, Mapping):
            logger.warning(f"Ignoring non-object settings payload: {payload!r}")
            return fallback
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            logger.warning(f"Invalid client settings, using defaults: {e}")
            return fallback


class CacheConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_entries: int = Field(default=10, ge=1)
    cleanup_interval: float = Field(default=60, ge=0)


class ServerConfig(BaseModel):
    """Server-wide configuration, loaded once at startup."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    settings: ServerSettings = Field(default_factory=ServerSettings)
    cache: CacheConfig = Field(default_factory=CacheConfig)
