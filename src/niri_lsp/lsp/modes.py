"""
Language modes: capability bundles looked up by language id.

A mode exposes any subset of ``do_validation``, ``do_complete``,
``resolve_completion`` and ``do_hover``. Features query capabilities with
``get_capability`` and treat a missing one as "unsupported", not as an error.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from lsprotocol import types

from niri_lsp.config.models import CacheConfig
from niri_lsp.lsp.utils.context_classifier import classify_context
from niri_lsp.lsp.utils.completion_synthesizer import CompletionSynthesizer
from niri_lsp.lsp.utils.hover_resolver import HoverResolver
from niri_lsp.lsp.utils.kdl_scanner import validate_document
from niri_lsp.lsp.utils.model_cache import LanguageModelCache
from niri_lsp.lsp.utils.models import Finding, Snapshot
from niri_lsp.lsp.utils.reference_tables import ReferenceTables, default_tables

logger = logging.getLogger(__name__)

KDL_LANGUAGE_IDS = ("kdl", "niri-kdl")
DEFAULT_LANGUAGE_ID = "kdl"


class LanguageMode:
    """Base class for language modes; subclasses add capability methods."""

    id: str = ""

    def on_document_removed(self, uri: str) -> None:
        pass

    def dispose(self) -> None:
        pass


def get_capability(mode: Optional[LanguageMode], name: str) -> Optional[Callable[..., Any]]:
    """Return the bound capability ``name`` of ``mode``, or None if unsupported."""
    if mode is None:
        return None
    capability = getattr(mode, name, None)
    return capability if callable(capability) else None


class KdlMode(LanguageMode):
    """Validation, completion and hover for Niri KDL documents."""

    id = DEFAULT_LANGUAGE_ID

    def __init__(self, tables: Optional[ReferenceTables] = None, cache_config: Optional[CacheConfig] = None):
        self._tables = tables or default_tables()
        cache_config = cache_config or CacheConfig()
        self._synthesizer = CompletionSynthesizer(self._tables)
        self._hover = HoverResolver(self._tables)
        self._findings: LanguageModelCache[List[Finding]] = LanguageModelCache(
            cache_config.max_entries, cache_config.cleanup_interval, validate_document
        )

    def do_validation(self, snapshot: Snapshot) -> List[Finding]:
        return self._findings.get(snapshot)

    def do_complete(self, snapshot: Snapshot, position: types.Position) -> List[types.CompletionItem]:
        flags = classify_context(snapshot, position, self._tables)
        return self._synthesizer.synthesize(flags)

    def resolve_completion(self, item: types.CompletionItem) -> types.CompletionItem:
        return self._synthesizer.resolve(item)

    def do_hover(self, snapshot: Snapshot, position: types.Position) -> Optional[types.Hover]:
        return self._hover.hover(snapshot, position)

    def on_document_removed(self, uri: str) -> None:
        self._findings.on_document_removed(uri)

    def dispose(self) -> None:
        self._findings.dispose()


class LanguageModes:
    """Registry mapping language ids to modes."""

    def __init__(self, modes: Dict[str, LanguageMode], default_language_id: str = DEFAULT_LANGUAGE_ID):
        self._modes = dict(modes)
        self._default_language_id = default_language_id

    def get_mode(self, language_id: Optional[str]) -> Optional[LanguageMode]:
        """
        Look up the mode for a language id.

        Documents without a language id use the default mode; unknown ids
        yield None.
        """
        return self._modes.get(language_id or self._default_language_id)

    def get_all_modes(self) -> List[LanguageMode]:
        # One mode may be registered under several ids.
        unique: Dict[int, LanguageMode] = {}
        for mode in self._modes.values():
            unique.setdefault(id(mode), mode)
        return list(unique.values())

    def on_document_removed(self, uri: str) -> None:
        for mode in self.get_all_modes():
            mode.on_document_removed(uri)

    def dispose(self) -> None:
        for mode in self.get_all_modes():
            mode.dispose()
        logger.info("Language modes disposed")


def get_language_modes(
    tables: Optional[ReferenceTables] = None,
    cache_config: Optional[CacheConfig] = None,
) -> LanguageModes:
    kdl_mode = KdlMode(tables, cache_config)
    return LanguageModes({language_id: kdl_mode for language_id in KDL_LANGUAGE_IDS})
