"""LSP utility modules for the Niri KDL language server."""

from .block_oracle import is_inside
from .completion_synthesizer import CompletionSynthesizer
from .context_classifier import classify_context
from .coordinate_transformer import CoordinateTransformer
from .document_event_coordinator import DocumentEventCoordinator
from .hover_resolver import HoverResolver
from .kdl_scanner import find_invalid_escapes, validate_document
from .model_cache import LanguageModelCache
from .models import ContextFlags, Finding, Snapshot
from .reference_tables import ReferenceTables, default_tables
from .settings_provider import SettingsProvider

__all__ = [
    "is_inside",
    "CompletionSynthesizer",
    "classify_context",
    "CoordinateTransformer",
    "DocumentEventCoordinator",
    "HoverResolver",
    "find_invalid_escapes",
    "validate_document",
    "LanguageModelCache",
    "ContextFlags",
    "Finding",
    "Snapshot",
    "ReferenceTables",
    "default_tables",
    "SettingsProvider",
]
