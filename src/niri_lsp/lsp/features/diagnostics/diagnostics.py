"""Main diagnostics functionality for the LSP server."""

import logging
from typing import Dict, List, Optional, Tuple

from lsprotocol import types
from pygls.server import LanguageServer

from niri_lsp.config.models import ServerSettings
from niri_lsp.lsp.modes import LanguageModes, get_capability
from niri_lsp.lsp.utils.coordinate_transformer import CoordinateTransformer
from niri_lsp.lsp.utils.models import Snapshot
from niri_lsp.lsp.utils.settings_provider import SettingsProvider

logger = logging.getLogger(__name__)


class DiagnosticsService:
    """Validates documents and publishes their diagnostics."""

    def __init__(self, language_modes: LanguageModes, settings_provider: SettingsProvider):
        self._language_modes = language_modes
        self._settings_provider = settings_provider
        self._diagnostics: Dict[str, Tuple[int, List[types.Diagnostic]]] = {}
        self._server: Optional[LanguageServer] = None

    def set_server(self, server: LanguageServer) -> None:
        """Set the server instance for publishing diagnostics."""
        self._server = server

    async def handle_document_open(self, params: types.DidOpenTextDocumentParams) -> None:
        await self.validate_and_publish(params.text_document.uri)

    async def handle_document_change(self, params: types.DidChangeTextDocumentParams) -> None:
        await self.validate_and_publish(params.text_document.uri)

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close events by clearing diagnostics."""
        self._diagnostics.pop(params.text_document.uri, None)
        if self._server:
            self._server.publish_diagnostics(params.text_document.uri, [])

    def diagnose(self, snapshot: Snapshot, settings: ServerSettings) -> List[types.Diagnostic]:
        """
        Compute diagnostics for a snapshot.

        Disabled validation and unsupported languages yield an empty list.
        Results are capped at ``settings.max_number_of_problems`` in discovery
        order. Unexpected errors are logged and yield an empty list.

        Args:
            snapshot: Document snapshot to validate
            settings: Settings in effect for the document

        Returns:
            Protocol diagnostics for the snapshot
        """
        if not settings.enabled:
            return []

        validate = get_capability(self._language_modes.get_mode(snapshot.language_id), "do_validation")
        if validate is None:
            logger.debug(f"No validation for language '{snapshot.language_id}' ({snapshot.uri})")
            return []

        try:
            findings = validate(snapshot)
            return CoordinateTransformer.findings_to_diagnostics(
                snapshot, findings, limit=settings.max_number_of_problems
            )
        except Exception as e:
            logger.error(f"Error validating document {snapshot.uri}: {e}")
            return []

    def parse_document(self, snapshot: Snapshot, settings: ServerSettings) -> None:
        """Validate a snapshot and store the result by document URI."""
        self._diagnostics[snapshot.uri] = (snapshot.version, self.diagnose(snapshot, settings))

    def get_diagnostics(self, document_uri: str) -> Tuple[int, List[types.Diagnostic]]:
        """
        Get stored diagnostics for a document.

        Returns:
            Tuple of (version, diagnostics)
        """
        return self._diagnostics.get(document_uri, (0, []))

    def _is_current(self, snapshot: Snapshot) -> bool:
        live = self._server.workspace.text_documents.get(snapshot.uri)
        return live is not None and live.version == snapshot.version

    async def validate_and_publish(self, document_uri: str) -> None:
        """
        Validate the current version of a document and publish the result.

        The snapshot is taken before settings are resolved; if the document
        changed in the meantime the result is dropped unpublished.
        """
        if not self._server:
            logger.error("Server not set - cannot publish diagnostics")
            return

        document = self._server.workspace.text_documents.get(document_uri)
        if document is None:
            logger.debug(f"Document {document_uri} is not open - skipping validation")
            return

        snapshot = Snapshot.from_document(document)
        settings = await self._settings_provider.get_settings(document_uri)
        self.parse_document(snapshot, settings)

        if not self._is_current(snapshot):
            logger.debug(f"Dropping stale diagnostics for {document_uri} v{snapshot.version}")
            return

        self.publish_diagnostics(document_uri)

    def publish_diagnostics(self, document_uri: str) -> None:
        if not self._server:
            logger.error("Server not set - cannot publish diagnostics")
            return

        version, diagnostics = self.get_diagnostics(document_uri)
        self._server.publish_diagnostics(
            uri=document_uri,
            diagnostics=diagnostics,
            version=version
        )

    async def pull_diagnostics(self, document_uri: str) -> List[types.Diagnostic]:
        """Compute diagnostics on request, without publishing them."""
        document = self._server.workspace.text_documents.get(document_uri) if self._server else None
        if document is None:
            return []

        snapshot = Snapshot.from_document(document)
        settings = await self._settings_provider.get_settings(document_uri)
        return self.diagnose(snapshot, settings)

    async def revalidate_all(self) -> None:
        for uri in list(self._server.workspace.text_documents):
            await self.validate_and_publish(uri)


def register_diagnostics(
    server: LanguageServer,
    language_modes: LanguageModes,
    settings_provider: SettingsProvider,
) -> DiagnosticsService:
    """
    Register diagnostics functionality with the LSP server.

    Push diagnostics are driven by the document event coordinator, which
    receives the returned service as a handler. Pull diagnostics and
    configuration changes are registered here.

    Returns:
        The diagnostics service instance
    """
    try:
        service = DiagnosticsService(language_modes, settings_provider)
        service.set_server(server)

        @server.feature(
            types.TEXT_DOCUMENT_DIAGNOSTIC,
            types.DiagnosticOptions(inter_file_dependencies=False, workspace_diagnostics=False),
        )
        async def document_diagnostic(ls: LanguageServer, params: types.DocumentDiagnosticParams):
            """Return a full diagnostic report for the requested document."""
            items = await service.pull_diagnostics(params.text_document.uri)
            return types.RelatedFullDocumentDiagnosticReport(items=items)

        @server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
        async def did_change_configuration(ls: LanguageServer, params: types.DidChangeConfigurationParams):
            """Reset settings and revalidate every open document."""
            settings_provider.on_configuration_changed(params.settings)
            await service.revalidate_all()

        logger.info("Diagnostics functionality registered successfully")
        return service

    except Exception as e:
        logger.error(f"Error registering diagnostics functionality: {e}")
        raise
