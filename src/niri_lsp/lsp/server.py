import logging
import traceback
from typing import List, Optional, Tuple

from lsprotocol import types
from pygls.server import LanguageServer

from niri_lsp.config.models import ServerConfig

from .features import register_completion, register_diagnostics, register_hover
from .modes import LanguageModes, get_language_modes
from .utils.document_event_coordinator import DocumentEventCoordinator
from .utils.settings_provider import SettingsProvider

logger = logging.getLogger(__name__)

SERVER_NAME = "niri-lsp"
SERVER_VERSION = "v0.1.0"
DEFAULT_PORT = 3000


class ServerInitializationState:
    """Tracks the initialization state of the LSP server components."""

    def __init__(self):
        self.initialization_errors: List[Tuple[str, str]] = []

    def add_error(self, component: str, error: Exception):
        """Add an initialization error for tracking."""
        self.initialization_errors.append((component, str(error)))
        logger.error(f"Initialization error in {component}: {error}")

    def get_error_summary(self) -> str:
        if not self.initialization_errors:
            return "No initialization errors"

        return f"Initialization errors: {'; '.join([f'{comp}: {err}' for comp, err in self.initialization_errors])}"


class DocumentLifecycleHandler:
    """Releases per-document state held by the language modes."""

    def __init__(self, language_modes: LanguageModes):
        self._language_modes = language_modes

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        self._language_modes.on_document_removed(params.text_document.uri)


class NiriLSPServer:
    """
    LSP server for Niri KDL configuration files.

    Provides diagnostics (pushed and pulled), context-aware completion with
    lazy documentation, and hover documentation. Document events are fanned
    out to the interested services through a single coordinator.
    """

    def __init__(self, config: Optional[ServerConfig] = None, port: Optional[int] = None):
        """
        Initialize the Niri LSP server.

        Args:
            config: Server configuration; defaults are used when omitted
            port: Port number for TCP mode (defaults to 3000)
        """
        self.config = config or ServerConfig()
        self.port = port or DEFAULT_PORT

        self.ls = LanguageServer(SERVER_NAME, SERVER_VERSION)
        self.document_coordinator = DocumentEventCoordinator()
        self.settings_provider = SettingsProvider(self.config.settings)
        self.language_modes: Optional[LanguageModes] = None
        self.diagnostics_service = None

        self.init_state = ServerInitializationState()

        self._setup_server()

        logger.info(f"Niri LSP Server initialized (port {self.port})")
        logger.info(self.init_state.get_error_summary())

    def _setup_server(self):
        """Register protocol handlers, build the language modes, then register features."""
        self._register_handlers()

        try:
            self.language_modes = get_language_modes(cache_config=self.config.cache)
        except Exception as e:
            self.init_state.add_error("Language Modes", e)
            return

        self._initialize_features()

    def _initialize_features(self):
        try:
            self._register_features()
            logger.info("LSP features initialized successfully")
        except Exception as e:
            self.init_state.add_error("Feature Registration", e)

    def _register_handlers(self):
        """Register LSP protocol handlers."""

        @self.ls.feature(types.INITIALIZED)
        async def initialized(params: types.InitializedParams):
            logger.info("LSP: Server initialized successfully")
            logger.info(f"LSP: {len(self.ls.workspace.folders)} workspace folder(s) open")
            await self._register_configuration_notifications()

        @self.ls.feature(types.WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
        def workspace_folders_changed(params: types.DidChangeWorkspaceFoldersParams):
            added = [folder.name for folder in params.event.added]
            removed = [folder.name for folder in params.event.removed]
            logger.info(f"LSP: Workspace folders changed (added {added}, removed {removed})")

        @self.ls.feature(types.SHUTDOWN)
        def shutdown(params=None):
            logger.info("LSP: Handling shutdown request")
            self._cleanup_resources()
            return None

        @self.ls.feature(types.EXIT)
        def exit_handler(params=None):
            logger.info("LSP: Server exiting")

    async def _register_configuration_notifications(self):
        """Ask clients that support it to send configuration change notifications."""
        try:
            workspace = self.ls.client_capabilities.workspace
            dynamic = workspace and workspace.did_change_configuration
            if not (dynamic and dynamic.dynamic_registration):
                return

            await self.ls.register_capability_async(
                types.RegistrationParams(
                    registrations=[
                        types.Registration(
                            id="niri-lsp-configuration",
                            method=types.WORKSPACE_DID_CHANGE_CONFIGURATION,
                        )
                    ]
                )
            )
            logger.info("LSP: Registered for configuration change notifications")
        except Exception as e:
            logger.warning(f"Could not register for configuration changes: {e}")

    def _register_features(self):
        """
        Register LSP features with the server.

        Completion and hover are independent. Diagnostics provides the service
        that receives document events through the coordinator.

        Raises:
            RuntimeError: If no features could be registered
        """
        if self.language_modes is None:
            raise RuntimeError("Cannot register features: language modes not initialized")

        logger.info("LSP: Registering features...")

        feature_results = {
            'completion': False,
            'hover': False,
            'diagnostics': False,
        }

        self.settings_provider.set_server(self.ls)

        try:
            register_completion(self.ls, self.language_modes)
            feature_results['completion'] = True
            logger.info("LSP: Completion feature registered")
        except Exception as e:
            self.init_state.add_error("Completion Feature", e)

        try:
            register_hover(self.ls, self.language_modes)
            feature_results['hover'] = True
            logger.info("LSP: Hover feature registered")
        except Exception as e:
            self.init_state.add_error("Hover Feature", e)

        try:
            self.diagnostics_service = register_diagnostics(self.ls, self.language_modes, self.settings_provider)
            self.document_coordinator.register_handler(self.diagnostics_service)
            feature_results['diagnostics'] = True
            logger.info("LSP: Diagnostics feature registered")
        except Exception as e:
            self.init_state.add_error("Diagnostics Feature", e)

        self.document_coordinator.register_handler(self.settings_provider)
        self.document_coordinator.register_handler(DocumentLifecycleHandler(self.language_modes))
        self.document_coordinator.register_with_server(self.ls)

        registered_count = sum(feature_results.values())
        logger.info(f"LSP: Feature registration completed - {registered_count}/{len(feature_results)} features registered")

        if registered_count == 0:
            raise RuntimeError("No LSP features could be registered - server cannot provide language support")

    def _cleanup_resources(self):
        logger.info("Cleaning up LSP server resources...")

        try:
            self.document_coordinator.clear_handlers()
        except Exception as e:
            logger.error(f"Error clearing document handlers: {e}")

        try:
            if self.language_modes:
                self.language_modes.dispose()
        except Exception as e:
            logger.error(f"Error disposing language modes: {e}")

        logger.info("LSP server resource cleanup completed")

    def start(self, host: str = "localhost", use_tcp: bool = False):
        """Start the LSP server.

        Args:
            host: Host to bind to when using TCP (default: localhost)
            use_tcp: Whether to use TCP instead of stdio
        """
        logger.info("Starting Niri LSP Server...")

        try:
            if use_tcp:
                logger.info(f"Starting LSP TCP server on {host}:{self.port}...")
                self.ls.start_tcp(host, self.port)
                logger.info("LSP TCP server finished")
            else:
                logger.info("Starting LSP IO server...")
                self.ls.start_io()
                logger.info("LSP IO server finished")
        except KeyboardInterrupt:
            logger.info("Received shutdown signal")
        except BrokenPipeError:
            logger.info("Broken pipe - client disconnected")
        except EOFError:
            logger.info("EOF - no more input from client")
        except Exception as e:
            logger.error(f"Error in LSP server: {e}")
            logger.error(traceback.format_exc())
        finally:
            self.shutdown()

    def shutdown(self):
        """Shutdown the LSP server and cleanup resources."""
        logger.info("Shutting down Niri LSP Server...")
        self._cleanup_resources()
