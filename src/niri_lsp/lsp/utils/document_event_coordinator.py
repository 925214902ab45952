"""
Document Event Coordinator - Centralized document event handling for LSP features.

Document lifecycle notifications are registered once with the LSP server and
then distributed to every interested handler (diagnostics, settings cache,
language model cache eviction).

Architecture:
- Single registration point for open/change/close with the LSP server
- Handlers may be plain or async; async handlers are awaited in order
- Error isolation - if one handler fails, others continue to work
"""

import inspect
import logging
from threading import Lock
from typing import Any, List, Protocol

from lsprotocol import types
from pygls.server import LanguageServer

logger = logging.getLogger(__name__)


class DocumentEventHandler(Protocol):
    """
    Interface for document event handlers.

    All methods are optional - handlers only implement the events they
    care about, and may implement them as coroutines.
    """

    def handle_document_open(self, params: types.DidOpenTextDocumentParams) -> Any:
        ...

    def handle_document_change(self, params: types.DidChangeTextDocumentParams) -> Any:
        ...

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> Any:
        ...


class DocumentEventCoordinator:
    """
    Coordinates document events between the LSP server and feature handlers.

    Thread Safety:
    - Handler registration is thread-safe
    - Events are distributed to a copy of the handler list
    """

    def __init__(self):
        self._handlers: List[DocumentEventHandler] = []
        self._registered_with_server = False
        self._handler_lock = Lock()
        self._registration_lock = Lock()

    def register_handler(self, handler: DocumentEventHandler) -> None:
        """
        Register a document event handler.

        Handlers are called in the order they were registered.

        Raises:
            ValueError: If handler is None
        """
        if handler is None:
            raise ValueError("Handler cannot be None")

        with self._handler_lock:
            if handler in self._handlers:
                logger.warning(f"Handler {type(handler).__name__} is already registered")
                return

            self._handlers.append(handler)
            logger.info(f"Registered document event handler: {type(handler).__name__}")

    def get_handler_count(self) -> int:
        with self._handler_lock:
            return len(self._handlers)

    def register_with_server(self, server: LanguageServer) -> None:
        """
        Register document events with the LSP server.

        Only the first call registers; later calls are ignored with a warning.

        Raises:
            ValueError: If server is None
            RuntimeError: If no handlers are registered
        """
        if server is None:
            raise ValueError("Server cannot be None")

        with self._registration_lock:
            if self._registered_with_server:
                logger.warning("Document events already registered with server")
                return

            if self.get_handler_count() == 0:
                raise RuntimeError("Cannot register with server: no handlers registered")

            self._register_server_events(server)
            self._registered_with_server = True

            logger.info(f"Document events registered with server for {self.get_handler_count()} handlers")

    def _register_server_events(self, server: LanguageServer) -> None:

        @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
        async def did_open(params: types.DidOpenTextDocumentParams):
            await self.distribute_event("handle_document_open", params)

        @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
        async def did_change(params: types.DidChangeTextDocumentParams):
            await self.distribute_event("handle_document_change", params)

        @server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
        async def did_close(params: types.DidCloseTextDocumentParams):
            await self.distribute_event("handle_document_close", params)

    async def distribute_event(self, method_name: str, params) -> None:
        """
        Distribute an event to all registered handlers.

        Errors in individual handlers are logged and do not affect the others.

        Args:
            method_name: Name of the handler method to call
            params: Event parameters to pass to handlers
        """
        with self._handler_lock:
            handlers_copy = self._handlers.copy()

        for handler in handlers_copy:
            try:
                method = getattr(handler, method_name, None)
                if method and callable(method):
                    result = method(params)
                    if inspect.isawaitable(result):
                        await result
            except Exception as e:
                logger.error(f"Error in {method_name} handler {type(handler).__name__}: {e}")

    def clear_handlers(self) -> None:
        with self._handler_lock:
            handler_count = len(self._handlers)
            self._handlers.clear()
            logger.info(f"Cleared {handler_count} document event handlers")
