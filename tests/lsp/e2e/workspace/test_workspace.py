import sys
from pathlib import Path

import pytest
import pytest_lsp
from lsprotocol.types import (
    ClientCapabilities,
    DidChangeWorkspaceFoldersParams,
    DidOpenTextDocumentParams,
    HoverParams,
    InitializeParams,
    Position,
    TextDocumentIdentifier,
    TextDocumentItem,
    WorkspaceClientCapabilities,
    WorkspaceFolder,
    WorkspaceFoldersChangeEvent,
)
from pytest_lsp import ClientServerConfig, LanguageClient

FIXTURES_DIR = Path(__file__).parents[3] / "fixtures" / "niri"


@pytest_lsp.fixture(
    config=ClientServerConfig(
        server_command=[sys.executable, "-m", "niri_lsp", "lsp"],
    ),
)
async def folder_client(lsp_client: LanguageClient):
    # Each test initializes the session itself
    yield

    await lsp_client.shutdown_session()


@pytest.mark.asyncio
async def test_workspace_folder_changes(folder_client: LanguageClient):
    """Workspace folder support is advertised and change notifications are accepted"""
    root = WorkspaceFolder(uri=FIXTURES_DIR.resolve().as_uri(), name="niri")
    result = await folder_client.initialize_session(
        InitializeParams(
            capabilities=ClientCapabilities(workspace=WorkspaceClientCapabilities(workspace_folders=True)),
            workspace_folders=[root],
        )
    )

    folders = result.capabilities.workspace.workspace_folders
    assert folders.supported
    assert folders.change_notifications

    extra = WorkspaceFolder(uri=FIXTURES_DIR.parent.resolve().as_uri(), name="fixtures")
    folder_client.workspace_did_change_workspace_folders(
        DidChangeWorkspaceFoldersParams(event=WorkspaceFoldersChangeEvent(added=[extra], removed=[root]))
    )

    # The server keeps answering requests after the change
    uri = (FIXTURES_DIR / "config.kdl").resolve().as_uri()
    folder_client.text_document_did_open(
        DidOpenTextDocumentParams(
            text_document=TextDocumentItem(uri=uri, language_id="kdl", version=1, text="input {\n}\n")
        )
    )
    hover = await folder_client.text_document_hover_async(
        HoverParams(text_document=TextDocumentIdentifier(uri=uri), position=Position(line=0, character=2))
    )
    assert hover is not None
    assert hover.contents.value.startswith("**input**")
