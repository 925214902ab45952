import pytest
from lsprotocol.types import (
    CompletionItem,
    CompletionList,
    CompletionParams,
    DidOpenTextDocumentParams,
    Position,
    TextDocumentIdentifier,
    TextDocumentItem,
)
from pytest_lsp import LanguageClient


def open_document(client: LanguageClient, uri: str, text: str):
    client.text_document_did_open(
        DidOpenTextDocumentParams(
            text_document=TextDocumentItem(uri=uri, language_id="kdl", version=1, text=text)
        )
    )


@pytest.mark.asyncio
async def test_completions_in_input_block(client: LanguageClient):
    """Ensure that the server implements completions correctly."""
    uri = "file:///tmp/niri-lsp-e2e/input.kdl"
    open_document(client, uri, "input {\n    touchpad {\n        \n    }\n}\n")

    results = await client.text_document_completion_async(
        params=CompletionParams(
            position=Position(line=2, character=8),
            text_document=TextDocumentIdentifier(uri=uri),
        )
    )
    assert results is not None
    assert isinstance(results, CompletionList)
    labels = {item.label for item in results.items}
    assert "accel-speed" in labels, "'accel-speed' should be in completion items"
    assert "mode" not in labels, "'mode' belongs to output blocks"


@pytest.mark.asyncio
async def test_completions_in_binds(client: LanguageClient):
    uri = "file:///tmp/niri-lsp-e2e/binds.kdl"
    open_document(client, uri, "binds {\n    \n}\n")

    results = await client.text_document_completion_async(
        params=CompletionParams(
            position=Position(line=1, character=4),
            text_document=TextDocumentIdentifier(uri=uri),
        )
    )
    assert results is not None
    assert results.items[0].label == "Mod+"
    assert "input" not in {item.label for item in results.items}


@pytest.mark.asyncio
async def test_completion_resolve(client: LanguageClient):
    resolved = await client.completion_item_resolve_async(
        CompletionItem(label="scroll-method", data="prop_3")
    )
    assert resolved.documentation is not None
    assert "scroll-method=value" in str(resolved.documentation)
