import pytest

from niri_lsp.lsp.utils.completion_synthesizer import CompletionSynthesizer
from niri_lsp.lsp.utils.context_classifier import classify_context

CURSOR = "|"


@pytest.fixture
def synthesizer(tables):
    return CompletionSynthesizer(tables)


@pytest.fixture
def context_at(make_snapshot, tables):
    """Classify the position marked by ``|`` in a document."""

    def _context(marked: str):
        offset = marked.index(CURSOR)
        snapshot = make_snapshot(marked.replace(CURSOR, "", 1))
        return classify_context(snapshot, snapshot.position_at(offset), tables)

    return _context


@pytest.fixture
def complete_at(context_at, synthesizer):
    def _complete(marked: str):
        return synthesizer.synthesize(context_at(marked))

    return _complete

