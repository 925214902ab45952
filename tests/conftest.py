"""
Global pytest configuration and fixtures.
"""

from pathlib import Path

import pytest

from niri_lsp.lsp.utils.models import Snapshot
from niri_lsp.lsp.utils.reference_tables import default_tables

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "niri"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def tables():
    return default_tables()


@pytest.fixture
def make_snapshot():
    """Build snapshots from inline text."""

    def _make(text: str, version: int = 1, uri: str = "file:///test/config.kdl", language_id: str = "kdl"):
        return Snapshot(uri=uri, version=version, language_id=language_id, text=text)

    return _make
