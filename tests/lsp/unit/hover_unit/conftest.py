import pytest

from niri_lsp.lsp.utils.hover_resolver import HoverResolver


@pytest.fixture
def resolver(tables):
    return HoverResolver(tables)
