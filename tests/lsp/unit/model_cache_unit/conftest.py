import pytest

from niri_lsp.lsp.utils.model_cache import LanguageModelCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def parse_calls():
    return []


@pytest.fixture
def make_cache(clock, parse_calls):
    caches = []

    def _make(max_entries: int = 3, cleanup_interval: float = 0):
        def parse(snapshot):
            parse_calls.append((snapshot.uri, snapshot.version))
            return snapshot.text.upper()

        cache = LanguageModelCache(max_entries, cleanup_interval, parse, clock=clock)
        caches.append(cache)
        return cache

    yield _make

    for cache in caches:
        cache.dispose()
