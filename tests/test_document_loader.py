from datetime import datetime, timedelta

import pytest

from vcverifier.cache import ExpiringCache
from vcverifier.document_loader import CachingDocumentLoader


class CountingLoader:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def load_document(self, url):
        self.calls.append(url)
        if self.fail:
            raise ConnectionError("unreachable")
        return {"documentUrl": url, "document": {"@context": {}}}


class FakeClock:
    def __init__(self):
        self.current = datetime(2024, 1, 1)

    def now(self):
        return self.current


def test_second_load_is_served_from_cache():
    inner = CountingLoader()
    loader = CachingDocumentLoader(inner)
    first = loader.load_document("https://ctx.example.com/v1")
    second = loader.load_document("https://ctx.example.com/v1")
    assert first is second
    assert inner.calls == ["https://ctx.example.com/v1"]


def test_different_urls_are_loaded_separately():
    inner = CountingLoader()
    loader = CachingDocumentLoader(inner)
    loader.load_document("https://ctx.example.com/a")
    loader.load_document("https://ctx.example.com/b")
    assert inner.calls == ["https://ctx.example.com/a", "https://ctx.example.com/b"]


def test_errors_propagate_and_are_not_cached():
    inner = CountingLoader(fail=True)
    loader = CachingDocumentLoader(inner)
    with pytest.raises(ConnectionError):
        loader.load_document("https://ctx.example.com/v1")
    with pytest.raises(ConnectionError):
        loader.load_document("https://ctx.example.com/v1")
    assert len(inner.calls) == 2


def test_callable_loader_is_accepted():
    calls = []

    def load(url):
        calls.append(url)
        return url.upper()

    loader = CachingDocumentLoader(load)
    assert loader.load_document("abc") == "ABC"
    assert loader.load_document("abc") == "ABC"
    assert calls == ["abc"]


def test_expired_entry_is_reloaded():
    clock = FakeClock()
    inner = CountingLoader()
    loader = CachingDocumentLoader(inner, ExpiringCache(300, clock))
    loader.load_document("u")
    clock.current += timedelta(seconds=301)
    loader.load_document("u")
    assert inner.calls == ["u", "u"]


def test_non_callable_loader_rejected():
    with pytest.raises(TypeError):
        CachingDocumentLoader(object())