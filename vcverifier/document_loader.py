"""A JSON-LD document loader that caches loaded documents."""

from typing import Any

from vcverifier.cache import DEFAULT_EXPIRATION, ExpiringCache
from vcverifier.log import get_logger

#: Seconds a loaded document stays cached.
DOCUMENT_CACHE_EXPIRY = 300


class CachingDocumentLoader:
    """Wraps another loader and serves repeated requests from a cache.

    The wrapped loader is either an object with a load_document(url) method
    or a callable taking the URL. Failed loads are not cached.
    """

    def __init__(self, default_loader, cache=None) -> None:
        self._load = getattr(default_loader, "load_document", default_loader)
        if not callable(self._load):
            raise TypeError("default_loader must be callable or provide load_document")
        self._cache = cache if cache is not None else ExpiringCache(DOCUMENT_CACHE_EXPIRY)

    def load_document(self, url: str) -> Any:
        try:
            return self._cache.get(url)
        except KeyError:
            pass
        try:
            document = self._load(url)
        except Exception:
            get_logger().info("Was not able to load %s", url)
            raise
        self._cache.set(url, document, DEFAULT_EXPIRATION)
        return document