# src/jsonderef/cache.py
"""Process-lifetime cache of parsed documents keyed by fragment-free URI."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator
from typing import Any

from .loader import DEFAULT_TIMEOUT, load_uri

Loader = Callable[..., Any]


class DocumentCache:
    """Maps document identifiers to parsed trees.

    Entries are never evicted. Trees are deep-copied on the way in and out so
    that mutating a resolved output never corrupts a cached document.
    """

    def __init__(self, loader: Loader | None = None, timeout: float = DEFAULT_TIMEOUT):
        self._docs: dict[str, Any] = {}
        self._loader = loader or load_uri
        self.timeout = timeout
        self.loads = 0

    def get_or_load(self, uri: str) -> Any:
        if uri in self._docs:
            return copy.deepcopy(self._docs[uri])
        return self.refresh(uri)

    def refresh(self, uri: str) -> Any:
        """Load uri unconditionally and replace any cached entry."""
        doc = self._loader(uri, timeout=self.timeout)
        self.loads += 1
        self._docs[uri] = copy.deepcopy(doc)
        return doc

    def seed(self, uri: str, doc: Any) -> None:
        self._docs[uri] = copy.deepcopy(doc)

    def alias(self, uri: str, doc: Any) -> bool:
        """Register doc under uri unless something is already cached there."""
        if uri in self._docs:
            return False
        self._docs[uri] = copy.deepcopy(doc)
        return True

    def uris(self) -> Iterator[str]:
        return iter(sorted(self._docs))

    def __contains__(self, uri: object) -> bool:
        return uri in self._docs

    def __len__(self) -> int:
        return len(self._docs)
