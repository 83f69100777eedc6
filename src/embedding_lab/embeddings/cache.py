"""
Content-addressed embedding cache.

The orchestrator re-embeds every document on every search. That is fine
for the bundled corpus; for larger corpora wrap a provider in
CachedEmbeddingProvider explicitly (or set EMBEDDING_CACHE_ENABLED=true)
instead of folding caching into the search code.

Key = sha256(text) + model name, so the same text under two models never
collides.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict

import numpy as np

from embedding_lab.core import EmbeddingProvider

logger = logging.getLogger(__name__)


def cache_key(text: str, model: str) -> str:
    """Build the cache key for a text under a model."""
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return f"{model}:{digest}"


class CachedEmbeddingProvider:
    """
    LRU cache in front of any EmbeddingProvider.

    Safe to share across the worker threads that asyncio.to_thread uses.
    """

    def __init__(self, provider: EmbeddingProvider, model: str, max_entries: int = 4096):
        self._provider = provider
        self.model = model
        self.max_entries = max_entries
        self._entries: OrderedDict[str, np.ndarray] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def dimensions(self) -> int | None:
        return getattr(self._provider, "dimensions", None)

    def __len__(self) -> int:
        return len(self._entries)

    def _get(self, key: str) -> np.ndarray | None:
        with self._lock:
            vector = self._entries.get(key)
            if vector is not None:
                self._entries.move_to_end(key)
                self.hits += 1
            else:
                self.misses += 1
            return vector

    def _put(self, key: str, vector: np.ndarray) -> None:
        with self._lock:
            self._entries[key] = vector
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def embed(self, text: str) -> np.ndarray:
        key = cache_key(text, self.model)
        vector = self._get(key)
        if vector is not None:
            logger.debug(f"Embedding cache hit: {key[:24]}...")
            return vector
        vector = self._provider.embed(text)
        self._put(key, vector)
        return vector

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        results: list[np.ndarray | None] = []
        missing_texts = []
        missing_indices = []

        for i, text in enumerate(texts):
            vector = self._get(cache_key(text, self.model))
            results.append(vector)
            if vector is None:
                missing_texts.append(text)
                missing_indices.append(i)

        if missing_texts:
            fresh = self._provider.embed_batch(missing_texts)
            for idx, text, vector in zip(missing_indices, missing_texts, fresh):
                self._put(cache_key(text, self.model), vector)
                results[idx] = vector

        return results

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
