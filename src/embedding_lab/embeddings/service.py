"""
EmbeddingService - dispatch text to the provider registered for a model name.

Embedding is the only operation in the engine that waits on I/O or model
inference. Providers are synchronous, so the service runs each call on a
worker thread with asyncio.to_thread, optionally under a deadline.

Every provider failure becomes EmbeddingFailureError naming the model.
An unknown model name is rejected with UnsupportedModelError BEFORE any
provider is touched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

import numpy as np

from embedding_lab.config import Settings, get_settings
from embedding_lab.core import (
    EmbeddingFailureError,
    EmbeddingProvider,
    UnsupportedModelError,
)
from embedding_lab.embeddings.cache import CachedEmbeddingProvider
from embedding_lab.embeddings.providers import (
    EMBEDDING_MODELS,
    MODEL_DIMENSIONS,
    BertEmbeddings,
    EmbeddingResult,
    GeminiEmbeddings,
    HashedWordEmbeddings,
    MockEmbeddings,
    SentenceBertEmbeddings,
)

logger = logging.getLogger(__name__)


def _as_vector(raw, model: str) -> np.ndarray:
    vector = np.asarray(raw, dtype=np.float64)
    if vector.ndim != 1 or vector.shape[0] == 0:
        raise EmbeddingFailureError(model, f"provider returned shape {vector.shape}")
    return vector


class EmbeddingService:
    """
    Named-model embedding dispatcher.

    Dependencies are INJECTED: pass any mapping of model name to
    EmbeddingProvider. Tests use stubs; production uses the factory below.
    """

    def __init__(
        self,
        providers: Mapping[str, EmbeddingProvider],
        timeout_seconds: float | None = None,
    ):
        self._providers = dict(providers)
        self.timeout_seconds = timeout_seconds

    @property
    def models(self) -> tuple[str, ...]:
        return tuple(self._providers)

    def supports(self, model: str) -> bool:
        return model in self._providers

    def provider(self, model: str) -> EmbeddingProvider:
        """Return the provider for a model name or raise UnsupportedModelError."""
        try:
            return self._providers[model]
        except KeyError:
            raise UnsupportedModelError(model, self.models) from None

    async def _run(self, fn, arg, model: str):
        call = asyncio.to_thread(fn, arg)
        try:
            if self.timeout_seconds is not None:
                return await asyncio.wait_for(call, timeout=self.timeout_seconds)
            return await call
        except asyncio.TimeoutError as e:
            raise EmbeddingFailureError(
                model, f"timed out after {self.timeout_seconds}s"
            ) from e
        except EmbeddingFailureError:
            raise
        except Exception as e:
            logger.error(f"Error generating {model} embedding: {e}")
            raise EmbeddingFailureError(model, e) from e

    async def embed(self, text: str, model: str) -> EmbeddingResult:
        """Embed one text with the named model."""
        provider = self.provider(model)
        raw = await self._run(provider.embed, text, model)
        return EmbeddingResult(embedding=_as_vector(raw, model), model=model)

    async def embed_batch(self, texts: list[str], model: str) -> list[EmbeddingResult]:
        """Embed many texts with the named model in one provider call."""
        provider = self.provider(model)
        if not texts:
            return []
        raw = await self._run(provider.embed_batch, list(texts), model)
        if len(raw) != len(texts):
            raise EmbeddingFailureError(
                model, f"provider returned {len(raw)} vectors for {len(texts)} texts"
            )
        results = [EmbeddingResult(embedding=_as_vector(r, model), model=model) for r in raw]
        dims = {r.dimensions for r in results}
        if len(dims) > 1:
            raise EmbeddingFailureError(model, f"inconsistent dimensions {sorted(dims)}")
        return results


def build_providers(settings: Settings) -> dict[str, EmbeddingProvider]:
    """Instantiate one provider per named model according to settings."""
    if settings.use_mock_embeddings:
        providers: dict[str, EmbeddingProvider] = {
            name: MockEmbeddings(dimensions=MODEL_DIMENSIONS[name]) for name in EMBEDDING_MODELS
        }
    else:
        providers = {
            "sentence-bert": SentenceBertEmbeddings(),
            "bert": BertEmbeddings(),
            "word2vec-glove": HashedWordEmbeddings(),
            "gemini": GeminiEmbeddings(
                api_key=settings.gemini_api_key,
                base_url=settings.gemini_base_url,
            ),
        }

    if settings.embedding_cache_enabled:
        providers = {
            name: CachedEmbeddingProvider(provider, model=name)
            for name, provider in providers.items()
        }
    return providers


def get_embedding_service(settings: Settings | None = None) -> EmbeddingService:
    """
    Factory function for the embedding service.

    Args:
        settings: Engine settings (loaded from env if not provided)
    """
    settings = settings or get_settings()
    return EmbeddingService(
        build_providers(settings),
        timeout_seconds=settings.embedding_timeout_seconds,
    )
