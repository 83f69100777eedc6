"""
Embeddings module - text embedding generation per named model.

1. Protocol (EmbeddingProvider, in core) defines the interface
2. One provider class per named model
3. Test double (MockEmbeddings) for fast testing
4. EmbeddingService dispatches by model name; get_embedding_service builds it
5. CachedEmbeddingProvider is an opt-in, content-addressed cache
"""

from embedding_lab.embeddings.providers import (
    EMBEDDING_MODELS,
    MODEL_DIMENSIONS,
    EmbeddingModel,
    EmbeddingResult,
    SentenceBertEmbeddings,
    BertEmbeddings,
    HashedWordEmbeddings,
    GeminiEmbeddings,
    MockEmbeddings,
)
from embedding_lab.embeddings.cache import CachedEmbeddingProvider, cache_key
from embedding_lab.embeddings.service import (
    EmbeddingService,
    build_providers,
    get_embedding_service,
)

__all__ = [
    "EMBEDDING_MODELS",
    "MODEL_DIMENSIONS",
    "EmbeddingModel",
    "EmbeddingResult",
    "SentenceBertEmbeddings",
    "BertEmbeddings",
    "HashedWordEmbeddings",
    "GeminiEmbeddings",
    "MockEmbeddings",
    "CachedEmbeddingProvider",
    "cache_key",
    "EmbeddingService",
    "build_providers",
    "get_embedding_service",
]
