"""
Core protocols defining the seams of the engine.

Two contracts matter:
- EmbeddingProvider: text -> vector for ONE named model.
- LinearClassifier: the fitted model the classifier registry holds.

PATTERN:
--------
- Protocol defines the contract
- Concrete classes implement it (sentence-transformers, numpy logistic regression)
- Test doubles (MockEmbeddings, keyword stubs) satisfy the same contract
- Factory functions choose which to use

Swapping the linear model or an embedding backend never touches the
orchestrator or the registry.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation under a single model.

    Implementations:
    - SentenceBertEmbeddings / BertEmbeddings (transformers)
    - HashedWordEmbeddings (word2vec-glove, in-process)
    - GeminiEmbeddings (OpenAI-compatible endpoint)
    - MockEmbeddings (testing)
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# LINEAR CLASSIFIER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class LinearClassifier(Protocol):
    """
    Contract for the fitted multi-class model.

    Exactly the operations the registry needs. Anything richer (native
    probabilities, regularization paths) stays behind the implementation.
    """

    def fit(self, X: np.ndarray, y: np.ndarray) -> "LinearClassifier":
        """Fit on an (n_samples, n_features) matrix and integer class indices."""
        ...

    def predict_index(self, X: np.ndarray) -> np.ndarray:
        """Return the argmax class index for each row of X."""
        ...

    def decision_scores(self, X: np.ndarray) -> np.ndarray:
        """Return per-class decision values, shape (n_samples, n_classes)."""
        ...
