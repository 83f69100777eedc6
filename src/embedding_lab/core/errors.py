"""
Error taxonomy for the retrieval and classification engine.

Every failure raised by the core derives from EmbeddingLabError so the
service layer can catch one type per method/model and turn it into an
``error`` field without aborting sibling work.

CLIENT vs PROGRAMMER ERRORS:
----------------------------
- UnsupportedModelError, ModelNotTrainedError: bad input from the caller,
  surfaced as client errors.
- DimensionMismatchError, SizeMismatchError: data/programmer errors,
  never recovered, always propagated.
- EmbeddingFailureError: the provider call failed. Reported per method or
  per model; no retries happen in the core.
"""

from __future__ import annotations


class EmbeddingLabError(Exception):
    """Base class for all engine errors."""


class DimensionMismatchError(EmbeddingLabError, ValueError):
    """Two vectors compared with different lengths."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(
            f"Vectors must have the same length (got {left} and {right})"
        )


class SizeMismatchError(EmbeddingLabError, ValueError):
    """Training vectors and labels have different counts."""

    def __init__(self, vectors: int, labels: int):
        self.vectors = vectors
        self.labels = labels
        super().__init__(
            f"Number of embeddings must match number of labels "
            f"({vectors} embeddings, {labels} labels)"
        )


class UnsupportedModelError(EmbeddingLabError, ValueError):
    """Embedding model name is not one of the known models."""

    def __init__(self, model: str, supported: tuple[str, ...] | list[str] = ()):
        self.model = model
        self.supported = tuple(supported)
        message = f"Unsupported embedding model: {model}"
        if self.supported:
            message += f". Must be one of: {', '.join(self.supported)}"
        super().__init__(message)


class ModelNotTrainedError(EmbeddingLabError, LookupError):
    """Predict or evaluate called before train for this embedding model."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(
            f"Model {model} is not trained. Please train the model first."
        )


class EmbeddingFailureError(EmbeddingLabError, RuntimeError):
    """The embedding provider failed to produce a vector."""

    def __init__(self, model: str, reason: str | BaseException):
        self.model = model
        self.reason = str(reason)
        super().__init__(f"Failed to generate {model} embedding: {self.reason}")
