"""
Core module - shared protocols and the error taxonomy.

USAGE:
------
from embedding_lab.core import EmbeddingProvider, ModelNotTrainedError

class MyProvider:
    '''Implements EmbeddingProvider protocol.'''
    ...
"""

from embedding_lab.core.errors import (
    EmbeddingLabError,
    DimensionMismatchError,
    SizeMismatchError,
    UnsupportedModelError,
    ModelNotTrainedError,
    EmbeddingFailureError,
)
from embedding_lab.core.protocols import (
    EmbeddingProvider,
    LinearClassifier,
)

__all__ = [
    # Protocols
    "EmbeddingProvider",
    "LinearClassifier",
    # Errors
    "EmbeddingLabError",
    "DimensionMismatchError",
    "SizeMismatchError",
    "UnsupportedModelError",
    "ModelNotTrainedError",
    "EmbeddingFailureError",
]
