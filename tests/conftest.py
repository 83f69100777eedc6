"""
Shared fixtures: deterministic stub embedding providers and state resets.

KeywordBagEmbeddings counts a small vocabulary of legal/news words, so
texts about the same subject point the same way. It stands in for a real
sentence encoder without downloading a model.
"""

import re

import numpy as np
import pytest

from embedding_lab.config import reset_settings
from embedding_lab.embeddings import EmbeddingService
from embedding_lab.observability import reset_config, reset_tracer


KEYWORD_VOCABULARY = (
    "income", "tax", "deduction", "education",
    "gst", "textile", "court", "fee",
    "property", "registration", "evidence", "rera",
)


class KeywordBagEmbeddings:
    """Word-count vector over a fixed vocabulary."""

    def __init__(self, vocabulary=KEYWORD_VOCABULARY):
        self.vocabulary = tuple(vocabulary)
        self.calls = 0

    def embed(self, text):
        self.calls += 1
        words = re.findall(r"\w+", text.lower())
        return np.array([words.count(v) for v in self.vocabulary], dtype=np.float64)

    def embed_batch(self, texts):
        return [self.embed(t) for t in texts]


class FailingEmbeddings:
    """Provider whose every call raises."""

    def __init__(self, message="provider unavailable"):
        self.message = message

    def embed(self, text):
        raise RuntimeError(self.message)

    def embed_batch(self, texts):
        raise RuntimeError(self.message)


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Keep tracer/config singletons from leaking between tests."""
    reset_tracer()
    reset_config()
    reset_settings()
    yield
    reset_tracer()
    reset_config()
    reset_settings()


@pytest.fixture
def keyword_embeddings():
    return KeywordBagEmbeddings()


@pytest.fixture
def keyword_service(keyword_embeddings):
    """EmbeddingService with the keyword-bag stub under the default model name."""
    return EmbeddingService({"sentence-bert": keyword_embeddings})
