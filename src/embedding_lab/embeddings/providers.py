"""
Embedding providers - one class per named embedding model.

Single responsibility: convert text to a vector. No scoring, no storage.

NAMED MODELS:
-------------
- sentence-bert:   all-MiniLM-L6-v2, mean pooling, normalized (384 dims)
- bert:            bert-base-uncased [CLS] token, normalized (768 dims)
- word2vec-glove:  averaged hashed pseudo word vectors (300 dims)
- gemini:          text-embedding-004 via Gemini's OpenAI-compatible API

The transformer backends are imported lazily so the numeric core and the
test suite never need torch installed.
"""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

logger = logging.getLogger(__name__)

EmbeddingModel = Literal["sentence-bert", "bert", "word2vec-glove", "gemini"]

EMBEDDING_MODELS: tuple[str, ...] = ("sentence-bert", "bert", "word2vec-glove", "gemini")

MODEL_DIMENSIONS = {
    "sentence-bert": 384,
    "bert": 768,
    "word2vec-glove": 300,
    "gemini": 768,
}


@dataclass(frozen=True)
class EmbeddingResult:
    """A vector together with the model that produced it."""

    embedding: np.ndarray
    model: str
    dimensions: int = field(init=False)

    def __post_init__(self) -> None:
        vector = np.asarray(self.embedding, dtype=np.float64)
        vector.setflags(write=False)
        object.__setattr__(self, "embedding", vector)
        object.__setattr__(self, "dimensions", int(vector.shape[0]))


def _normalize(vector: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vector)
    if norm > 0:
        return vector / norm
    return vector


def _seeded_unit_noise(key: str, dimensions: int) -> np.ndarray:
    """Deterministic pseudo-random vector in [-1, 1) derived from a string."""
    seed = int.from_bytes(hashlib.sha256(key.encode("utf-8")).digest()[:8], "little")
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=dimensions)


# ---------------------------------------------------------------------------
# SENTENCE-BERT (sentence-transformers)
# ---------------------------------------------------------------------------


class SentenceBertEmbeddings:
    """
    Sentence-BERT embeddings with mean pooling.

    Loads all-MiniLM-L6-v2 on first use and keeps it for the process.
    """

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None

    @property
    def dimensions(self) -> int:
        return MODEL_DIMENSIONS["sentence-bert"]

    def _load(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading sentence-transformers model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed(self, text: str) -> np.ndarray:
        model = self._load()
        vector = model.encode(text, normalize_embeddings=True)
        return np.asarray(vector, dtype=np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        if not texts:
            return []
        model = self._load()
        vectors = model.encode(texts, normalize_embeddings=True)
        return [np.asarray(v, dtype=np.float32) for v in vectors]


# ---------------------------------------------------------------------------
# BERT [CLS] (transformers)
# ---------------------------------------------------------------------------


class BertEmbeddings:
    """
    Plain BERT embeddings using the [CLS] token of the last hidden layer.
    """

    def __init__(self, model_name: str = "bert-base-uncased", max_length: int = 512):
        self.model_name = model_name
        self.max_length = max_length
        self._tokenizer = None
        self._model = None

    @property
    def dimensions(self) -> int:
        return MODEL_DIMENSIONS["bert"]

    def _load(self):
        if self._model is None:
            from transformers import AutoModel, AutoTokenizer

            logger.info(f"Loading transformers model: {self.model_name}")
            self._tokenizer = AutoTokenizer.from_pretrained(self.model_name)
            self._model = AutoModel.from_pretrained(self.model_name)
            self._model.eval()
        return self._tokenizer, self._model

    def embed(self, text: str) -> np.ndarray:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        if not texts:
            return []
        import torch

        tokenizer, model = self._load()
        inputs = tokenizer(
            texts,
            padding=True,
            truncation=True,
            max_length=self.max_length,
            return_tensors="pt",
        )
        with torch.no_grad():
            outputs = model(**inputs)
        cls = outputs.last_hidden_state[:, 0, :].cpu().numpy()
        return [_normalize(row.astype(np.float32)) for row in cls]


# ---------------------------------------------------------------------------
# WORD2VEC / GLOVE (averaged pseudo word vectors)
# ---------------------------------------------------------------------------


class HashedWordEmbeddings:
    """
    Averaged word-vector embeddings without a pretrained vocabulary.

    Each lowercase whitespace token maps to a deterministic pseudo-random
    vector seeded from its hash; the text vector is the normalized mean.
    Stands in for a GloVe/word2vec lookup table: texts sharing words share
    direction, which is all the classifier needs.
    """

    def __init__(self, dimensions: int = 300):
        self._dimensions = dimensions
        self._word_cache: dict[str, np.ndarray] = {}

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _word_vector(self, word: str) -> np.ndarray:
        vector = self._word_cache.get(word)
        if vector is None:
            vector = _seeded_unit_noise(word, self._dimensions)
            self._word_cache[word] = vector
        return vector

    def embed(self, text: str) -> np.ndarray:
        words = [w for w in re.split(r"\s+", text.lower()) if w]
        if not words:
            return np.zeros(self._dimensions, dtype=np.float32)
        mean = np.mean([self._word_vector(w) for w in words], axis=0)
        return _normalize(mean).astype(np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(text) for text in texts]


# ---------------------------------------------------------------------------
# GEMINI (OpenAI-compatible endpoint)
# ---------------------------------------------------------------------------


class GeminiEmbeddings:
    """
    Gemini text-embedding-004 through the openai SDK.

    Gemini serves an OpenAI-compatible embeddings route, so the same client
    library covers it.
    """

    def __init__(
        self,
        model: str = "text-embedding-004",
        api_key: str | None = None,
        base_url: str | None = None,
    ):
        from embedding_lab.config import DEFAULT_GEMINI_BASE_URL

        self.model = model
        self._api_key = api_key
        self._base_url = base_url or DEFAULT_GEMINI_BASE_URL
        self._client = None

    @property
    def dimensions(self) -> int:
        return MODEL_DIMENSIONS["gemini"]

    def _get_client(self):
        # The client refuses to construct without a key, so build it on first call
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    def embed(self, text: str) -> np.ndarray:
        response = self._get_client().embeddings.create(input=text, model=self.model)
        return np.array(response.data[0].embedding, dtype=np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        if not texts:
            return []
        response = self._get_client().embeddings.create(input=texts, model=self.model)
        return [np.array(item.embedding, dtype=np.float32) for item in response.data]


# ---------------------------------------------------------------------------
# MOCK (testing)
# ---------------------------------------------------------------------------


class MockEmbeddings:
    """
    Mock embedding provider for testing without model downloads or API calls.

    Generates deterministic pseudo-embeddings from text hashes.
    NOT for production use - only for testing/development.
    """

    def __init__(self, dimensions: int = 384):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        return _normalize(_seeded_unit_noise(text, self._dimensions)).astype(np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(text) for text in texts]
