"""
RetrievalService - run several similarity methods for one query.

Methods are independent: each runs its own search_documents() call
concurrently with the others. A method whose embedding call fails is
reported with an ``error`` string; its siblings still return results.
Anything else (dimension or size mismatches, unsupported models, bugs)
is not converted and fails the whole call.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from embedding_lab.core import EmbeddingFailureError
from embedding_lab.embeddings import EmbeddingService
from embedding_lab.retrieval import (
    DEFAULT_SEARCH_MODEL,
    SIMILARITY_METHODS,
    LegalDocument,
    SearchResponse,
    documents_by_category,
    get_legal_documents,
    search_documents,
)
from embedding_lab.retrieval.search import DEFAULT_TOP_K

logger = logging.getLogger(__name__)


@dataclass
class MethodOutcome:
    """Result of one method: a response or an error, never both."""

    method: str
    response: SearchResponse | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.response is None:
            return {"error": self.error}
        return self.response.to_dict()


class RetrievalService:
    """
    Multi-method search over an in-memory document set.

    Args:
        embeddings: Embedding service (injected)
        documents: Corpus (defaults to the bundled legal documents)
        model: Embedding model for queries and documents
        top_k: Result count for non-MMR methods
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        documents: Sequence[LegalDocument] | None = None,
        model: str = DEFAULT_SEARCH_MODEL,
        top_k: int = DEFAULT_TOP_K,
    ):
        self.embeddings = embeddings
        self.documents = list(documents) if documents is not None else get_legal_documents()
        self.model = model
        self.top_k = top_k

    async def _run_method(self, query: str, method: str) -> SearchResponse:
        return await search_documents(
            query,
            self.documents,
            method,
            self.embeddings,
            top_k=self.top_k,
            model=self.model,
        )

    async def search(self, query: str, methods: Sequence[str] | None = None) -> dict[str, MethodOutcome]:
        """
        Search with each requested method.

        Args:
            query: Non-empty query text
            methods: Subset of SIMILARITY_METHODS (default: all, in canonical order)

        Returns:
            Mapping of method name to MethodOutcome, in request order

        Raises:
            ValueError: Empty query or unknown method name
            DimensionMismatchError: Query and document vectors differ in length
            UnsupportedModelError: The search model has no provider
        """
        if not query or not query.strip():
            raise ValueError("Query is required and must be a non-empty string")

        selected = list(dict.fromkeys(methods)) if methods else list(SIMILARITY_METHODS)
        unknown = [m for m in selected if m not in SIMILARITY_METHODS]
        if unknown:
            raise ValueError(
                f"Unknown similarity method(s): {', '.join(unknown)}. "
                f"Must be one of: {', '.join(SIMILARITY_METHODS)}"
            )

        logger.info(f"Searching {len(self.documents)} documents with methods={selected}")
        results = await asyncio.gather(
            *(self._run_method(query, method) for method in selected),
            return_exceptions=True,
        )

        outcomes: dict[str, MethodOutcome] = {}
        for method, result in zip(selected, results):
            if isinstance(result, SearchResponse):
                outcomes[method] = MethodOutcome(method=method, response=result)
            elif isinstance(result, EmbeddingFailureError):
                logger.error(f"Search method {method} failed: {result}")
                outcomes[method] = MethodOutcome(method=method, error=str(result))
            else:
                raise result
        return outcomes

    def list_documents(self) -> dict:
        """Document summaries (id, title, section) grouped by category."""
        grouped = documents_by_category(self.documents)
        return {
            "totalDocuments": len(self.documents),
            "categories": list(grouped),
            "documentsByCategory": grouped,
            "availableMethods": list(SIMILARITY_METHODS),
        }
