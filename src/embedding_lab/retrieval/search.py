"""
Retrieval orchestrator - one query, one similarity method.

FLOW:
-----
1. Embed the query with the default model
2. Embed every document ("{title} {content}") with the same model
3. Score each document with the chosen method (mmr scores with cosine)
4. Sort by score, descending
5. mmr: re-rank the FULL sorted list, ignoring top_k (capped at 5)
   others: truncate to top_k
6. Compute precision, recall, diversity and wall-clock time

Every call re-embeds every document. With the bundled corpus that is cheap
relative to the provider latency; larger corpora should inject a
CachedEmbeddingProvider rather than cache here.

Any embedding failure fails the whole call with EmbeddingFailureError.
Partial result lists are never returned.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Literal, Sequence

from embedding_lab.embeddings import EmbeddingService
from embedding_lab.observability import get_config, get_tracer
from embedding_lab.observability.attributes import (
    RETRIEVAL_QUERY,
    RETRIEVAL_RESULT_COUNT,
    retrieval_search_attributes,
)
from embedding_lab.retrieval.document import LegalDocument, SearchResult
from embedding_lab.retrieval.metrics import (
    SearchMetrics,
    calculate_diversity_score,
    calculate_precision,
    calculate_recall,
)
from embedding_lab.retrieval.mmr import calculate_mmr
from embedding_lab.retrieval.similarity import (
    cosine_similarity,
    euclidean_similarity,
    hybrid_similarity,
    legal_entity_match,
)

logger = logging.getLogger(__name__)

SimilarityMethod = Literal["cosine", "euclidean", "mmr", "hybrid"]

SIMILARITY_METHODS: tuple[str, ...] = ("cosine", "euclidean", "mmr", "hybrid")

DEFAULT_SEARCH_MODEL = "sentence-bert"
DEFAULT_TOP_K = 5


@dataclass
class SearchResponse:
    """Ranked results and metrics for one method."""

    method: str
    results: list[SearchResult]
    metrics: SearchMetrics

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "metrics": self.metrics.to_dict(),
        }


def _score(method: str, query: str, query_vec, doc_vec, document: LegalDocument) -> tuple[float, str]:
    if method == "cosine":
        score = cosine_similarity(query_vec, doc_vec)
        return score, f"Cosine similarity: {score:.3f}"

    if method == "euclidean":
        score = euclidean_similarity(query_vec, doc_vec)
        return score, f"Euclidean similarity: {score:.3f}"

    if method == "hybrid":
        cosine_score = cosine_similarity(query_vec, doc_vec)
        entity_score = legal_entity_match(query, document)
        score = hybrid_similarity(query_vec, doc_vec, query, document)
        return score, f"Hybrid: {score:.3f} (Cosine: {cosine_score:.3f}, Entity: {entity_score:.3f})"

    # mmr: base relevance before re-ranking
    score = cosine_similarity(query_vec, doc_vec)
    return score, f"Base relevance: {score:.3f}"


async def search_documents(
    query: str,
    documents: Sequence[LegalDocument],
    method: str,
    embeddings: EmbeddingService,
    top_k: int = DEFAULT_TOP_K,
    model: str = DEFAULT_SEARCH_MODEL,
) -> SearchResponse:
    """
    Rank documents for a query with one similarity method.

    Args:
        query: Free-text query
        documents: Candidate corpus
        method: cosine | euclidean | mmr | hybrid
        embeddings: Embedding service (injected)
        top_k: Result count for every method except mmr
        model: Embedding model for query and documents alike

    Raises:
        ValueError: Unknown method
        EmbeddingFailureError: Query or any document failed to embed
        DimensionMismatchError: Provider returned vectors of different lengths
    """
    if method not in SIMILARITY_METHODS:
        raise ValueError(
            f"Unknown similarity method: {method}. Must be one of: {', '.join(SIMILARITY_METHODS)}"
        )

    tracer = get_tracer()
    start = time.perf_counter()

    with tracer.start_span(
        "retrieval.search",
        attributes=retrieval_search_attributes(method, model, len(documents), top_k),
    ) as span:
        query_embedding = await embeddings.embed(query, model)
        doc_embeddings = await embeddings.embed_batch(
            [doc.embedding_text for doc in documents], model
        )

        scored: list[SearchResult] = []
        for document, doc_embedding in zip(documents, doc_embeddings):
            score, explanation = _score(
                method, query, query_embedding.embedding, doc_embedding.embedding, document
            )
            scored.append(
                SearchResult(document=document, score=score, method=method, explanation=explanation)
            )

        # Stable sort keeps corpus order among equal scores
        scored.sort(key=lambda r: r.score, reverse=True)

        if method == "mmr":
            final_results = calculate_mmr(scored)
        else:
            final_results = scored[:top_k]

        precision = calculate_precision(final_results, query)
        recall = calculate_recall(final_results, documents, query)
        diversity = calculate_diversity_score(final_results)
        elapsed_ms = (time.perf_counter() - start) * 1000

        metrics = SearchMetrics(
            precision=precision,
            recall=recall,
            diversity_score=diversity,
            execution_time_ms=elapsed_ms,
        )
        span.set_attribute(RETRIEVAL_RESULT_COUNT, len(final_results))
        if get_config().capture_query_text:
            span.set_attribute(RETRIEVAL_QUERY, query)

    logger.debug(
        f"search method={method} results={len(final_results)} "
        f"precision={precision:.2f} recall={recall:.2f} time={elapsed_ms:.1f}ms"
    )
    return SearchResponse(method=method, results=final_results, metrics=metrics)
