"""
Retrieval module - multi-method ranking over embedded legal documents.

This module provides:
- LegalDocument / SearchResult: the data model
- Similarity primitives: cosine, euclidean, legal entity match, hybrid
- calculate_mmr / document_similarity: diversity-aware re-ranking
- Metrics: precision, recall, diversity
- search_documents(): the async orchestrator
- Seeds: the legal corpus and benchmark queries
"""

from embedding_lab.retrieval.document import (
    LEGAL_CATEGORIES,
    LegalCategory,
    LegalDocument,
    SearchResult,
)
from embedding_lab.retrieval.similarity import (
    HYBRID_LEXICAL_WEIGHT,
    HYBRID_VECTOR_WEIGHT,
    cosine_similarity,
    euclidean_distance,
    euclidean_similarity,
    legal_entity_match,
    hybrid_similarity,
)
from embedding_lab.retrieval.mmr import (
    MMR_LAMBDA,
    MMR_RESULT_LIMIT,
    calculate_mmr,
    document_similarity,
)
from embedding_lab.retrieval.metrics import (
    SearchMetrics,
    is_lexically_relevant,
    calculate_precision,
    calculate_recall,
    calculate_diversity_score,
)
from embedding_lab.retrieval.search import (
    DEFAULT_SEARCH_MODEL,
    SIMILARITY_METHODS,
    SearchResponse,
    SimilarityMethod,
    search_documents,
)
from embedding_lab.retrieval.seeds import (
    BenchmarkQuery,
    get_legal_documents,
    get_benchmark_queries,
    documents_by_category,
)

__all__ = [
    # Model
    "LEGAL_CATEGORIES",
    "LegalCategory",
    "LegalDocument",
    "SearchResult",
    # Similarity
    "HYBRID_LEXICAL_WEIGHT",
    "HYBRID_VECTOR_WEIGHT",
    "cosine_similarity",
    "euclidean_distance",
    "euclidean_similarity",
    "legal_entity_match",
    "hybrid_similarity",
    # MMR
    "MMR_LAMBDA",
    "MMR_RESULT_LIMIT",
    "calculate_mmr",
    "document_similarity",
    # Metrics
    "SearchMetrics",
    "is_lexically_relevant",
    "calculate_precision",
    "calculate_recall",
    "calculate_diversity_score",
    # Orchestrator
    "DEFAULT_SEARCH_MODEL",
    "SIMILARITY_METHODS",
    "SearchResponse",
    "SimilarityMethod",
    "search_documents",
    # Seeds
    "BenchmarkQuery",
    "get_legal_documents",
    "get_benchmark_queries",
    "documents_by_category",
]
