"""
Seed data for the retrieval system.

Separating data from the scoring code keeps the corpus editable without
touching algorithms, and lets tests build small controlled corpora.
"""

from embedding_lab.retrieval.seeds.legal_documents import (
    BenchmarkQuery,
    get_legal_documents,
    get_benchmark_queries,
    documents_by_category,
)

__all__ = [
    "BenchmarkQuery",
    "get_legal_documents",
    "get_benchmark_queries",
    "documents_by_category",
]
