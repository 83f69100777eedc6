"""
Retrieval quality metrics computed without a relevance judgment file.

"Relevant" is defined lexically and independently of any ranking: a
document is relevant to a query when one of its keywords or entities
occurs in the lowercased query, or the whole lowercased query occurs in
its body.

METRICS:
--------
PRECISION: fraction of returned results that are lexically relevant
  - 0.0 for an empty result list
RECALL: relevant documents returned / relevant documents in the FULL corpus
  - 1.0 when nothing in the corpus is relevant (vacuous convention)
DIVERSITY: 1 - mean pairwise document_similarity over the returned set
  - 1.0 for zero or one result
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

from embedding_lab.retrieval.document import LegalDocument, SearchResult
from embedding_lab.retrieval.mmr import document_similarity


@dataclass
class SearchMetrics:
    """Quality and latency of one search call."""

    precision: float
    recall: float
    diversity_score: float
    execution_time_ms: float

    def to_dict(self) -> dict:
        return {
            "precision": self.precision,
            "recall": self.recall,
            "diversityScore": self.diversity_score,
            "executionTimeMs": self.execution_time_ms,
        }


def is_lexically_relevant(document: LegalDocument, query: str) -> bool:
    """True when the document's curated terms or body overlap the query."""
    query_lower = query.lower()
    return (
        any(k.lower() in query_lower for k in document.keywords)
        or any(e.lower() in query_lower for e in document.entities)
        or query_lower in document.content.lower()
    )


def calculate_precision(results: Sequence[SearchResult], query: str) -> float:
    if not results:
        return 0.0
    relevant = sum(1 for r in results if is_lexically_relevant(r.document, query))
    return relevant / len(results)


def calculate_recall(
    results: Sequence[SearchResult],
    all_documents: Sequence[LegalDocument],
    query: str,
) -> float:
    relevant_ids = {doc.id for doc in all_documents if is_lexically_relevant(doc, query)}
    if not relevant_ids:
        # Vacuously satisfied: nothing to find
        return 1.0
    found = {r.document.id for r in results} & relevant_ids
    return len(found) / len(relevant_ids)


def calculate_diversity_score(results: Sequence[SearchResult]) -> float:
    if len(results) <= 1:
        return 1.0
    similarities = [
        document_similarity(a.document, b.document) for a, b in combinations(results, 2)
    ]
    return 1.0 - sum(similarities) / len(similarities)
