"""
Maximal Marginal Relevance re-ranking.

    mmr(d) = lambda * relevance(d) - (1 - lambda) * max_{s in selected} sim(d, s)

Greedy: take the most relevant candidate first, then repeatedly take the
candidate with the best trade-off between its own relevance and its
redundancy with what is already chosen. The output is capped at
MMR_RESULT_LIMIT regardless of the caller's top_k.

Document-to-document similarity uses curated metadata, not vectors:

    0.3 * same_category + 0.4 * overlap(keywords) + 0.3 * overlap(entities)
    overlap(A, B) = |A & B| / max(|A|, |B|), 0 when both are empty
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from embedding_lab.retrieval.document import LegalDocument, SearchResult

logger = logging.getLogger(__name__)

MMR_LAMBDA = 0.7
MMR_RESULT_LIMIT = 5

CATEGORY_WEIGHT = 0.3
KEYWORD_OVERLAP_WEIGHT = 0.4
ENTITY_OVERLAP_WEIGHT = 0.3


def _overlap(a: Iterable[str], b: Iterable[str]) -> float:
    set_a, set_b = set(a), set(b)
    largest = max(len(set_a), len(set_b))
    if largest == 0:
        return 0.0
    return len(set_a & set_b) / largest


def document_similarity(doc1: LegalDocument, doc2: LegalDocument) -> float:
    """Metadata similarity between two documents, in [0, 1]."""
    similarity = 0.0
    if doc1.category == doc2.category:
        similarity += CATEGORY_WEIGHT
    similarity += KEYWORD_OVERLAP_WEIGHT * _overlap(doc1.keywords, doc2.keywords)
    similarity += ENTITY_OVERLAP_WEIGHT * _overlap(doc1.entities, doc2.entities)
    return similarity


def calculate_mmr(
    candidates: Sequence[SearchResult],
    selected: Sequence[LegalDocument] = (),
    lambda_: float = MMR_LAMBDA,
    limit: int = MMR_RESULT_LIMIT,
) -> list[SearchResult]:
    """
    Re-rank scored candidates for diversity.

    Args:
        candidates: Results whose score is the base relevance.
        selected: Documents already shown elsewhere. They penalize later
            picks like chosen results do but are never returned.
        lambda_: Relevance/diversity trade-off; 1.0 is pure relevance.
        limit: Maximum number of results.

    Returns:
        The first pick keeps its base score; later picks carry their MMR
        score and an explanation with both values.
    """
    if not candidates or limit <= 0:
        return []

    available = list(candidates)

    # max() keeps the first occurrence on ties
    first = max(available, key=lambda r: r.score)
    results = [first]
    available.remove(first)
    chosen_docs = list(selected) + [first.document]

    while available and len(results) < limit:
        best_candidate: SearchResult | None = None
        best_score = float("-inf")

        for candidate in available:
            max_similarity = max(
                document_similarity(candidate.document, doc) for doc in chosen_docs
            )
            mmr_score = lambda_ * candidate.score - (1 - lambda_) * max_similarity
            if mmr_score > best_score:
                best_score = mmr_score
                best_candidate = candidate

        logger.debug(
            f"MMR pick {best_candidate.document.id}: mmr={best_score:.3f} "
            f"relevance={best_candidate.score:.3f}"
        )
        results.append(
            replace(
                best_candidate,
                score=best_score,
                explanation=f"MMR Score: {best_score:.3f} (Relevance: {best_candidate.score:.3f})",
            )
        )
        available.remove(best_candidate)
        chosen_docs.append(best_candidate.document)

    return results
