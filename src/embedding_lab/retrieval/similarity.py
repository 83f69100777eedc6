"""
Similarity primitives and the lexical/hybrid scorers.

FORMULAS:
---------
COSINE:     dot(a, b) / (|a| * |b|), 0.0 when either norm is exactly zero
EUCLIDEAN:  1 / (1 + |a - b|)
LEXICAL:    (entities*1.0 + keywords*0.5 + section*1.0 matched in the query)
            / (n_entities + n_keywords*0.5 + 1), 0.0 when the doc has no entities
HYBRID:     0.6 * cosine + 0.4 * lexical

The Euclidean transform maps distance [0, inf) onto (0, 1] and decreases
monotonically with distance. It is a heuristic ranking score, not a metric:
only identical vectors reach 1 and there is no fixed lower bound.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from embedding_lab.core import DimensionMismatchError
from embedding_lab.retrieval.document import LegalDocument

logger = logging.getLogger(__name__)

# Hybrid weights are fixed design constants, not per-call parameters
HYBRID_VECTOR_WEIGHT = 0.6
HYBRID_LEXICAL_WEIGHT = 0.4

ENTITY_MATCH_WEIGHT = 1.0
KEYWORD_MATCH_WEIGHT = 0.5
SECTION_MATCH_WEIGHT = 1.0

Vector = Sequence[float] | np.ndarray


def _pair(a: Vector, b: Vector) -> tuple[np.ndarray, np.ndarray]:
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatchError(va.shape[0], vb.shape[0])
    return va, vb


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of the angle between two equal-length vectors."""
    va, vb = _pair(a, b)
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))

    if norm_a == 0.0 or norm_b == 0.0:
        # Zero-norm fallback: undefined angle scores as "no similarity"
        logger.debug("cosine_similarity: zero-norm vector, returning 0.0")
        return 0.0

    value = float(np.dot(va, vb) / (norm_a * norm_b))
    return float(np.clip(value, -1.0, 1.0))


def euclidean_distance(a: Vector, b: Vector) -> float:
    va, vb = _pair(a, b)
    return float(np.linalg.norm(va - vb))


def euclidean_similarity(a: Vector, b: Vector) -> float:
    """Map Euclidean distance to (0, 1]; 1 only for identical vectors."""
    return 1.0 / (1.0 + euclidean_distance(a, b))


def legal_entity_match(query: str, document: LegalDocument) -> float:
    """
    Score how many of a document's curated terms appear in the query.

    A document with no entities scores 0.0 even when keywords or the
    section match. That is the current behaviour, kept deliberately.
    """
    total_entities = len(document.entities)
    if total_entities == 0:
        return 0.0

    query_lower = query.lower()
    matches = 0.0

    for entity in document.entities:
        if entity.lower() in query_lower:
            matches += ENTITY_MATCH_WEIGHT

    for keyword in document.keywords:
        if keyword.lower() in query_lower:
            matches += KEYWORD_MATCH_WEIGHT

    if document.section and document.section.lower() in query_lower:
        matches += SECTION_MATCH_WEIGHT

    denominator = total_entities + len(document.keywords) * KEYWORD_MATCH_WEIGHT + 1
    return matches / denominator


def hybrid_similarity(
    query_embedding: Vector,
    doc_embedding: Vector,
    query: str,
    document: LegalDocument,
) -> float:
    """0.6 x cosine + 0.4 x legal entity match."""
    return (
        HYBRID_VECTOR_WEIGHT * cosine_similarity(query_embedding, doc_embedding)
        + HYBRID_LEXICAL_WEIGHT * legal_entity_match(query, document)
    )
