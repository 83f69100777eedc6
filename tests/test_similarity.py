"""
Unit Tests for Similarity Primitives

Covers cosine, Euclidean-derived similarity, the lexical/entity scorer and
the hybrid combination, including the documented edge cases:
- zero-norm vectors score 0 under cosine
- mismatched lengths raise DimensionMismatchError
- a document with no entities scores 0 lexically even if keywords match
"""

import math

import numpy as np
import pytest

from embedding_lab.core import DimensionMismatchError
from embedding_lab.retrieval import (
    HYBRID_LEXICAL_WEIGHT,
    HYBRID_VECTOR_WEIGHT,
    LegalDocument,
    cosine_similarity,
    euclidean_distance,
    euclidean_similarity,
    hybrid_similarity,
    legal_entity_match,
)


def _doc(**overrides):
    fields = dict(
        id="doc-1",
        title="Section 80C - Deduction for Education",
        content="Deduction for tuition fees.",
        category="Income Tax",
        section="80C",
        keywords=("deduction", "education"),
        entities=("Section 80C", "Income Tax Act"),
    )
    fields.update(overrides)
    return LegalDocument(**fields)


# ---------------------------------------------------------------------------
# COSINE
# ---------------------------------------------------------------------------


class TestCosineSimilarity:
    """Test cosine similarity."""

    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_symmetric(self):
        rng = np.random.default_rng(7)
        a, b = rng.normal(size=16), rng.normal(size=16)
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_bounded(self):
        rng = np.random.default_rng(11)
        for _ in range(20):
            a, b = rng.normal(size=8), rng.normal(size=8)
            assert -1.0 <= cosine_similarity(a, b) <= 1.0

    def test_scale_invariant(self):
        a = np.array([0.3, -1.2, 4.0])
        b = np.array([2.0, 0.5, 1.0])
        assert cosine_similarity(a * 10, b) == pytest.approx(cosine_similarity(a, b))

    def test_zero_norm_returns_zero(self):
        """Zero vector has no direction; scores as no similarity."""
        assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
        assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])
        assert exc_info.value.left == 2
        assert exc_info.value.right == 3

    def test_dimension_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [1.0, 2.0])


# ---------------------------------------------------------------------------
# EUCLIDEAN
# ---------------------------------------------------------------------------


class TestEuclideanSimilarity:
    """Test Euclidean distance and its similarity transform."""

    def test_distance(self):
        assert euclidean_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)

    def test_identical_vectors_score_one(self):
        assert euclidean_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_transform(self):
        assert euclidean_similarity([0.0, 0.0], [3.0, 4.0]) == pytest.approx(1 / 6)

    def test_in_unit_interval(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            a, b = rng.normal(size=5) * 10, rng.normal(size=5) * 10
            score = euclidean_similarity(a, b)
            assert 0.0 < score <= 1.0

    def test_decreases_with_distance(self):
        origin = [0.0, 0.0]
        near = euclidean_similarity(origin, [1.0, 0.0])
        far = euclidean_similarity(origin, [5.0, 0.0])
        assert near > far

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            euclidean_similarity([1.0], [1.0, 2.0])


# ---------------------------------------------------------------------------
# LEGAL ENTITY MATCH
# ---------------------------------------------------------------------------


class TestLegalEntityMatch:
    """Test the lexical/entity scorer."""

    def test_keyword_matches(self):
        """'deduction' and 'education' keywords match at 0.5 each."""
        doc = _doc()
        # denominator: 2 entities + 2 keywords * 0.5 + 1 = 4
        assert legal_entity_match("deduction for education", doc) == pytest.approx(1.0 / 4)

    def test_entity_and_section_matches(self):
        doc = _doc()
        score = legal_entity_match("Is Section 80C under the Income Tax Act?", doc)
        # entities: 2 * 1.0, section "80c" present: 1.0 -> 3.0 / 4
        assert score == pytest.approx(3.0 / 4)

    def test_case_insensitive(self):
        doc = _doc()
        assert legal_entity_match("SECTION 80C", doc) == legal_entity_match("section 80c", doc)

    def test_no_matches_scores_zero(self):
        assert legal_entity_match("court fee structure", _doc()) == 0.0

    def test_zero_entities_scores_zero_even_with_keyword_match(self):
        """Documents without entities score 0 regardless of keyword overlap."""
        doc = _doc(entities=())
        assert legal_entity_match("deduction for education under 80C", doc) == 0.0

    def test_no_section(self):
        doc = _doc(section=None)
        assert legal_entity_match("section 80c", doc) == pytest.approx(1.0 / 4)


# ---------------------------------------------------------------------------
# HYBRID
# ---------------------------------------------------------------------------


class TestHybridSimilarity:
    """Test the weighted hybrid score."""

    def test_weights(self):
        assert HYBRID_VECTOR_WEIGHT == 0.6
        assert HYBRID_LEXICAL_WEIGHT == 0.4

    def test_combination(self):
        doc = _doc()
        query = "deduction for education"
        q, d = [1.0, 0.0], [1.0, 1.0]
        expected = 0.6 * (1 / math.sqrt(2)) + 0.4 * 0.25
        assert hybrid_similarity(q, d, query, doc) == pytest.approx(expected)

    def test_pure_vector_when_no_lexical_match(self):
        doc = _doc()
        assert hybrid_similarity([1.0, 0.0], [1.0, 0.0], "unrelated", doc) == pytest.approx(0.6)
