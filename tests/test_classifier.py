"""
Unit Tests for the Classifier Registry, Linear Model and Metrics

Vectors are built by hand so separability is known in advance. No
embedding provider is involved at this layer.

PROPERTIES CHECKED:
-------------------
1. Training on linearly separable data gives accuracy 1.0
2. Confusion matrix rows sum to actual-label counts; total == test size
3. Accuracy, precision, recall, F1 all lie in [0, 1]
4. Retraining replaces the model and clears cached performance
5. Out-of-range classifier output falls back to the first category
"""

import numpy as np
import pytest

from embedding_lab.classification import (
    BASE_CONFIDENCE,
    CATEGORIES,
    LEARNING_RATE,
    NUM_STEPS,
    PREDICTED_CONFIDENCE,
    TRAINING_ARTICLES,
    ArticleClassifier,
    ModelPerformance,
    OneVsRestLogisticRegression,
    compute_performance,
    get_articles_by_category,
    split_train_test,
    to_percent,
)
from embedding_lab.core import (
    DimensionMismatchError,
    LinearClassifier,
    ModelNotTrainedError,
    SizeMismatchError,
)
from embedding_lab.embeddings import EmbeddingResult


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


def _cluster(center, n, seed, spread=0.05):
    rng = np.random.default_rng(seed)
    return [np.asarray(center, dtype=float) + rng.normal(scale=spread, size=len(center)) for _ in range(n)]


@pytest.fixture
def separable_data():
    """Tech near e0, Finance near e1, in 6 dimensions."""
    tech_center = [1.0, 0.0, 0.0, 0.0, 0.0, 0.0]
    finance_center = [0.0, 1.0, 0.0, 0.0, 0.0, 0.0]
    train_x = _cluster(tech_center, 10, seed=1) + _cluster(finance_center, 10, seed=2)
    train_y = ["Tech"] * 10 + ["Finance"] * 10
    test_x = _cluster(tech_center, 4, seed=3) + _cluster(finance_center, 4, seed=4)
    test_y = ["Tech"] * 4 + ["Finance"] * 4
    return train_x, train_y, test_x, test_y


@pytest.fixture
def trained_registry(separable_data):
    train_x, train_y, _, _ = separable_data
    registry = ArticleClassifier()
    registry.train(train_x, train_y, "bert")
    return registry


class ConstantIndexClassifier:
    """LinearClassifier that always answers one index."""

    def __init__(self, index, n_classes=6):
        self.index = index
        self.n_classes = n_classes

    def fit(self, X, y):
        return self

    def predict_index(self, X):
        return np.full(np.atleast_2d(X).shape[0], self.index)

    def decision_scores(self, X):
        return np.zeros((np.atleast_2d(X).shape[0], self.n_classes))


# ---------------------------------------------------------------------------
# TRAINING DATA
# ---------------------------------------------------------------------------


class TestTrainingData:
    """Test the labelled corpus and split."""

    def test_categories_fixed_order(self):
        assert CATEGORIES == ("Tech", "Finance", "Healthcare", "Sports", "Politics", "Entertainment")

    def test_corpus_size(self):
        assert len(TRAINING_ARTICLES) == 30
        for category in CATEGORIES:
            assert len(get_articles_by_category(category)) == 5

    def test_labels_in_category_set(self):
        assert {a.category for a in TRAINING_ARTICLES} == set(CATEGORIES)

    def test_split_sizes(self):
        train, test = split_train_test(list(TRAINING_ARTICLES), 0.2, seed=42)
        assert len(train) == 24
        assert len(test) == 6
        assert {a.id for a in train}.isdisjoint({a.id for a in test})

    def test_split_floor(self):
        train, test = split_train_test(list(TRAINING_ARTICLES), 0.25, seed=1)
        # floor(30 * 0.75) = 22
        assert len(train) == 22
        assert len(test) == 8

    def test_split_seeded(self):
        a = split_train_test(list(TRAINING_ARTICLES), 0.2, seed=7)
        b = split_train_test(list(TRAINING_ARTICLES), 0.2, seed=7)
        assert [x.id for x in a[0]] == [x.id for x in b[0]]

    @pytest.mark.parametrize("split", [0.0, 1.0, -0.1, 1.5])
    def test_split_out_of_range(self, split):
        with pytest.raises(ValueError):
            split_train_test(list(TRAINING_ARTICLES), split)


# ---------------------------------------------------------------------------
# LINEAR MODEL
# ---------------------------------------------------------------------------


class TestOneVsRestLogisticRegression:
    """Test the numpy logistic regression."""

    def test_constants(self):
        assert NUM_STEPS == 1000
        assert LEARNING_RATE == 0.01

    def test_satisfies_protocol(self):
        assert isinstance(OneVsRestLogisticRegression(), LinearClassifier)

    def test_separable_fit(self, separable_data):
        train_x, _, test_x, _ = separable_data
        y = np.array([0] * 10 + [1] * 10)
        model = OneVsRestLogisticRegression(num_classes=6).fit(np.vstack(train_x), y)

        predicted = model.predict_index(np.vstack(test_x))
        assert list(predicted) == [0] * 4 + [1] * 4

    def test_decision_scores_shape(self, separable_data):
        train_x, _, _, _ = separable_data
        y = np.array([0] * 10 + [1] * 10)
        model = OneVsRestLogisticRegression(num_classes=6).fit(np.vstack(train_x), y)
        assert model.decision_scores(np.vstack(train_x)).shape == (20, 6)

    def test_infers_class_count(self):
        X = np.eye(3)
        model = OneVsRestLogisticRegression().fit(X, np.array([0, 1, 2]))
        assert model.weights.shape == (3, 3)

    def test_deterministic(self, separable_data):
        train_x, _, _, _ = separable_data
        X, y = np.vstack(train_x), np.array([0] * 10 + [1] * 10)
        a = OneVsRestLogisticRegression(num_classes=6).fit(X, y)
        b = OneVsRestLogisticRegression(num_classes=6).fit(X, y)
        assert np.array_equal(a.weights, b.weights)

    def test_unfitted_raises(self):
        with pytest.raises(RuntimeError):
            OneVsRestLogisticRegression().predict_index(np.ones((1, 3)))

    def test_empty_training_set(self):
        with pytest.raises(ValueError):
            OneVsRestLogisticRegression(num_classes=2).fit(np.empty((0, 3)), np.array([]))


# ---------------------------------------------------------------------------
# METRICS
# ---------------------------------------------------------------------------


class TestComputePerformance:
    """Test accuracy, precision, recall, F1 and the confusion matrix."""

    def test_perfect(self):
        perf = compute_performance(["Tech", "Finance"], ["Tech", "Finance"], CATEGORIES)
        assert perf.accuracy == 1.0
        assert perf.precision["Tech"] == 1.0
        assert perf.recall["Finance"] == 1.0

    def test_known_values(self):
        actual = ["Tech", "Tech", "Finance", "Finance"]
        predicted = ["Tech", "Finance", "Finance", "Finance"]
        perf = compute_performance(actual, predicted, CATEGORIES)

        assert perf.accuracy == pytest.approx(0.75)
        assert perf.precision["Tech"] == pytest.approx(1.0)
        assert perf.recall["Tech"] == pytest.approx(0.5)
        assert perf.precision["Finance"] == pytest.approx(2 / 3)
        assert perf.recall["Finance"] == pytest.approx(1.0)
        assert perf.f1_score["Tech"] == pytest.approx(2 / 3)

    def test_zero_denominators(self):
        perf = compute_performance(["Tech"], ["Tech"], CATEGORIES)
        assert perf.precision["Sports"] == 0.0
        assert perf.recall["Sports"] == 0.0
        assert perf.f1_score["Sports"] == 0.0

    def test_confusion_matrix(self):
        actual = ["Tech", "Tech", "Finance", "Sports"]
        predicted = ["Tech", "Finance", "Finance", "Tech"]
        matrix = compute_performance(actual, predicted, CATEGORIES).confusion_matrix

        assert len(matrix) == 6 and all(len(row) == 6 for row in matrix)
        assert matrix[0][0] == 1  # Tech -> Tech
        assert matrix[0][1] == 1  # Tech -> Finance
        assert matrix[1][1] == 1  # Finance -> Finance
        assert matrix[3][0] == 1  # Sports -> Tech
        assert sum(map(sum, matrix)) == 4

    def test_empty_test_set(self):
        perf = compute_performance([], [], CATEGORIES)
        assert perf.accuracy == 0.0
        assert sum(map(sum, perf.confusion_matrix)) == 0

    def test_percentages(self):
        perf = ModelPerformance(
            accuracy=2 / 3,
            precision={"Tech": 0.5},
            recall={"Tech": 1.0},
            f1_score={"Tech": 2 / 3},
            confusion_matrix=[[1]],
        )
        data = perf.to_percentages()
        assert data["accuracy"] == 66.67
        assert data["f1Score"] == {"Tech": 66.67}
        assert perf.summary()["avgPrecision"] == 50.0

    def test_percent_halves_round_up(self):
        # 0.00125 * 100 is exactly 0.125, which round() would take to 0.12
        assert to_percent(0.00125) == 0.13
        assert to_percent(1.0) == 100.0
        assert to_percent(0.0) == 0.0


# ---------------------------------------------------------------------------
# REGISTRY
# ---------------------------------------------------------------------------


class TestArticleClassifier:
    """Test train / predict / evaluate on the registry."""

    def test_separable_accuracy(self, trained_registry, separable_data):
        """Two linearly separable categories are classified perfectly."""
        _, _, test_x, test_y = separable_data
        perf = trained_registry.evaluate(test_x, test_y, "bert")
        assert perf.accuracy == 1.0

    def test_confusion_matrix_row_sums(self, trained_registry, separable_data):
        _, _, test_x, test_y = separable_data
        perf = trained_registry.evaluate(test_x, test_y, "bert")

        for i, category in enumerate(CATEGORIES):
            assert sum(perf.confusion_matrix[i]) == test_y.count(category)
        assert sum(map(sum, perf.confusion_matrix)) == len(test_y)

    def test_metric_bounds(self, trained_registry, separable_data):
        _, _, test_x, test_y = separable_data
        perf = trained_registry.evaluate(test_x, test_y, "bert")

        assert 0.0 <= perf.accuracy <= 1.0
        for category in CATEGORIES:
            p, r, f = perf.precision[category], perf.recall[category], perf.f1_score[category]
            assert 0.0 <= p <= 1.0 and 0.0 <= r <= 1.0 and 0.0 <= f <= 1.0
            if p == 0.0 and r == 0.0:
                assert f == 0.0

    def test_predict(self, trained_registry):
        result = trained_registry.predict(np.array([1.0, 0, 0, 0, 0, 0]), "bert")

        assert result.predicted_category == "Tech"
        assert result.confidence == PREDICTED_CONFIDENCE
        assert result.model == "bert"
        assert set(result.probabilities) == set(CATEGORIES)
        assert result.probabilities["Tech"] == 0.8
        assert result.probabilities["Finance"] == BASE_CONFIDENCE

    def test_predict_accepts_embedding_result(self, trained_registry):
        embedding = EmbeddingResult(embedding=[0.0, 1.0, 0, 0, 0, 0], model="bert")
        assert trained_registry.predict(embedding, "bert").predicted_category == "Finance"

    def test_predict_untrained(self):
        with pytest.raises(ModelNotTrainedError, match="train the model first"):
            ArticleClassifier().predict(np.ones(3), "gemini")

    def test_evaluate_untrained(self):
        with pytest.raises(ModelNotTrainedError):
            ArticleClassifier().evaluate([np.ones(3)], ["Tech"], "gemini")

    def test_predict_dimension_mismatch(self, trained_registry):
        with pytest.raises(DimensionMismatchError):
            trained_registry.predict(np.ones(4), "bert")

    def test_size_mismatch(self):
        with pytest.raises(SizeMismatchError):
            ArticleClassifier().train([np.ones(3), np.ones(3)], ["Tech"], "bert")

    def test_size_mismatch_leaves_registry_untouched(self):
        registry = ArticleClassifier()
        with pytest.raises(SizeMismatchError):
            registry.train([np.ones(3)], [], "bert")
        assert not registry.is_trained("bert")

    def test_mixed_vector_lengths(self):
        with pytest.raises(DimensionMismatchError):
            ArticleClassifier().train([np.ones(3), np.ones(4)], ["Tech", "Finance"], "bert")

    def test_retrain_clears_performance(self, trained_registry, separable_data):
        train_x, train_y, test_x, test_y = separable_data
        trained_registry.evaluate(test_x, test_y, "bert")
        assert trained_registry.get_performance("bert") is not None

        trained_registry.train(train_x, train_y, "bert")

        assert trained_registry.is_trained("bert")
        assert trained_registry.get_performance("bert") is None

    def test_unknown_label_maps_to_first_category(self, caplog):
        registry = ArticleClassifier(
            classifier_factory=lambda n: ConstantIndexClassifier(0, n)
        )
        with caplog.at_level("WARNING"):
            registry.train([np.ones(2)], ["Gardening"], "bert")
        assert "Unknown training label" in caplog.text

    def test_out_of_range_index_falls_back(self, caplog):
        registry = ArticleClassifier(
            classifier_factory=lambda n: ConstantIndexClassifier(99, n)
        )
        registry.train([np.ones(2), np.zeros(2)], ["Sports", "Politics"], "bert")

        with caplog.at_level("WARNING"):
            perf = registry.evaluate([np.ones(2)], ["Sports"], "bert")
            result = registry.predict(np.ones(2), "bert")

        assert perf.confusion_matrix[CATEGORIES.index("Sports")][0] == 1
        assert result.predicted_category == CATEGORIES[0]
        assert "out-of-range index 99" in caplog.text

    def test_listing_and_comparison(self, separable_data):
        train_x, train_y, test_x, test_y = separable_data
        registry = ArticleClassifier()
        registry.train(train_x, train_y, "bert")
        registry.train(train_x, train_y, "gemini")
        registry.evaluate(test_x, test_y, "gemini")

        assert registry.list_trained() == ["bert", "gemini"]
        assert set(registry.compare_models()) == {"gemini"}

    def test_registries_are_independent(self, trained_registry):
        assert trained_registry.is_trained("bert")
        assert not ArticleClassifier().is_trained("bert")
