"""
ArticleClassifier - registry of one trained linear model per embedding model.

The registry is an ordinary object: the service layer constructs and owns
one, tests construct as many independent ones as they like. Nothing here
is module-global.

LIFECYCLE PER KEY:
------------------
absent --train--> trained (no performance)
trained --evaluate--> trained (performance cached)
trained --train--> trained (replaced, performance cleared)

CONCURRENCY:
------------
Each embedding-model key has its own threading lock, so a train and an
evaluate on the same key from different threads never interleave. The lock
covers one call only; a train-then-evaluate sequence that must be atomic is
serialized by the caller (ClassificationService holds an asyncio.Lock per
model across it). predict reads the current entry without taking the lock,
so it sees either the old or the new model, never a half-built one.

PROBABILITIES:
--------------
predict() reports 0.8 for the predicted category and 0.1 for every other
one. This is a fixed placeholder, NOT a calibrated posterior. A softmax
over decision_scores() would be the natural replacement.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np

from embedding_lab.classification.linear_model import OneVsRestLogisticRegression
from embedding_lab.classification.metrics import ModelPerformance, compute_performance
from embedding_lab.classification.training_data import CATEGORIES
from embedding_lab.core import (
    DimensionMismatchError,
    LinearClassifier,
    ModelNotTrainedError,
    SizeMismatchError,
)
from embedding_lab.observability import get_tracer
from embedding_lab.observability.attributes import (
    CLASSIFIER_ACCURACY,
    CLASSIFIER_CLASS_COUNT,
    CLASSIFIER_PREDICTED_CATEGORY,
    classifier_attributes,
)

logger = logging.getLogger(__name__)

PREDICTED_CONFIDENCE = 0.8
BASE_CONFIDENCE = 0.1


@dataclass
class TrainedModel:
    """A fitted classifier plus what is needed to interpret its output."""

    classifier: LinearClassifier
    embedding_model: str
    categories: tuple[str, ...]
    dimensions: int
    training_size: int
    performance: ModelPerformance | None = None


@dataclass
class ClassificationResult:
    """Prediction for one vector under one embedding model."""

    predicted_category: str
    confidence: float
    probabilities: dict[str, float] = field(default_factory=dict)
    model: str = ""


def _as_matrix(vectors: Sequence) -> np.ndarray:
    rows = [np.asarray(getattr(v, "embedding", v), dtype=np.float64) for v in vectors]
    if not rows:
        return np.empty((0, 0))
    lengths = {row.shape[0] for row in rows}
    if len(lengths) > 1:
        low, high = min(lengths), max(lengths)
        raise DimensionMismatchError(low, high)
    return np.vstack(rows)


class ArticleClassifier:
    """
    Per-embedding-model classifier registry.

    Args:
        categories: Fixed ordered category list shared by every model
        classifier_factory: Builds an unfitted LinearClassifier for n classes
    """

    def __init__(
        self,
        categories: Sequence[str] = CATEGORIES,
        classifier_factory: Callable[[int], LinearClassifier] | None = None,
    ):
        self.categories: tuple[str, ...] = tuple(categories)
        self._index = {category: i for i, category in enumerate(self.categories)}
        self._factory = classifier_factory or (
            lambda n: OneVsRestLogisticRegression(num_classes=n)
        )
        self._models: dict[str, TrainedModel] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, model: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(model, threading.Lock())

    def _label_index(self, label: str) -> int:
        index = self._index.get(label)
        if index is None:
            logger.warning(f"Unknown training label '{label}', using category index 0")
            return 0
        return index

    def _category_for(self, index: int, model: str) -> str:
        if 0 <= index < len(self.categories):
            return self.categories[index]
        logger.warning(
            f"Classifier for {model} produced out-of-range index {index}, "
            f"falling back to {self.categories[0]}"
        )
        return self.categories[0]

    def _get(self, model: str) -> TrainedModel:
        trained = self._models.get(model)
        if trained is None:
            raise ModelNotTrainedError(model)
        return trained

    # -----------------------------------------------------------------------
    # TRAIN / PREDICT / EVALUATE
    # -----------------------------------------------------------------------

    def train(self, vectors: Sequence, labels: Sequence[str], model: str) -> TrainedModel:
        """
        Fit a new classifier for an embedding model, replacing any previous one.

        Args:
            vectors: Training vectors (arrays or EmbeddingResults)
            labels: Category name per vector
            model: Embedding model name (registry key)

        Raises:
            SizeMismatchError: len(vectors) != len(labels)
            DimensionMismatchError: vectors of different lengths
        """
        if len(vectors) != len(labels):
            raise SizeMismatchError(len(vectors), len(labels))

        X = _as_matrix(vectors)
        y = np.array([self._label_index(label) for label in labels], dtype=np.int64)

        tracer = get_tracer()
        with self._lock_for(model):
            with tracer.start_span(
                "classifier.train",
                attributes=classifier_attributes("train", model, example_count=len(labels)),
            ) as span:
                span.set_attribute(CLASSIFIER_CLASS_COUNT, len(self.categories))
                logger.info(f"Training classifier for {model} on {len(labels)} examples")

                classifier = self._factory(len(self.categories)).fit(X, y)
                trained = TrainedModel(
                    classifier=classifier,
                    embedding_model=model,
                    categories=self.categories,
                    dimensions=X.shape[1],
                    training_size=len(labels),
                )
                if model in self._models:
                    logger.info(f"Replacing previously trained classifier for {model}")
                self._models[model] = trained

        logger.info(f"Classifier for {model} trained ({X.shape[1]} dimensions)")
        return trained

    def predict(self, vector, model: str) -> ClassificationResult:
        """
        Predict the category of one vector.

        Raises:
            ModelNotTrainedError: No classifier trained for this model
            DimensionMismatchError: Vector length differs from training vectors
        """
        trained = self._get(model)
        x = np.asarray(getattr(vector, "embedding", vector), dtype=np.float64)
        if x.shape[0] != trained.dimensions:
            raise DimensionMismatchError(x.shape[0], trained.dimensions)

        tracer = get_tracer()
        with tracer.start_span(
            "classifier.predict", attributes=classifier_attributes("predict", model)
        ) as span:
            index = int(trained.classifier.predict_index(x.reshape(1, -1))[0])
            category = self._category_for(index, model)
            probabilities = {
                c: PREDICTED_CONFIDENCE if c == category else BASE_CONFIDENCE
                for c in trained.categories
            }
            span.set_attribute(CLASSIFIER_PREDICTED_CATEGORY, category)

        logger.debug(f"{model} predicted {category} (index {index})")
        return ClassificationResult(
            predicted_category=category,
            confidence=PREDICTED_CONFIDENCE,
            probabilities=probabilities,
            model=model,
        )

    def evaluate(self, vectors: Sequence, labels: Sequence[str], model: str) -> ModelPerformance:
        """
        Score the trained classifier on held-out data and cache the result.

        Raises:
            ModelNotTrainedError: No classifier trained for this model
            SizeMismatchError: len(vectors) != len(labels)
        """
        if len(vectors) != len(labels):
            raise SizeMismatchError(len(vectors), len(labels))

        tracer = get_tracer()
        with self._lock_for(model):
            trained = self._get(model)
            with tracer.start_span(
                "classifier.evaluate",
                attributes=classifier_attributes("evaluate", model, example_count=len(labels)),
            ) as span:
                if len(vectors):
                    X = _as_matrix(vectors)
                    if X.shape[1] != trained.dimensions:
                        raise DimensionMismatchError(X.shape[1], trained.dimensions)
                    indices = trained.classifier.predict_index(X)
                    predicted = [self._category_for(int(i), model) for i in indices]
                else:
                    predicted = []

                performance = compute_performance(list(labels), predicted, trained.categories)
                trained.performance = performance
                span.set_attribute(CLASSIFIER_ACCURACY, performance.accuracy)

        logger.info(
            f"Classifier for {model} evaluated on {len(labels)} examples: "
            f"accuracy={performance.accuracy:.2%}"
        )
        return performance

    # -----------------------------------------------------------------------
    # QUERIES
    # -----------------------------------------------------------------------

    def is_trained(self, model: str) -> bool:
        return model in self._models

    def get_performance(self, model: str) -> ModelPerformance | None:
        trained = self._models.get(model)
        return trained.performance if trained else None

    def get_trained_model(self, model: str) -> TrainedModel | None:
        return self._models.get(model)

    def list_trained(self) -> list[str]:
        return list(self._models)

    def compare_models(self) -> dict[str, ModelPerformance]:
        """Performance of every model that has been trained AND evaluated."""
        return {
            model: trained.performance
            for model, trained in list(self._models.items())
            if trained.performance is not None
        }
