"""
Held-out classification metrics.

All functions take parallel lists of actual and predicted category names
plus the fixed ordered category list. Matrix rows are actual categories,
columns are predicted categories, both in category-list order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence


def to_percent(value: float) -> float:
    """
    Fraction in [0, 1] to a percentage with 2 decimals.

    Halves round up (0.00125 -> 0.13), not to even as round() would.
    """
    return math.floor(value * 10000 + 0.5) / 100


@dataclass
class ModelPerformance:
    """Performance record from one evaluation call."""

    accuracy: float
    precision: dict[str, float] = field(default_factory=dict)
    recall: dict[str, float] = field(default_factory=dict)
    f1_score: dict[str, float] = field(default_factory=dict)
    confusion_matrix: list[list[int]] = field(default_factory=list)

    @property
    def avg_precision(self) -> float:
        return _mean(self.precision.values())

    @property
    def avg_recall(self) -> float:
        return _mean(self.recall.values())

    @property
    def avg_f1_score(self) -> float:
        return _mean(self.f1_score.values())

    def to_percentages(self) -> dict:
        """Report shape: every scalar as a percentage, matrix as raw counts."""
        return {
            "accuracy": to_percent(self.accuracy),
            "precision": {c: to_percent(v) for c, v in self.precision.items()},
            "recall": {c: to_percent(v) for c, v in self.recall.items()},
            "f1Score": {c: to_percent(v) for c, v in self.f1_score.items()},
            "confusionMatrix": [list(row) for row in self.confusion_matrix],
        }

    def summary(self) -> dict:
        """Accuracy and category-averaged P/R/F1, as percentages."""
        return {
            "accuracy": to_percent(self.accuracy),
            "avgPrecision": to_percent(self.avg_precision),
            "avgRecall": to_percent(self.avg_recall),
            "avgF1Score": to_percent(self.avg_f1_score),
        }


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def calculate_accuracy(actual: Sequence[str], predicted: Sequence[str]) -> float:
    """Fraction of exact matches. An empty test set scores 0."""
    if not actual:
        return 0.0
    correct = sum(1 for a, p in zip(actual, predicted) if a == p)
    return correct / len(actual)


def calculate_precision(
    actual: Sequence[str], predicted: Sequence[str], categories: Sequence[str]
) -> dict[str, float]:
    precision = {}
    for category in categories:
        tp = sum(1 for a, p in zip(actual, predicted) if p == category and a == category)
        fp = sum(1 for a, p in zip(actual, predicted) if p == category and a != category)
        precision[category] = tp / (tp + fp) if tp + fp > 0 else 0.0
    return precision


def calculate_recall(
    actual: Sequence[str], predicted: Sequence[str], categories: Sequence[str]
) -> dict[str, float]:
    recall = {}
    for category in categories:
        tp = sum(1 for a, p in zip(actual, predicted) if a == category and p == category)
        fn = sum(1 for a, p in zip(actual, predicted) if a == category and p != category)
        recall[category] = tp / (tp + fn) if tp + fn > 0 else 0.0
    return recall


def calculate_f1_score(
    precision: dict[str, float], recall: dict[str, float], categories: Sequence[str]
) -> dict[str, float]:
    f1 = {}
    for category in categories:
        p = precision[category]
        r = recall[category]
        f1[category] = 2 * p * r / (p + r) if p + r > 0 else 0.0
    return f1


def calculate_confusion_matrix(
    actual: Sequence[str], predicted: Sequence[str], categories: Sequence[str]
) -> list[list[int]]:
    index = {category: i for i, category in enumerate(categories)}
    matrix = [[0] * len(categories) for _ in categories]
    for a, p in zip(actual, predicted):
        matrix[index.get(a, 0)][index.get(p, 0)] += 1
    return matrix


def compute_performance(
    actual: Sequence[str], predicted: Sequence[str], categories: Sequence[str]
) -> ModelPerformance:
    """Compute the full performance record for one evaluation."""
    precision = calculate_precision(actual, predicted, categories)
    recall = calculate_recall(actual, predicted, categories)
    return ModelPerformance(
        accuracy=calculate_accuracy(actual, predicted),
        precision=precision,
        recall=recall,
        f1_score=calculate_f1_score(precision, recall, categories),
        confusion_matrix=calculate_confusion_matrix(actual, predicted, categories),
    )
