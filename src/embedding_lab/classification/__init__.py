"""
Classification - per-embedding-model linear category classifiers.
"""

from embedding_lab.classification.classifier import (
    ArticleClassifier,
    ClassificationResult,
    TrainedModel,
    BASE_CONFIDENCE,
    PREDICTED_CONFIDENCE,
)
from embedding_lab.classification.linear_model import (
    OneVsRestLogisticRegression,
    LEARNING_RATE,
    NUM_STEPS,
)
from embedding_lab.classification.metrics import (
    ModelPerformance,
    compute_performance,
    to_percent,
)
from embedding_lab.classification.training_data import (
    CATEGORIES,
    TRAINING_ARTICLES,
    TrainingArticle,
    get_articles_by_category,
    get_training_articles,
    split_train_test,
)

__all__ = [
    "ArticleClassifier",
    "ClassificationResult",
    "TrainedModel",
    "BASE_CONFIDENCE",
    "PREDICTED_CONFIDENCE",
    "OneVsRestLogisticRegression",
    "LEARNING_RATE",
    "NUM_STEPS",
    "ModelPerformance",
    "compute_performance",
    "to_percent",
    "CATEGORIES",
    "TRAINING_ARTICLES",
    "TrainingArticle",
    "get_articles_by_category",
    "get_training_articles",
    "split_train_test",
]
