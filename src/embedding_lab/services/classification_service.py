"""
ClassificationService - train, predict and report on per-model classifiers.

The service owns an ArticleClassifier registry (injected, or a fresh one
per service). Embedding happens here; the registry only ever sees vectors.

TRAIN FLOW:
-----------
1. Validate the embedding model name and test split (no provider call yet)
2. Seeded shuffle of the labelled articles, split at floor(n * (1 - split))
3. Embed the training half, fit, embed the held-out half, evaluate
   (one model at a time per embedding model: step 3 runs under an
   asyncio.Lock keyed by model name)
4. Report sizes, dimensions and performance as percentages

PREDICT FLOW:
-------------
Every requested model runs concurrently. Untrained models are reported
with trained=False; models whose embedding fails are reported with an
error and their trained flag. When two or more models produce a
prediction, a majority-vote consensus is added.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from embedding_lab.classification import (
    CATEGORIES,
    ArticleClassifier,
    ModelPerformance,
    TrainingArticle,
    get_training_articles,
    split_train_test,
    to_percent,
)
from embedding_lab.core import (
    EmbeddingFailureError,
    ModelNotTrainedError,
    UnsupportedModelError,
)
from embedding_lab.embeddings import EMBEDDING_MODELS, EmbeddingService

logger = logging.getLogger(__name__)

DEFAULT_TEST_SPLIT = 0.2


# ---------------------------------------------------------------------------
# REPORT TYPES
# ---------------------------------------------------------------------------


@dataclass
class TrainingReport:
    model: str
    training_size: int
    test_size: int
    embedding_dimensions: int
    performance: ModelPerformance
    categories: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "trainingSize": self.training_size,
            "testSize": self.test_size,
            "embeddingDimensions": self.embedding_dimensions,
            "performance": self.performance.to_percentages(),
            "categories": list(self.categories),
        }


@dataclass
class ModelPrediction:
    """One model's answer. Percent fields are None when there is an error."""

    model: str
    trained: bool
    predicted_category: str | None = None
    confidence: float | None = None
    probabilities: dict[str, float] = field(default_factory=dict)
    embedding_dimensions: int | None = None
    error: str | None = None

    @property
    def voted(self) -> bool:
        return self.trained and self.error is None

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"model": self.model, "error": self.error, "trained": self.trained}
        return {
            "model": self.model,
            "predictedCategory": self.predicted_category,
            "confidence": self.confidence,
            "probabilities": dict(self.probabilities),
            "embeddingDimensions": self.embedding_dimensions,
            "trained": self.trained,
        }


@dataclass
class Consensus:
    category: str
    votes: int
    total_models: int
    agreement: float
    avg_confidence: float

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "votes": self.votes,
            "totalModels": self.total_models,
            "agreement": self.agreement,
            "avgConfidence": self.avg_confidence,
        }


@dataclass
class PredictionReport:
    text: str
    predictions: list[ModelPrediction]
    consensus: Consensus | None
    models_requested: list[str]

    @property
    def trained_models(self) -> int:
        return sum(1 for p in self.predictions if p.voted)

    def to_dict(self) -> dict:
        return {
            "text": self.text[:200] + ("..." if len(self.text) > 200 else ""),
            "predictions": [p.to_dict() for p in self.predictions],
            "consensus": self.consensus.to_dict() if self.consensus else None,
            "modelsRequested": list(self.models_requested),
            "modelsProcessed": len(self.predictions),
            "trainedModels": self.trained_models,
        }


def build_consensus(predictions: Sequence[ModelPrediction]) -> Consensus | None:
    """
    Majority vote over predictions that succeeded.

    Ties go to the category that was voted for first. Returns None when
    fewer than two models voted.
    """
    voters = [p for p in predictions if p.voted]
    if len(voters) < 2:
        return None

    votes = Counter(p.predicted_category for p in voters)
    # most_common is stable, so equal counts keep first-vote order
    category, count = votes.most_common(1)[0]
    total_confidence = sum(p.confidence or 0.0 for p in voters)
    return Consensus(
        category=category,
        votes=count,
        total_models=len(voters),
        agreement=to_percent(count / len(voters)),
        avg_confidence=round(total_confidence / len(voters), 2),
    )


# ---------------------------------------------------------------------------
# SERVICE
# ---------------------------------------------------------------------------


class ClassificationService:
    """
    Article classification over every supported embedding model.

    Args:
        embeddings: Embedding service (injected)
        classifier: Registry to own (default: a fresh ArticleClassifier)
        articles: Labelled corpus (default: the bundled training articles)
        seed: Shuffle seed for train/test splits (None = unseeded)
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        classifier: ArticleClassifier | None = None,
        articles: Sequence[TrainingArticle] | None = None,
        seed: int | None = 42,
    ):
        self.embeddings = embeddings
        self.classifier = classifier or ArticleClassifier()
        self.articles = list(articles) if articles is not None else get_training_articles()
        self.seed = seed
        self._train_locks: dict[str, asyncio.Lock] = {}

    def _train_lock(self, model: str) -> asyncio.Lock:
        return self._train_locks.setdefault(model, asyncio.Lock())

    @property
    def available_models(self) -> list[str]:
        return [m for m in EMBEDDING_MODELS if self.embeddings.supports(m)]

    def _validate_model(self, model: str) -> None:
        if model not in self.available_models:
            raise UnsupportedModelError(model, self.available_models)

    # -----------------------------------------------------------------------
    # TRAIN
    # -----------------------------------------------------------------------

    async def train_model(self, embedding_model: str, test_split: float = DEFAULT_TEST_SPLIT) -> TrainingReport:
        """
        Train and evaluate the classifier for one embedding model.

        Raises:
            UnsupportedModelError: Unknown model (raised before any embedding)
            ValueError: test_split outside (0, 1)
            EmbeddingFailureError: Provider failed
        """
        self._validate_model(embedding_model)
        train_data, test_data = split_train_test(self.articles, test_split, seed=self.seed)

        logger.info(
            f"Training {embedding_model} classifier: "
            f"{len(train_data)} train / {len(test_data)} test articles"
        )

        # Held across the awaits so a concurrent retrain of the same model
        # cannot swap the classifier between train and evaluate
        async with self._train_lock(embedding_model):
            train_embeddings = await self.embeddings.embed_batch(
                [a.embedding_text for a in train_data], embedding_model
            )
            self.classifier.train(
                train_embeddings, [a.category for a in train_data], embedding_model
            )

            test_embeddings = await self.embeddings.embed_batch(
                [a.embedding_text for a in test_data], embedding_model
            )
            performance = self.classifier.evaluate(
                test_embeddings, [a.category for a in test_data], embedding_model
            )

        return TrainingReport(
            model=embedding_model,
            training_size=len(train_data),
            test_size=len(test_data),
            embedding_dimensions=train_embeddings[0].dimensions if train_embeddings else 0,
            performance=performance,
            categories=self.classifier.categories,
        )

    # -----------------------------------------------------------------------
    # PREDICT
    # -----------------------------------------------------------------------

    async def _predict_one(self, text: str, model: str) -> ModelPrediction:
        if not self.classifier.is_trained(model):
            return ModelPrediction(model=model, trained=False, error=str(ModelNotTrainedError(model)))

        try:
            embedding = await self.embeddings.embed(text, model)
            result = self.classifier.predict(embedding, model)
        except (EmbeddingFailureError, UnsupportedModelError, ModelNotTrainedError) as e:
            logger.error(f"Prediction with {model} failed: {e}")
            return ModelPrediction(
                model=model,
                trained=self.classifier.is_trained(model),
                error=f"Failed to generate prediction: {e}",
            )

        return ModelPrediction(
            model=model,
            trained=True,
            predicted_category=result.predicted_category,
            confidence=to_percent(result.confidence),
            probabilities={c: to_percent(p) for c, p in result.probabilities.items()},
            embedding_dimensions=embedding.dimensions,
        )

    async def predict_text(self, text: str, models: Sequence[str] | None = None) -> PredictionReport:
        """
        Classify text with each requested model and build a consensus.

        Args:
            text: Non-empty article text
            models: Subset of the available models (default: all)

        Raises:
            ValueError: Empty text
            UnsupportedModelError: A requested model is unknown
        """
        if not text or not text.strip():
            raise ValueError("Text is required and must be a non-empty string")

        requested = list(dict.fromkeys(models)) if models else self.available_models
        for model in requested:
            self._validate_model(model)

        predictions = list(
            await asyncio.gather(*(self._predict_one(text, model) for model in requested))
        )
        consensus = build_consensus(predictions)
        if consensus:
            logger.info(
                f"Consensus {consensus.category} "
                f"({consensus.votes}/{consensus.total_models} models)"
            )
        return PredictionReport(
            text=text,
            predictions=predictions,
            consensus=consensus,
            models_requested=requested,
        )

    # -----------------------------------------------------------------------
    # STATUS
    # -----------------------------------------------------------------------

    def model_status(self) -> dict:
        """Training status and performance summary of every trained model."""
        trained_models = {}
        for model in self.classifier.list_trained():
            trained = self.classifier.get_trained_model(model)
            if trained is None:
                continue
            trained_models[model] = {
                "trained": True,
                "categories": list(trained.categories),
                "performance": trained.performance.summary() if trained.performance else None,
            }
        return {
            "availableModels": self.available_models,
            "trainedModels": trained_models,
            "trainingDataSize": len(self.articles),
            "categories": list(CATEGORIES),
        }
