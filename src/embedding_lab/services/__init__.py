"""
Services - the request-level API over retrieval and classification.
"""

from embedding_lab.services.classification_service import (
    ClassificationService,
    Consensus,
    ModelPrediction,
    PredictionReport,
    TrainingReport,
    build_consensus,
)
from embedding_lab.services.retrieval_service import (
    MethodOutcome,
    RetrievalService,
)

__all__ = [
    "ClassificationService",
    "Consensus",
    "ModelPrediction",
    "PredictionReport",
    "TrainingReport",
    "build_consensus",
    "MethodOutcome",
    "RetrievalService",
]
