"""
Wire schemas (pydantic) for requests and responses.
"""

from embedding_lab.schemas.api import (
    ApiModel,
    ConsensusModel,
    DocumentListResponse,
    DocumentSummary,
    MethodResponse,
    ModelPredictionModel,
    ModelStatusResponse,
    PerformanceModel,
    PerformanceSummary,
    PredictRequest,
    PredictResponse,
    SearchMetricsModel,
    SearchRequest,
    SearchResponseModel,
    SearchResultItem,
    TrainedModelStatus,
    TrainRequest,
    TrainResponse,
)

__all__ = [
    "ApiModel",
    "ConsensusModel",
    "DocumentListResponse",
    "DocumentSummary",
    "MethodResponse",
    "ModelPredictionModel",
    "ModelStatusResponse",
    "PerformanceModel",
    "PerformanceSummary",
    "PredictRequest",
    "PredictResponse",
    "SearchMetricsModel",
    "SearchRequest",
    "SearchResponseModel",
    "SearchResultItem",
    "TrainedModelStatus",
    "TrainRequest",
    "TrainResponse",
]
