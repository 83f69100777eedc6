"""
Request and response schemas for the search and classification API.

Requests are VALIDATED here, before any embedding call: empty text, unknown
method or model names and out-of-range test splits never reach a provider.

Field names are snake_case in Python and camelCase on the wire. Both
spellings are accepted on input (populate_by_name=True); dump with
by_alias=True to get the wire shape.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SimilarityMethodName = Literal["cosine", "euclidean", "mmr", "hybrid"]
EmbeddingModelName = Literal["sentence-bert", "bert", "word2vec-glove", "gemini"]


class ApiModel(BaseModel):
    """Base model: camelCase aliases, populate by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _non_blank(value: str, field_name: str) -> str:
    if not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


def _dedupe(values: list[str] | None) -> list[str] | None:
    return list(dict.fromkeys(values)) if values else None


# ---------------------------------------------------------------------------
# REQUESTS
# ---------------------------------------------------------------------------


class SearchRequest(ApiModel):
    query: str = Field(min_length=1, description="Free-text legal query")

    methods: list[SimilarityMethodName] | None = Field(
        default=None,
        description="Similarity methods to run (default: all four)",
    )

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, v: str) -> str:
        return _non_blank(v, "query")

    @field_validator("methods")
    @classmethod
    def _unique_methods(cls, v):
        return _dedupe(v)


class TrainRequest(ApiModel):
    embedding_model: EmbeddingModelName = Field(
        description="Embedding model whose classifier is trained"
    )

    test_split: float = Field(
        default=0.2,
        gt=0,
        lt=1,
        description="Fraction of articles held out for evaluation",
    )


class PredictRequest(ApiModel):
    text: str = Field(min_length=1, description="Article text to classify")

    models: list[EmbeddingModelName] | None = Field(
        default=None,
        description="Embedding models to predict with (default: all)",
    )

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        return _non_blank(v, "text")

    @field_validator("models")
    @classmethod
    def _unique_models(cls, v):
        return _dedupe(v)


# ---------------------------------------------------------------------------
# SEARCH RESPONSES
# ---------------------------------------------------------------------------


class SearchResultItem(ApiModel):
    document_id: str
    title: str
    content: str
    category: str
    section: str | None = None
    score: float
    method: str | None = None
    explanation: str | None = None


class SearchMetricsModel(ApiModel):
    precision: float = Field(ge=0, le=1)
    recall: float = Field(ge=0, le=1)
    diversity_score: float
    execution_time_ms: float = Field(ge=0)


class MethodResponse(ApiModel):
    """Either results+metrics or an error for one method."""

    results: list[SearchResultItem] | None = None
    metrics: SearchMetricsModel | None = None
    error: str | None = None


class SearchResponseModel(ApiModel):
    query: str
    total_documents: int = Field(ge=0)
    results: dict[str, MethodResponse]


class DocumentSummary(ApiModel):
    id: str
    title: str
    section: str | None = None


class DocumentListResponse(ApiModel):
    total_documents: int = Field(ge=0)
    categories: list[str]
    documents_by_category: dict[str, list[DocumentSummary]]
    available_methods: list[SimilarityMethodName]


# ---------------------------------------------------------------------------
# CLASSIFICATION RESPONSES
# ---------------------------------------------------------------------------


class PerformanceModel(ApiModel):
    """Evaluation metrics as percentages; confusion matrix as raw counts."""

    accuracy: float = Field(ge=0, le=100)
    precision: dict[str, float]
    recall: dict[str, float]
    f1_score: dict[str, float]
    confusion_matrix: list[list[int]]


class TrainResponse(ApiModel):
    model: str
    training_size: int
    test_size: int
    embedding_dimensions: int
    performance: PerformanceModel
    categories: list[str]


class ModelPredictionModel(ApiModel):
    model: str
    trained: bool
    predicted_category: str | None = None
    confidence: float | None = None
    probabilities: dict[str, float] | None = None
    embedding_dimensions: int | None = None
    error: str | None = None


class ConsensusModel(ApiModel):
    category: str
    votes: int
    total_models: int
    agreement: float
    avg_confidence: float


class PredictResponse(ApiModel):
    text: str
    predictions: list[ModelPredictionModel]
    consensus: ConsensusModel | None = None
    models_requested: list[str]
    models_processed: int
    trained_models: int


class PerformanceSummary(ApiModel):
    accuracy: float
    avg_precision: float
    avg_recall: float
    avg_f1_score: float


class TrainedModelStatus(ApiModel):
    trained: bool
    categories: list[str]
    performance: PerformanceSummary | None = None


class ModelStatusResponse(ApiModel):
    available_models: list[str]
    trained_models: dict[str, TrainedModelStatus]
    training_data_size: int
    categories: list[str]
