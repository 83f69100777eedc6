"""
Span attribute keys for retrieval and classification.

Keys for the embedding call follow the OpenTelemetry GenAI conventions;
the rest live in custom retrieval.* and classifier.* namespaces.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# GENAI NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

GEN_AI_OPERATION_NAME = "gen_ai.operation.name"  # "embeddings"
GEN_AI_REQUEST_MODEL = "gen_ai.request.model"  # "sentence-bert"


# ---------------------------------------------------------------------------
# RETRIEVAL NAMESPACE
# ---------------------------------------------------------------------------

RETRIEVAL_METHOD = "retrieval.method"  # "cosine", "euclidean", "mmr", "hybrid"
RETRIEVAL_CANDIDATE_COUNT = "retrieval.candidate_count"
RETRIEVAL_TOP_K = "retrieval.top_k"
RETRIEVAL_RESULT_COUNT = "retrieval.result_count"
RETRIEVAL_QUERY = "retrieval.query"  # only with PHOENIX_CAPTURE_QUERY_TEXT


# ---------------------------------------------------------------------------
# CLASSIFIER NAMESPACE
# ---------------------------------------------------------------------------

CLASSIFIER_OPERATION = "classifier.operation"  # "train", "predict", "evaluate"
CLASSIFIER_EXAMPLE_COUNT = "classifier.example_count"
CLASSIFIER_CLASS_COUNT = "classifier.class_count"
CLASSIFIER_ACCURACY = "classifier.accuracy"
CLASSIFIER_PREDICTED_CATEGORY = "classifier.predicted_category"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def retrieval_search_attributes(
    method: str,
    model: str,
    candidate_count: int,
    top_k: int,
) -> dict:
    """Create attributes dict for a search span."""
    return {
        RETRIEVAL_METHOD: method,
        GEN_AI_REQUEST_MODEL: model,
        RETRIEVAL_CANDIDATE_COUNT: candidate_count,
        RETRIEVAL_TOP_K: top_k,
    }


def classifier_attributes(
    operation: str,
    model: str,
    example_count: int | None = None,
    accuracy: float | None = None,
) -> dict:
    """Create attributes dict for a classifier span."""
    attrs = {
        CLASSIFIER_OPERATION: operation,
        GEN_AI_REQUEST_MODEL: model,
    }
    if example_count is not None:
        attrs[CLASSIFIER_EXAMPLE_COUNT] = example_count
    if accuracy is not None:
        attrs[CLASSIFIER_ACCURACY] = accuracy
    return attrs
