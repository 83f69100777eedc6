"""
Unit Tests for the Request/Response Schemas

Requests must reject bad input before any provider is touched; responses
must round-trip the services' camelCase dicts.
"""

import pytest
from pydantic import ValidationError

from embedding_lab.schemas import (
    DocumentListResponse,
    ModelStatusResponse,
    PredictRequest,
    PredictResponse,
    SearchRequest,
    SearchResponseModel,
    TrainRequest,
    TrainResponse,
)


# ---------------------------------------------------------------------------
# REQUESTS
# ---------------------------------------------------------------------------


class TestSearchRequest:
    """Test search request validation."""

    def test_minimal(self):
        request = SearchRequest(query="GST on textiles")
        assert request.methods is None

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_rejected(self, query):
        with pytest.raises(ValidationError):
            SearchRequest(query=query)

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            SearchRequest(query="q", methods=["bm25"])

    def test_methods_deduped_in_order(self):
        request = SearchRequest(query="q", methods=["mmr", "cosine", "mmr"])
        assert request.methods == ["mmr", "cosine"]


class TestTrainRequest:
    """Test train request validation."""

    def test_defaults(self):
        request = TrainRequest(embedding_model="bert")
        assert request.test_split == 0.2

    def test_camel_case_input(self):
        request = TrainRequest.model_validate({"embeddingModel": "gemini", "testSplit": 0.3})
        assert request.embedding_model == "gemini"
        assert request.test_split == 0.3

    def test_camel_case_output(self):
        dumped = TrainRequest(embedding_model="bert").model_dump(by_alias=True)
        assert dumped == {"embeddingModel": "bert", "testSplit": 0.2}

    @pytest.mark.parametrize("split", [0, 1, -0.1, 1.5])
    def test_split_bounds(self, split):
        with pytest.raises(ValidationError):
            TrainRequest(embedding_model="bert", test_split=split)

    def test_unknown_model_rejected(self):
        with pytest.raises(ValidationError):
            TrainRequest(embedding_model="elmo")


class TestPredictRequest:
    """Test predict request validation."""

    def test_blank_text_rejected(self):
        with pytest.raises(ValidationError):
            PredictRequest(text="  \n")

    def test_models_deduped(self):
        request = PredictRequest(text="t", models=["bert", "bert", "gemini"])
        assert request.models == ["bert", "gemini"]

    def test_unknown_model_rejected(self):
        with pytest.raises(ValidationError):
            PredictRequest(text="t", models=["elmo"])


# ---------------------------------------------------------------------------
# RESPONSES
# ---------------------------------------------------------------------------


class TestResponses:
    """Test that service dicts validate against the response models."""

    def test_search_response_with_error_entry(self):
        response = SearchResponseModel.model_validate({
            "query": "gst",
            "totalDocuments": 16,
            "results": {
                "cosine": {
                    "results": [{
                        "documentId": "gst_001",
                        "title": "GST",
                        "content": "body",
                        "category": "GST",
                        "section": None,
                        "score": 0.9,
                        "method": "cosine",
                        "explanation": "Cosine similarity: 0.900",
                    }],
                    "metrics": {
                        "precision": 1.0,
                        "recall": 0.5,
                        "diversityScore": 1.0,
                        "executionTimeMs": 3.2,
                    },
                },
                "mmr": {"error": "Failed to generate sentence-bert embedding: boom"},
            },
        })

        assert response.total_documents == 16
        assert response.results["cosine"].results[0].document_id == "gst_001"
        assert response.results["mmr"].results is None
        assert "boom" in response.results["mmr"].error

    def test_train_response(self):
        data = {
            "model": "bert",
            "trainingSize": 24,
            "testSize": 6,
            "embeddingDimensions": 768,
            "performance": {
                "accuracy": 83.33,
                "precision": {"Tech": 100.0},
                "recall": {"Tech": 50.0},
                "f1Score": {"Tech": 66.67},
                "confusionMatrix": [[1, 1], [0, 4]],
            },
            "categories": ["Tech", "Finance"],
        }
        response = TrainResponse.model_validate(data)

        assert response.performance.f1_score == {"Tech": 66.67}
        assert response.model_dump(by_alias=True) == data

    def test_predict_response(self):
        response = PredictResponse.model_validate({
            "text": "Stocks rallied",
            "predictions": [
                {"model": "gemini", "error": "Model gemini is not trained.", "trained": False},
                {
                    "model": "bert",
                    "predictedCategory": "Finance",
                    "confidence": 80.0,
                    "probabilities": {"Finance": 80.0, "Tech": 10.0},
                    "embeddingDimensions": 768,
                    "trained": True,
                },
            ],
            "consensus": None,
            "modelsRequested": ["gemini", "bert"],
            "modelsProcessed": 2,
            "trainedModels": 1,
        })

        assert response.predictions[0].predicted_category is None
        assert response.predictions[1].confidence == 80.0
        assert response.trained_models == 1

    def test_status_response(self):
        response = ModelStatusResponse.model_validate({
            "availableModels": ["bert"],
            "trainedModels": {
                "bert": {
                    "trained": True,
                    "categories": ["Tech"],
                    "performance": {
                        "accuracy": 50.0,
                        "avgPrecision": 40.0,
                        "avgRecall": 45.0,
                        "avgF1Score": 42.0,
                    },
                },
            },
            "trainingDataSize": 30,
            "categories": ["Tech"],
        })

        assert response.trained_models["bert"].performance.avg_f1_score == 42.0

    def test_document_list_response(self):
        data = {
            "totalDocuments": 2,
            "categories": ["GST", "Income Tax"],
            "documentsByCategory": {
                "GST": [{"id": "gst_001", "title": "GST on textiles", "section": "Schedule II"}],
                "Income Tax": [{"id": "it_001", "title": "Section 80C", "section": None}],
            },
            "availableMethods": ["cosine", "euclidean", "mmr", "hybrid"],
        }
        response = DocumentListResponse.model_validate(data)

        assert response.documents_by_category["GST"][0].id == "gst_001"
        assert response.model_dump(by_alias=True) == data

    def test_document_list_rejects_unknown_method(self):
        with pytest.raises(ValidationError):
            DocumentListResponse.model_validate({
                "totalDocuments": 0,
                "categories": [],
                "documentsByCategory": {},
                "availableMethods": ["bm25"],
            })
