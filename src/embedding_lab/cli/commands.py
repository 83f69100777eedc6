"""
CLI commands - entry points for search, classification and the eval gate.

Each command follows a consistent pattern:
1. Parse arguments
2. Validate the request with the pydantic schemas
3. Run the service call
4. Print JSON (or the gate report)
5. Return exit code

Classifiers live in memory, so a process starts with none trained.
`predict` therefore trains the requested models first.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from embedding_lab.config import get_settings
from embedding_lab.core import EmbeddingLabError
from embedding_lab.embeddings import EMBEDDING_MODELS, get_embedding_service
from embedding_lab.retrieval import SIMILARITY_METHODS
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
from embedding_lab.services import ClassificationService, RetrievalService

logger = logging.getLogger(__name__)


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_json(model) -> None:
    print(json.dumps(model.model_dump(by_alias=True), indent=2))


def _retrieval_service() -> RetrievalService:
    settings = get_settings()
    return RetrievalService(
        get_embedding_service(settings),
        model=settings.default_embedding_model,
    )


def _classification_service() -> ClassificationService:
    settings = get_settings()
    return ClassificationService(get_embedding_service(settings), seed=settings.train_seed)


def run_search_cli() -> int:
    """CLI entry point for multi-method search."""
    parser = argparse.ArgumentParser(description="Search the legal document corpus")
    parser.add_argument("query", help="Query text")
    parser.add_argument(
        "--methods",
        nargs="+",
        choices=SIMILARITY_METHODS,
        help="Similarity methods (default: all)",
    )
    args = parser.parse_args()

    request = SearchRequest(query=args.query, methods=args.methods)
    service = _retrieval_service()
    outcomes = asyncio.run(service.search(request.query, request.methods))

    _print_json(SearchResponseModel.model_validate({
        "query": request.query,
        "totalDocuments": len(service.documents),
        "results": {method: outcome.to_dict() for method, outcome in outcomes.items()},
    }))
    return 0 if any(o.ok for o in outcomes.values()) else 1


def run_train_cli() -> int:
    """CLI entry point for training and evaluating one classifier."""
    parser = argparse.ArgumentParser(description="Train an article classifier")
    parser.add_argument("model", choices=EMBEDDING_MODELS, help="Embedding model")
    parser.add_argument("--test-split", type=float, default=0.2, help="Held-out fraction")
    args = parser.parse_args()

    request = TrainRequest(embedding_model=args.model, test_split=args.test_split)
    report = asyncio.run(
        _classification_service().train_model(request.embedding_model, request.test_split)
    )

    _print_json(TrainResponse.model_validate(report.to_dict()))
    return 0


def run_predict_cli() -> int:
    """CLI entry point for multi-model prediction."""
    parser = argparse.ArgumentParser(description="Classify article text")
    parser.add_argument("text", help="Article text")
    parser.add_argument(
        "--models",
        nargs="+",
        choices=EMBEDDING_MODELS,
        help="Embedding models (default: all)",
    )
    parser.add_argument("--test-split", type=float, default=0.2, help="Held-out fraction")
    parser.add_argument("--status", action="store_true", help="Also print model status")
    args = parser.parse_args()

    request = PredictRequest(text=args.text, models=args.models)
    service = _classification_service()

    async def _train_then_predict():
        for model in request.models or service.available_models:
            try:
                await service.train_model(model, args.test_split)
            except EmbeddingLabError as e:
                logger.error(f"Training {model} failed, it will be reported as untrained: {e}")
        return await service.predict_text(request.text, request.models)

    report = asyncio.run(_train_then_predict())

    _print_json(PredictResponse.model_validate(report.to_dict()))
    if args.status:
        _print_json(ModelStatusResponse.model_validate(service.model_status()))
    return 0 if report.trained_models else 1


def run_eval_cli() -> int:
    """CLI entry point for the retrieval quality gate."""
    from embedding_lab.evals import DEFAULT_RECALL_THRESHOLD, run_retrieval_eval_cli

    parser = argparse.ArgumentParser(description="Run retrieval quality eval")
    parser.add_argument(
        "--methods",
        nargs="+",
        choices=SIMILARITY_METHODS,
        default=["hybrid"],
        help="Methods to gate (default: hybrid)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_RECALL_THRESHOLD,
        help=f"Minimum recall per query (default: {DEFAULT_RECALL_THRESHOLD})",
    )
    args = parser.parse_args()

    return run_retrieval_eval_cli(_retrieval_service(), args.methods, args.threshold)


def run_documents_cli() -> int:
    """CLI entry point for listing the corpus."""
    argparse.ArgumentParser(description="List legal documents by category").parse_args()
    _print_json(DocumentListResponse.model_validate(_retrieval_service().list_documents()))
    return 0


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        embedding-lab search "query"      # Run every similarity method
        embedding-lab train bert          # Train + evaluate one classifier
        embedding-lab predict "text"      # Train, then predict with every model
        embedding-lab eval                # Retrieval quality gate
        embedding-lab documents           # List the corpus
    """
    _load_env()
    _configure_logging()

    parser = argparse.ArgumentParser(
        description="Embedding retrieval and classification lab",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  search      Rank legal documents with cosine/euclidean/mmr/hybrid
  train       Train and evaluate a classifier for one embedding model
  predict     Classify text with every embedding model, with consensus
  eval        Run the retrieval quality gate on benchmark queries
  documents   List the legal document corpus by category

Examples:
  embedding-lab search "GST rate for textiles" --methods mmr hybrid
  embedding-lab train word2vec-glove --test-split 0.3
  USE_MOCK_EMBEDDINGS=true embedding-lab predict "Stocks rallied today"
        """,
    )

    parser.add_argument(
        "command",
        choices=["search", "train", "predict", "eval", "documents"],
        help="Command to run",
    )

    args, remaining = parser.parse_known_args()

    commands = {
        "search": run_search_cli,
        "train": run_train_cli,
        "predict": run_predict_cli,
        "eval": run_eval_cli,
        "documents": run_documents_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    from embedding_lab.observability import init_phoenix, shutdown_phoenix

    init_phoenix()
    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except (EmbeddingLabError, ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        shutdown_phoenix()


if __name__ == "__main__":
    sys.exit(main())
