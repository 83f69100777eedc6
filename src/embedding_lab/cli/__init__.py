"""
CLI module - unified command-line interface.

Provides entry points for:
- Multi-method document search
- Classifier training and multi-model prediction
- The retrieval quality gate
"""

from embedding_lab.cli.commands import (
    main,
    run_search_cli,
    run_train_cli,
    run_predict_cli,
    run_eval_cli,
    run_documents_cli,
)

__all__ = [
    "main",
    "run_search_cli",
    "run_train_cli",
    "run_predict_cli",
    "run_eval_cli",
    "run_documents_cli",
]
