"""
Evals - quality gates over the bundled benchmark queries.
"""

from embedding_lab.evals.retrieval_eval import (
    DEFAULT_RECALL_THRESHOLD,
    RetrievalEvalReport,
    RetrievalEvalResult,
    RetrievalMetrics,
    calculate_retrieval_metrics,
    print_retrieval_report,
    run_retrieval_eval,
    run_retrieval_eval_cli,
)

__all__ = [
    "DEFAULT_RECALL_THRESHOLD",
    "RetrievalEvalReport",
    "RetrievalEvalResult",
    "RetrievalMetrics",
    "calculate_retrieval_metrics",
    "print_retrieval_report",
    "run_retrieval_eval",
    "run_retrieval_eval_cli",
]
