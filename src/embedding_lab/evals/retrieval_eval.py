"""
Retrieval Quality Eval

Runs the benchmark queries through a similarity method and checks that
the ranking surfaces the documents a legal reader would expect.

WHY THIS EXISTS:
----------------
The search metrics (precision/recall) are lexical and have no ground
truth. This gate uses hand-labelled relevant document ids per query, so a
changed embedding model, weight or re-ranking rule that quietly degrades
rankings fails here.

METRICS:
--------
RECALL: |retrieved ∩ expected| / |expected|
PRECISION: |retrieved ∩ expected| / |retrieved|
F1: 2 * (precision * recall) / (precision + recall)
TOP CATEGORY: the first result's category equals the expected category

A query PASSES when the top category matches and recall >= threshold.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from embedding_lab.retrieval import BenchmarkQuery, get_benchmark_queries
from embedding_lab.services import RetrievalService

logger = logging.getLogger(__name__)

DEFAULT_RECALL_THRESHOLD = 0.5


@dataclass
class RetrievalMetrics:
    """Retrieval quality metrics for a single query."""
    recall: float
    precision: float
    f1_score: float
    retrieved_docs: list[str]
    expected_docs: list[str]
    missing_docs: list[str]
    extra_docs: list[str]


@dataclass
class RetrievalEvalResult:
    """Result of retrieval eval for a single query."""
    query: str
    method: str
    passed: bool
    top_category: str | None
    expected_category: str
    metrics: RetrievalMetrics | None = None
    error: str | None = None

    @property
    def category_matched(self) -> bool:
        return self.top_category == self.expected_category


@dataclass
class RetrievalEvalReport:
    """Aggregate retrieval eval results for one method."""
    method: str
    total_cases: int
    passed_cases: int
    failed_cases: int
    avg_recall: float
    avg_precision: float
    avg_f1: float
    threshold: float
    results: list[RetrievalEvalResult]

    @property
    def all_passed(self) -> bool:
        return self.failed_cases == 0


def calculate_retrieval_metrics(
    retrieved: list[str],
    expected: list[str],
) -> RetrievalMetrics:
    """Calculate id-based retrieval quality metrics."""
    retrieved_set = set(retrieved)
    expected_set = set(expected)

    if not expected_set:
        return RetrievalMetrics(
            recall=1.0,  # Vacuously true
            precision=1.0 if not retrieved_set else 0.0,
            f1_score=1.0 if not retrieved_set else 0.0,
            retrieved_docs=retrieved,
            expected_docs=expected,
            missing_docs=[],
            extra_docs=sorted(retrieved_set),
        )

    overlap = retrieved_set & expected_set
    recall = len(overlap) / len(expected_set)
    precision = len(overlap) / len(retrieved_set) if retrieved_set else 0.0

    if precision + recall > 0:
        f1 = 2 * (precision * recall) / (precision + recall)
    else:
        f1 = 0.0

    return RetrievalMetrics(
        recall=recall,
        precision=precision,
        f1_score=f1,
        retrieved_docs=retrieved,
        expected_docs=expected,
        missing_docs=sorted(expected_set - retrieved_set),
        extra_docs=sorted(retrieved_set - expected_set),
    )


async def run_retrieval_eval(
    service: RetrievalService,
    method: str = "hybrid",
    queries: list[BenchmarkQuery] | None = None,
    threshold: float = DEFAULT_RECALL_THRESHOLD,
) -> RetrievalEvalReport:
    """
    Run the benchmark queries through one similarity method.

    A query whose embedding call fails is recorded as a failed case with
    its error; the remaining queries still run.
    """
    queries = queries if queries is not None else get_benchmark_queries()
    results: list[RetrievalEvalResult] = []

    for bench in queries:
        logger.info(f"Running retrieval eval ({method}): {bench.query}")
        outcome = (await service.search(bench.query, [method]))[method]

        if outcome.response is None:
            results.append(RetrievalEvalResult(
                query=bench.query,
                method=method,
                passed=False,
                top_category=None,
                expected_category=bench.expected_category,
                error=outcome.error,
            ))
            continue

        ranked = outcome.response.results
        retrieved = [r.document.id for r in ranked]
        metrics = calculate_retrieval_metrics(retrieved, list(bench.relevant_doc_ids))
        top_category = ranked[0].document.category if ranked else None

        results.append(RetrievalEvalResult(
            query=bench.query,
            method=method,
            passed=top_category == bench.expected_category and metrics.recall >= threshold,
            top_category=top_category,
            expected_category=bench.expected_category,
            metrics=metrics,
        ))

    scored = [r for r in results if r.metrics is not None]
    if scored:
        avg_recall = sum(r.metrics.recall for r in scored) / len(scored)
        avg_precision = sum(r.metrics.precision for r in scored) / len(scored)
        avg_f1 = sum(r.metrics.f1_score for r in scored) / len(scored)
    else:
        avg_recall = avg_precision = avg_f1 = 0.0
    passed = sum(1 for r in results if r.passed)

    return RetrievalEvalReport(
        method=method,
        total_cases=len(results),
        passed_cases=passed,
        failed_cases=len(results) - passed,
        avg_recall=avg_recall,
        avg_precision=avg_precision,
        avg_f1=avg_f1,
        threshold=threshold,
        results=results,
    )


def print_retrieval_report(report: RetrievalEvalReport) -> None:
    """Print a report in the gate's console format."""
    print("\n" + "=" * 60)
    print(f"RETRIEVAL QUALITY EVAL ({report.method})")
    print("=" * 60)

    for result in report.results:
        status = "PASS" if result.passed else "FAIL"
        print(f"  [{status}] {result.query}")
        if result.error:
            print(f"        Error: {result.error}")
            continue
        m = result.metrics
        print(f"        Top category: {result.top_category} (expected {result.expected_category})")
        print(f"        Recall: {m.recall:.2f} | Precision: {m.precision:.2f} | F1: {m.f1_score:.2f}")
        if m.missing_docs:
            print(f"        Missing: {m.missing_docs}")

    print("\n" + "-" * 60)
    print(f"Averages: Recall={report.avg_recall:.2f} | "
          f"Precision={report.avg_precision:.2f} | "
          f"F1={report.avg_f1:.2f}")
    print(f"Threshold: {report.threshold} | "
          f"Passed: {report.passed_cases}/{report.total_cases}")

    if report.all_passed:
        print("\n>>> RETRIEVAL EVAL GATE: PASSED <<<")
    else:
        print("\n>>> RETRIEVAL EVAL GATE: FAILED <<<")


def run_retrieval_eval_cli(
    service: RetrievalService,
    methods: list[str],
    threshold: float = DEFAULT_RECALL_THRESHOLD,
) -> int:
    """Run the gate for each method. Returns 0 when every method passes."""

    async def _run_all() -> list[RetrievalEvalReport]:
        return [await run_retrieval_eval(service, m, threshold=threshold) for m in methods]

    reports = asyncio.run(_run_all())
    for report in reports:
        print_retrieval_report(report)
    return 0 if all(r.all_passed for r in reports) else 1
