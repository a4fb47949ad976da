"""
Retrieval Quality Eval

Checks whether the retriever returns the RIGHT documents for a set of
golden queries over the seed corpus.

Retrieval eval catches:
- Embedder changes breaking similarity
- Tokenization changes dropping keyword matches
- Fusion weight changes burying relevant documents
- Threshold changes filtering out correct documents

METRICS EXPLAINED:
------------------
RECALL: What fraction of expected docs did we retrieve?
  - Formula: |retrieved ∩ expected| / |expected|

PRECISION: What fraction of retrieved docs were expected?
  - Formula: |retrieved ∩ expected| / |retrieved|

F1 SCORE: Harmonic mean of recall and precision
  - Formula: 2 * (precision * recall) / (precision + recall)
"""

from __future__ import annotations

from dataclasses import dataclass

from context_retriever.golden_sets import GoldenQuery, get_all_golden_queries
from context_retriever.observability import get_tracer
from context_retriever.observability.attributes import eval_gate_attributes
from context_retriever.retrieval.options import RetrieverOptions
from context_retriever.retrieval.retriever import Retriever
from context_retriever.retrieval.seeds import seed_document_store
from context_retriever.retrieval.store import get_document_store

DEFAULT_F1_THRESHOLD = 0.5
DEFAULT_EVAL_TOP_K = 2


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
    query_id: str
    query: str
    passed: bool
    metrics: RetrievalMetrics


@dataclass
class RetrievalEvalReport:
    """Aggregate retrieval eval results."""
    search_method: str
    total_queries: int
    passed_queries: int
    failed_queries: int
    avg_recall: float
    avg_precision: float
    avg_f1: float
    threshold: float
    results: list[RetrievalEvalResult]

    @property
    def all_passed(self) -> bool:
        return self.failed_queries == 0


def calculate_retrieval_metrics(
    retrieved: list[str],
    expected: list[str],
) -> RetrievalMetrics:
    """Calculate recall, precision and F1 for one query."""
    retrieved_set = set(retrieved)
    expected_set = set(expected)

    if not expected_set:
        # Nothing expected: only an empty result is correct
        return RetrievalMetrics(
            recall=1.0,
            precision=1.0 if not retrieved_set else 0.0,
            f1_score=1.0 if not retrieved_set else 0.0,
            retrieved_docs=retrieved,
            expected_docs=expected,
            missing_docs=[],
            extra_docs=sorted(retrieved_set),
        )

    overlap = retrieved_set & expected_set
    missing = expected_set - retrieved_set
    extra = retrieved_set - expected_set

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
        missing_docs=sorted(missing),
        extra_docs=sorted(extra),
    )


def _default_retriever() -> Retriever:
    store = get_document_store()
    seed_document_store(store)
    return Retriever(store)


def run_retrieval_eval(
    retriever: Retriever | None = None,
    queries: list[GoldenQuery] | None = None,
    options: RetrieverOptions | None = None,
    threshold: float = DEFAULT_F1_THRESHOLD,
    verbose: bool = False,
) -> RetrievalEvalReport:
    """
    Run retrieval eval on golden queries.

    Args:
        retriever: Retriever to evaluate. Defaults to a fresh retriever over
                   the seed corpus.
        queries: Queries to evaluate. Defaults to all golden queries.
        options: Options for every retrieve() call (default: top 2, semantic).
        threshold: Minimum F1 score for a query to pass.
        verbose: Print progress.

    Returns:
        RetrievalEvalReport with metrics for each query.
    """
    retriever = retriever or _default_retriever()
    queries = queries if queries is not None else get_all_golden_queries()
    options = options or RetrieverOptions(top_k=DEFAULT_EVAL_TOP_K)

    results: list[RetrievalEvalResult] = []

    with get_tracer().start_span("eval.retrieval_quality") as span:
        for golden in queries:
            if verbose:
                print(f"Running retrieval eval: {golden.id}...")

            context = retriever.retrieve(golden.query, options)
            retrieved = [doc.id for doc in context.documents]
            metrics = calculate_retrieval_metrics(retrieved, golden.expected_doc_ids)

            results.append(RetrievalEvalResult(
                query_id=golden.id,
                query=golden.query,
                passed=metrics.f1_score >= threshold,
                metrics=metrics,
            ))

        report = _build_report(options, threshold, results)
        status = "passed" if report.all_passed else "failed"
        span.set_attributes(
            eval_gate_attributes("retrieval_quality", status, report.avg_f1, threshold)
        )
        span.mark_ok()

    return report


def _build_report(
    options: RetrieverOptions,
    threshold: float,
    results: list[RetrievalEvalResult],
) -> RetrievalEvalReport:
    if results:
        avg_recall = sum(r.metrics.recall for r in results) / len(results)
        avg_precision = sum(r.metrics.precision for r in results) / len(results)
        avg_f1 = sum(r.metrics.f1_score for r in results) / len(results)
        passed = sum(1 for r in results if r.passed)
    else:
        avg_recall = avg_precision = avg_f1 = 0.0
        passed = 0

    return RetrievalEvalReport(
        search_method=options.search_method.value,
        total_queries=len(results),
        passed_queries=passed,
        failed_queries=len(results) - passed,
        avg_recall=avg_recall,
        avg_precision=avg_precision,
        avg_f1=avg_f1,
        threshold=threshold,
        results=results,
    )


def print_report(report: RetrievalEvalReport) -> None:
    """Print a per-query breakdown and the averages."""
    print("\n" + "=" * 60)
    print(f"RESULTS ({report.search_method})")
    print("=" * 60)

    for result in report.results:
        status = "PASS" if result.passed else "FAIL"
        m = result.metrics
        print(f"  [{status}] {result.query_id}: {result.query}")
        print(f"        Recall: {m.recall:.2f} | Precision: {m.precision:.2f} | F1: {m.f1_score:.2f}")
        if m.missing_docs:
            print(f"        Missing: {m.missing_docs}")
        if m.extra_docs:
            print(f"        Extra: {m.extra_docs}")

    print("\n" + "-" * 60)
    print(f"Averages: Recall={report.avg_recall:.2f} | "
          f"Precision={report.avg_precision:.2f} | "
          f"F1={report.avg_f1:.2f}")
    print(f"Threshold: {report.threshold} | "
          f"Passed: {report.passed_queries}/{report.total_queries}")


__all__ = [
    "DEFAULT_F1_THRESHOLD",
    "DEFAULT_EVAL_TOP_K",
    "RetrievalMetrics",
    "RetrievalEvalResult",
    "RetrievalEvalReport",
    "calculate_retrieval_metrics",
    "run_retrieval_eval",
    "print_report",
]
