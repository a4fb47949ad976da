"""
Evals module - quality gates for the retrieval layer.

Currently one gate:
- retrieval_eval: precision / recall / F1 of retrieve() against golden queries
"""

from context_retriever.evals.retrieval_eval import (
    DEFAULT_EVAL_TOP_K,
    DEFAULT_F1_THRESHOLD,
    RetrievalEvalReport,
    RetrievalEvalResult,
    RetrievalMetrics,
    calculate_retrieval_metrics,
    print_report,
    run_retrieval_eval,
)

__all__ = [
    "DEFAULT_EVAL_TOP_K",
    "DEFAULT_F1_THRESHOLD",
    "RetrievalEvalReport",
    "RetrievalEvalResult",
    "RetrievalMetrics",
    "calculate_retrieval_metrics",
    "print_report",
    "run_retrieval_eval",
]
