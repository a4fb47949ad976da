"""
Golden Sets Package

Provides queries with expected documents for retrieval evaluation.

EXTENSIBILITY:
--------------
To add queries for a new corpus:

1. Create `<corpus>_queries.py` following the `ai_queries.py` pattern
2. Extend `get_all_golden_queries()` below
"""

from context_retriever.golden_sets.ai_queries import (
    AI_QUERIES,
    GoldenQuery,
    get_query_by_id,
)


def get_all_golden_queries() -> list[GoldenQuery]:
    """
    Get all golden queries.

    This is the primary entry point for evaluators.
    """
    queries: list[GoldenQuery] = []
    queries.extend(AI_QUERIES)
    return queries


__all__ = [
    "GoldenQuery",
    "AI_QUERIES",
    "get_all_golden_queries",
    "get_query_by_id",
]
