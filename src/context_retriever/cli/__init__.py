"""
CLI module - command-line interface.

Developer tooling over the public retrieval API. The library itself is
used programmatically; nothing outside this package imports from it.

Provides entry points for:
- Querying the sample corpus
- Running the retrieval quality gate
- Showing corpus statistics
"""

from context_retriever.cli.commands import (
    main,
    run_query_cli,
    run_eval_cli,
    run_stats_cli,
)

__all__ = [
    "main",
    "run_query_cli",
    "run_eval_cli",
    "run_stats_cli",
]
