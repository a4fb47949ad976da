"""
CLI commands - entry points for the retriever.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Build a store and retriever over the seed corpus
4. Print results
5. Return exit code

Commands are thin wrappers. The work happens in the retrieval and evals
modules, which stay testable without going through argparse.
"""

from __future__ import annotations

import argparse
import logging
import sys

from context_retriever.retrieval.options import DEFAULT_TOP_K, RetrieverOptions, SearchMethod

_METHODS = [method.value for method in SearchMethod]


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _seeded_retriever():
    from context_retriever.retrieval import Retriever, get_document_store, seed_document_store

    store = get_document_store()
    seed_document_store(store)
    return Retriever(store)


def _add_search_arguments(parser: argparse.ArgumentParser, default_top_k: int) -> None:
    parser.add_argument("--method", choices=_METHODS, default=SearchMethod.SEMANTIC.value)
    parser.add_argument("--top-k", type=int, default=default_top_k)
    parser.add_argument("--threshold", type=float, default=0.0, help="Similarity floor (0-1)")


def run_query_cli(argv: list[str] | None = None) -> int:
    """Retrieve context for a query and print it."""
    parser = argparse.ArgumentParser(
        prog="context-retriever query",
        description="Retrieve context from the sample corpus",
    )
    parser.add_argument("query", help="Query text")
    _add_search_arguments(parser, DEFAULT_TOP_K)
    parser.add_argument("--metadata", action="store_true", help="Include document metadata")
    parser.add_argument("--prompt", action="store_true", help="Print the full augmented prompt")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    options = RetrieverOptions(
        top_k=args.top_k,
        similarity_threshold=args.threshold,
        include_metadata=args.metadata,
        search_method=SearchMethod(args.method),
    )
    retriever = _seeded_retriever()

    if args.prompt:
        print(retriever.augment_prompt(args.query, options).augmented_prompt)
    else:
        print(retriever.format_context(retriever.retrieve(args.query, options)))
    return 0


def run_eval_cli(argv: list[str] | None = None) -> int:
    """Run the retrieval quality gate."""
    from context_retriever.evals.retrieval_eval import (
        DEFAULT_EVAL_TOP_K,
        DEFAULT_F1_THRESHOLD,
        print_report,
        run_retrieval_eval,
    )

    parser = argparse.ArgumentParser(
        prog="context-retriever eval",
        description="Run retrieval quality eval",
    )
    _add_search_arguments(parser, DEFAULT_EVAL_TOP_K)
    parser.add_argument("--f1", type=float, default=DEFAULT_F1_THRESHOLD, help="Per-query F1 gate")
    parser.add_argument("--quiet", action="store_true", help="Minimal output")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("RETRIEVAL QUALITY EVAL")
    print("=" * 60)

    options = RetrieverOptions(
        top_k=args.top_k,
        similarity_threshold=args.threshold,
        search_method=SearchMethod(args.method),
    )
    report = run_retrieval_eval(
        options=options,
        threshold=args.f1,
        verbose=not args.quiet,
    )

    if not args.quiet:
        print_report(report)
    else:
        print(f"\nAverage F1: {report.avg_f1:.2f}")
        print(f"Passed: {report.passed_queries}/{report.total_queries}")

    if report.all_passed:
        print("\n>>> RETRIEVAL EVAL GATE: PASSED <<<")
        return 0
    else:
        print("\n>>> RETRIEVAL EVAL GATE: FAILED <<<")
        return 1


def run_stats_cli(argv: list[str] | None = None) -> int:
    """Print corpus statistics for the sample corpus."""
    parser = argparse.ArgumentParser(prog="context-retriever stats")
    parser.parse_args(argv)

    stats = _seeded_retriever().get_stats()
    print(f"Documents: {stats['document_count']}")
    return 0


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        context-retriever query "how do neural networks learn" --method hybrid
        context-retriever eval --method keyword
        context-retriever stats
    """
    _load_env()

    from context_retriever.observability import init_phoenix, shutdown_phoenix

    # Tracing is a no-op unless PHOENIX_ENABLED is set
    init_phoenix()

    parser = argparse.ArgumentParser(
        description="Document store and retriever for RAG prompts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  query       Retrieve context for a query from the sample corpus
  eval        Run the retrieval quality gate over golden queries
  stats       Show sample corpus statistics

Examples:
  context-retriever query "neural networks" --method hybrid --top-k 3
  context-retriever query "transformers" --prompt
  context-retriever eval --method keyword
        """,
    )

    parser.add_argument(
        "command",
        choices=["query", "eval", "stats"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "query": run_query_cli,
        "eval": run_eval_cli,
        "stats": run_stats_cli,
    }

    try:
        return commands[args.command](remaining)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    finally:
        shutdown_phoenix()


if __name__ == "__main__":
    sys.exit(main())
