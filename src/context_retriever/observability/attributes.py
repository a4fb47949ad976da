"""
Semantic Conventions for Span Attributes

Attribute keys for retrieval spans, in a custom `retrieval.` namespace
alongside the OpenTelemetry GenAI conventions.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# RETRIEVAL NAMESPACE (custom)
# ---------------------------------------------------------------------------

# Request
RETRIEVAL_SEARCH_METHOD = "retrieval.search_method"  # "semantic", "keyword", "hybrid"
RETRIEVAL_TOP_K = "retrieval.top_k"
RETRIEVAL_SIMILARITY_THRESHOLD = "retrieval.similarity_threshold"
RETRIEVAL_QUERY = "retrieval.query"  # only with PHOENIX_CAPTURE_CONTENT

# Response
RETRIEVAL_DOC_COUNT = "retrieval.doc_count"
RETRIEVAL_DOC_IDS = "retrieval.doc_ids"
RETRIEVAL_TOP_SIMILARITY = "retrieval.top_similarity"
RETRIEVAL_LATENCY_MS = "retrieval.latency_ms"

# Store
RETRIEVAL_CORPUS_SIZE = "retrieval.corpus_size"


# ---------------------------------------------------------------------------
# EVAL NAMESPACE (custom)
# ---------------------------------------------------------------------------

EVAL_GATE_NAME = "eval.gate.name"  # "retrieval_quality"
EVAL_GATE_STATUS = "eval.gate.status"  # "passed", "failed"
EVAL_GATE_SCORE = "eval.gate.score"
EVAL_GATE_THRESHOLD = "eval.gate.threshold"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def retrieval_request_attributes(
    search_method: str,
    top_k: int,
    similarity_threshold: float,
    corpus_size: int,
) -> dict:
    """Create attributes dict for the start of a retrieve span."""
    return {
        RETRIEVAL_SEARCH_METHOD: search_method,
        RETRIEVAL_TOP_K: top_k,
        RETRIEVAL_SIMILARITY_THRESHOLD: similarity_threshold,
        RETRIEVAL_CORPUS_SIZE: corpus_size,
    }


def retrieval_result_attributes(
    doc_ids: list[str],
    top_similarity: float | None,
    latency_ms: float,
) -> dict:
    """Create attributes dict describing a finished retrieval."""
    attrs = {
        RETRIEVAL_DOC_COUNT: len(doc_ids),
        RETRIEVAL_DOC_IDS: list(doc_ids),
        RETRIEVAL_LATENCY_MS: latency_ms,
    }
    if top_similarity is not None:
        attrs[RETRIEVAL_TOP_SIMILARITY] = top_similarity
    return attrs


def eval_gate_attributes(
    gate_name: str,
    status: str,
    score: float | None = None,
    threshold: float | None = None,
) -> dict:
    """Create attributes dict for an eval gate span."""
    attrs = {
        EVAL_GATE_NAME: gate_name,
        EVAL_GATE_STATUS: status,
    }
    if score is not None:
        attrs[EVAL_GATE_SCORE] = score
    if threshold is not None:
        attrs[EVAL_GATE_THRESHOLD] = threshold
    return attrs
