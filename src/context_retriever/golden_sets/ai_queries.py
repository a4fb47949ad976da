"""
Golden queries for the AI/ML seed corpus.

Each query names the documents a good retriever should return for it.
Queries encode INTENT: the expected ids are the documents a reader would
pick, not whatever the current scorer happens to rank first.
"""

from dataclasses import dataclass, field


@dataclass
class GoldenQuery:
    """A query and the ids that should be retrieved for it."""
    id: str
    query: str
    expected_doc_ids: list[str] = field(default_factory=list)
    description: str = ""


AI_QUERIES: list[GoldenQuery] = [
    GoldenQuery(
        id="ai-001",
        query="natural language processing",
        expected_doc_ids=["doc_nlp"],
        description="Exact phrase from a single document",
    ),
    GoldenQuery(
        id="ai-002",
        query="computer vision with digital images",
        expected_doc_ids=["doc_computer_vision"],
        description="Vision vocabulary only appears in one document",
    ),
    GoldenQuery(
        id="ai-003",
        query="reinforcement learning agent environment",
        expected_doc_ids=["doc_reinforcement_learning"],
        description="Shared word 'learning' must not pull in the wrong documents",
    ),
    GoldenQuery(
        id="ai-004",
        query="self-attention transformers architectures",
        expected_doc_ids=["doc_transformers"],
        description="Architecture terms unique to the transformers document",
    ),
    GoldenQuery(
        id="ai-005",
        query="gradient descent loss function",
        expected_doc_ids=["doc_gradient_descent"],
        description="Optimization vocabulary",
    ),
    GoldenQuery(
        id="ai-006",
        query="embeddings dense vectors semantic search",
        expected_doc_ids=["doc_embeddings"],
        description="Vector search vocabulary",
    ),
]


def get_query_by_id(query_id: str) -> GoldenQuery | None:
    """Get a specific golden query by ID, or None if not found."""
    for query in AI_QUERIES:
        if query.id == query_id:
            return query
    return None
