"""
Core protocols defining contracts for the retrieval layer.

Every infrastructure component implements these protocols,
enabling dependency injection and easy testing.

PATTERN:
- Protocol defines the contract
- Multiple implementations possible
- Factory functions for instantiation
- Test doubles for fast unit tests

The store and the embedder are always passed in explicitly. There is no
module-level store, so two retrievers never share a corpus by accident.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from context_retriever.retrieval.document import Document


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations:
    - HashingEmbeddings (bundled, deterministic)
    - any test double returning fixed vectors
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# SEARCH RESULTS
# ---------------------------------------------------------------------------


@dataclass
class RetrievedDocument:
    """A search hit with its similarity and 1-based rank."""

    id: str
    content: str
    similarity: float
    rank: int
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "content": self.content,
            "similarity": self.similarity,
            "rank": self.rank,
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass
class RetrievedContext:
    """
    Result of one retrieve() call.

    Documents are ordered by descending similarity. retrieval_time is the
    wall-clock duration of the call in milliseconds.
    """

    query: str
    documents: list[RetrievedDocument] = field(default_factory=list)
    retrieval_time: float = 0.0

    @property
    def total_count(self) -> int:
        return len(self.documents)

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "documents": [doc.to_dict() for doc in self.documents],
            "total_count": self.total_count,
            "retrieval_time": self.retrieval_time,
        }


# ---------------------------------------------------------------------------
# DOCUMENT STORE PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class DocumentStore(Protocol):
    """
    Contract for document storage and raw similarity search.

    Implementations:
    - InMemoryDocumentStore (linear scan, no persistence)
    """

    def add_document(self, doc: Document | dict[str, Any]) -> Document:
        """Insert or overwrite a document by id."""
        ...

    def add_documents(self, docs: list[Document | dict[str, Any]]) -> list[Document]:
        """Insert documents in input order; later duplicates win."""
        ...

    def get_document(self, doc_id: str) -> Document | None:
        """Return the stored document, or None when the id is unknown."""
        ...

    def update_document(
        self,
        doc_id: str,
        content: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Apply the given fields. False when the id is unknown."""
        ...

    def delete_document(self, doc_id: str) -> bool:
        """Remove a document. False when the id is unknown."""
        ...

    def get_all_documents(self) -> list[Document]:
        """Copies of every document in insertion order."""
        ...

    def document_ids(self) -> list[str]:
        """Stored ids in insertion order."""
        ...

    def get_document_count(self) -> int:
        ...

    def search(self, query: str, top_k: int = 5) -> list[RetrievedDocument]:
        """Semantic search by cosine similarity."""
        ...

    def search_keyword(self, query: str, top_k: int = 5) -> list[RetrievedDocument]:
        """Lexical search by query-term overlap."""
        ...
