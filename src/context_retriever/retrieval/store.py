"""
Document store implementation following the pattern used across the package.

Pattern: Protocol → Implementation → Factory

This module contains:
1. DocumentStoreConfig - Configuration dataclass
2. InMemoryDocumentStore - Authoritative in-memory store with linear-scan search
3. get_document_store() - Factory function

There is no module-level store. Every call to the factory
returns a new, caller-owned instance, so independent corpora never leak
into each other and tests stay deterministic.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import os
import string
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np

from context_retriever.core import EmbeddingProvider, RetrievedDocument
from context_retriever.embeddings.hashing_embeddings import (
    DEFAULT_DIMENSIONS,
    HashingEmbeddings,
    cosine_similarity,
)
from context_retriever.retrieval.document import (
    Document,
    DocumentValidationError,
    utcnow,
    coerce_document,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass
class DocumentStoreConfig:
    """Configuration for the document store.

    Environment Variables:
        RAG_EMBEDDING_DIM: Vector length of the bundled embedder (default: 512)
    """

    embedding_dim: int = DEFAULT_DIMENSIONS

    @classmethod
    def from_env(cls) -> "DocumentStoreConfig":
        """Load config from environment variables."""
        return cls(
            embedding_dim=int(os.environ.get("RAG_EMBEDDING_DIM", DEFAULT_DIMENSIONS)),
        )


def keyword_tokens(text: str) -> list[str]:
    """
    Split on whitespace, lowercase, trim surrounding punctuation.

    "The cat sat." -> ["the", "cat", "sat"]
    """
    tokens = []
    for raw in text.lower().split():
        token = raw.strip(string.punctuation)
        if token:
            tokens.append(token)
    return tokens


# ---------------------------------------------------------------------------
# IN-MEMORY STORE
# ---------------------------------------------------------------------------


class InMemoryDocumentStore:
    """
    In-memory document store.

    Owns the document collection: embeddings are computed on write, and
    search is a linear scan scoring every document.

    Writes are not synchronized. Each write swaps in a whole new frozen
    Document, so a concurrent reader sees either the old or the new version.
    Searches iterate over a snapshot of the collection.
    """

    def __init__(
        self,
        embeddings: EmbeddingProvider | None = None,
        config: DocumentStoreConfig | None = None,
    ):
        """
        Initialize with injected dependencies.

        Args:
            embeddings: Embedding provider (default: bundled HashingEmbeddings)
            config: Store configuration (used only to size the default embedder)
        """
        self.config = config or DocumentStoreConfig()
        self._embeddings = (
            embeddings if embeddings is not None else HashingEmbeddings(self.config.embedding_dim)
        )
        # dict order is insertion order; overwriting an id keeps its slot
        self._documents: dict[str, Document] = {}

    # -- internals ----------------------------------------------------------

    @staticmethod
    def _freeze(vector: Any) -> np.ndarray:
        frozen = np.array(vector, dtype=np.float32)
        frozen.flags.writeable = False
        return frozen

    def _dimension(self) -> int | None:
        """Vector length shared by every stored document, None when empty."""
        doc = next(iter(self._documents.values()), None)
        return None if doc is None else len(doc.embedding)

    def _checked_vectors(
        self,
        vectors: list[Any],
        expected_count: int,
        expected_dim: int | None,
    ) -> list[np.ndarray]:
        """
        Freeze provider output, rejecting a wrong count or a mixed dimension.

        Raises:
            ValueError: on a count or length mismatch; callers write nothing
        """
        if len(vectors) != expected_count:
            raise ValueError(
                f"embedding provider returned {len(vectors)} vectors for {expected_count} texts"
            )
        frozen = [self._freeze(vec) for vec in vectors]
        for vec in frozen:
            if vec.ndim != 1:
                raise ValueError(f"embedding must be one-dimensional, got shape {vec.shape}")
            if expected_dim is None:
                expected_dim = len(vec)
            elif len(vec) != expected_dim:
                raise ValueError(
                    f"embedding has length {len(vec)}, store vectors have length {expected_dim}"
                )
        return frozen

    @staticmethod
    def _copy_out(doc: Document) -> Document:
        return dataclasses.replace(doc, metadata=copy.deepcopy(doc.metadata))

    def _snapshot(self) -> list[Document]:
        return list(self._documents.values())

    @staticmethod
    def _rank(scored: list[tuple[Document, float]], top_k: int) -> list[RetrievedDocument]:
        # sort is stable, so equal scores keep insertion order
        scored.sort(key=lambda x: x[1], reverse=True)
        return [
            RetrievedDocument(
                id=doc.id,
                content=doc.content,
                similarity=score,
                rank=rank,
                metadata=copy.deepcopy(doc.metadata),
            )
            for rank, (doc, score) in enumerate(scored[:top_k], start=1)
        ]

    # -- lifecycle ----------------------------------------------------------

    def add_document(self, doc: Document | Mapping[str, Any]) -> Document:
        """Insert a document, replacing any existing document with the same id."""
        doc_id, content, metadata = coerce_document(doc)
        [embedding] = self._checked_vectors(
            [self._embeddings.embed(content)], 1, self._dimension()
        )
        now = utcnow()
        stored = Document(
            id=doc_id,
            content=content,
            metadata=metadata,
            embedding=embedding,
            created_at=now,
            updated_at=now,
        )
        self._documents[doc_id] = stored
        logger.debug(f"Document added: {doc_id}")
        return self._copy_out(stored)

    def add_documents(self, docs: list[Document | Mapping[str, Any]]) -> list[Document]:
        """
        Batch insert documents in input order.

        Every entry is validated before anything is written, so one bad
        entry leaves the store untouched.
        """
        if not docs:
            return []

        entries = [coerce_document(doc) for doc in docs]
        embeddings = self._checked_vectors(
            self._embeddings.embed_batch([content for _, content, _ in entries]),
            len(entries),
            self._dimension(),
        )

        now = utcnow()
        added: list[Document] = []
        for (doc_id, content, metadata), emb in zip(entries, embeddings):
            stored = Document(
                id=doc_id,
                content=content,
                metadata=metadata,
                embedding=emb,
                created_at=now,
                updated_at=now,
            )
            self._documents[doc_id] = stored
            added.append(self._copy_out(stored))

        logger.debug(f"Added {len(added)} documents")
        return added

    def get_document(self, doc_id: str) -> Document | None:
        """Return a copy of the stored document, or None if it does not exist."""
        doc = self._documents.get(doc_id)
        if doc is None:
            return None
        return self._copy_out(doc)

    def update_document(
        self,
        doc_id: str,
        content: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        """
        Update content and/or metadata of an existing document.

        The embedding is recomputed only when new content differs from the
        stored content.

        Returns:
            False if the id does not exist, True otherwise
        """
        existing = self._documents.get(doc_id)
        if existing is None:
            return False

        changes: dict[str, Any] = {"updated_at": utcnow()}
        if content is not None:
            if not isinstance(content, str):
                raise DocumentValidationError(
                    f"content of document {doc_id!r} must be str, got {type(content).__name__}"
                )
            changes["content"] = content
            if content != existing.content:
                [changes["embedding"]] = self._checked_vectors(
                    [self._embeddings.embed(content)], 1, self._dimension()
                )
        if metadata is not None:
            changes["metadata"] = copy.deepcopy(dict(metadata))

        self._documents[doc_id] = dataclasses.replace(existing, **changes)
        logger.debug(f"Document updated: {doc_id}")
        return True

    def delete_document(self, doc_id: str) -> bool:
        """Remove a document. Returns True if it existed."""
        if self._documents.pop(doc_id, None) is None:
            return False
        logger.debug(f"Document deleted: {doc_id}")
        return True

    def clear(self) -> None:
        """Remove every document."""
        self._documents = {}
        logger.debug("Document store cleared")

    def set_embedding_provider(self, embeddings: EmbeddingProvider) -> None:
        """
        Swap the embedder and re-embed every stored document.

        The new vectors may have a different length than the old ones, but
        must all share one length. On any mismatch the store keeps its old
        embedder and documents.
        """
        snapshot = self._snapshot()
        vectors = self._checked_vectors(
            embeddings.embed_batch([doc.content for doc in snapshot]) if snapshot else [],
            len(snapshot),
            None,
        )
        self._embeddings = embeddings
        self._documents = {
            doc.id: dataclasses.replace(doc, embedding=vec)
            for doc, vec in zip(snapshot, vectors)
        }
        logger.debug(f"Embedding provider set, re-embedded {len(snapshot)} documents")

    # -- inspection ---------------------------------------------------------

    def get_all_documents(self) -> list[Document]:
        """Copies of all documents in insertion order."""
        return [self._copy_out(doc) for doc in self._snapshot()]

    def document_ids(self) -> list[str]:
        """Stored ids in insertion order."""
        return list(self._documents.keys())

    def get_document_count(self) -> int:
        return len(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    # -- search -------------------------------------------------------------

    def search(self, query: str, top_k: int = 5) -> list[RetrievedDocument]:
        """
        Semantic search using cosine similarity.

        Every document is scored, so the result holds min(top_k, size)
        entries, ranked 1..k by descending similarity.
        """
        if top_k <= 0 or not self._documents:
            return []

        query_emb = np.asarray(self._embeddings.embed(query), dtype=np.float32)
        scored = [
            (doc, cosine_similarity(query_emb, doc.embedding))
            for doc in self._snapshot()
        ]
        return self._rank(scored, top_k)

    def search_keyword(self, query: str, top_k: int = 5) -> list[RetrievedDocument]:
        """
        Keyword search by term overlap.

        Score is the fraction of distinct query tokens present in the
        document's token set. Documents scoring 0 are never returned.
        """
        if top_k <= 0 or not self._documents:
            return []

        query_terms = set(keyword_tokens(query))
        if not query_terms:
            return []

        scored = []
        for doc in self._snapshot():
            overlap = query_terms & set(keyword_tokens(doc.content))
            if overlap:
                scored.append((doc, len(overlap) / len(query_terms)))
        return self._rank(scored, top_k)


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_document_store(
    embeddings: EmbeddingProvider | None = None,
    config: DocumentStoreConfig | None = None,
) -> InMemoryDocumentStore:
    """
    Factory function returning a NEW document store.

    Args:
        embeddings: Embedding provider (bundled HashingEmbeddings if not provided)
        config: Store configuration (read from env if not provided)

    Returns:
        A fresh, empty InMemoryDocumentStore
    """
    config = config or DocumentStoreConfig.from_env()
    return InMemoryDocumentStore(embeddings=embeddings, config=config)
