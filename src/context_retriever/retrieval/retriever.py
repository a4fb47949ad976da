"""
Retriever - turns a query into a ranked, formatted context.

The retriever owns no document state. It holds a reference to a
DocumentStore, delegates every read and write to it, and post-processes
raw search results:

1. Run the raw search(es) for the chosen SearchMethod
2. Fuse semantic and keyword scores for hybrid search
3. Drop results below the similarity threshold
4. Re-rank 1..n with no gaps
5. Strip metadata unless it was asked for

HYBRID FUSION:
--------------
combined = semantic_weight * semantic_score + keyword_weight * keyword_score

A document missing from one result set scores 0 for that signal. Both
weights default to 0.5, so a document that is a strong hit for only one
signal still competes with documents that are weak hits for both.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

from context_retriever.core import DocumentStore, RetrievedContext, RetrievedDocument
from context_retriever.observability import get_config, get_tracer
from context_retriever.observability.attributes import (
    RETRIEVAL_QUERY,
    retrieval_request_attributes,
    retrieval_result_attributes,
)
from context_retriever.retrieval.chunking import DEFAULT_CHUNK_SIZE, chunk_text
from context_retriever.retrieval.document import Document
from context_retriever.retrieval.options import RetrieverOptions, SearchMethod
from context_retriever.retrieval.prompts import build_augmented_prompt, format_context

logger = logging.getLogger(__name__)

DEFAULT_SEMANTIC_WEIGHT = 0.5
DEFAULT_KEYWORD_WEIGHT = 0.5

# hybrid asks each raw search for this many times top_k candidates
HYBRID_CANDIDATE_MULTIPLIER = 2


@dataclass
class AugmentedPrompt:
    """Prompt text ready for a model, plus the context it was built from."""

    augmented_prompt: str
    context: RetrievedContext


class Retriever:
    """
    RAG retriever over an injected DocumentStore.

    Dependencies are INJECTED, not created internally. Two retrievers built
    on the same store see the same corpus; retrievers on different stores
    are fully independent.
    """

    def __init__(
        self,
        store: DocumentStore,
        semantic_weight: float = DEFAULT_SEMANTIC_WEIGHT,
        keyword_weight: float = DEFAULT_KEYWORD_WEIGHT,
    ):
        """
        Args:
            store: Document store to search (injected, not created here)
            semantic_weight: Weight of the cosine score in hybrid fusion
            keyword_weight: Weight of the term-overlap score in hybrid fusion
        """
        if semantic_weight < 0 or keyword_weight < 0:
            raise ValueError("hybrid weights must be non-negative")
        total = semantic_weight + keyword_weight
        if total <= 0:
            raise ValueError("hybrid weights must not both be zero")

        self.store = store
        # normalized so fused scores stay in [0, 1]
        self.semantic_weight = semantic_weight / total
        self.keyword_weight = keyword_weight / total

    # -- retrieval ----------------------------------------------------------

    def retrieve(self, query: str, options: RetrieverOptions | None = None) -> RetrievedContext:
        """
        Retrieve context for a query.

        Args:
            query: Free-text query
            options: Search options (defaults: top 5, semantic, no floor, no metadata)

        Returns:
            RetrievedContext with documents ranked 1..n by descending similarity
        """
        start = time.perf_counter()
        options = options or RetrieverOptions()
        method = options.search_method

        tracer = get_tracer()
        attributes = retrieval_request_attributes(
            search_method=method.value,
            top_k=options.top_k,
            similarity_threshold=options.similarity_threshold,
            corpus_size=self.store.get_document_count(),
        )
        if get_config().capture_content:
            attributes[RETRIEVAL_QUERY] = query

        with tracer.start_span("retriever.retrieve", attributes=attributes) as span:
            try:
                results = self._search(query, method, options.top_k)
            except Exception as e:
                span.mark_error(e)
                raise

            documents = [
                doc for doc in results if doc.similarity >= options.similarity_threshold
            ]
            documents = [
                dataclasses.replace(
                    doc,
                    rank=rank,
                    metadata=doc.metadata if options.include_metadata else None,
                )
                for rank, doc in enumerate(documents, start=1)
            ]

            retrieval_time = max(0.0, (time.perf_counter() - start) * 1000)

            span.set_attributes(retrieval_result_attributes(
                doc_ids=[doc.id for doc in documents],
                top_similarity=documents[0].similarity if documents else None,
                latency_ms=retrieval_time,
            ))
            span.mark_ok()

        logger.debug(
            f"Retrieved {len(documents)} documents for query "
            f"(method={method.value}, time={retrieval_time:.2f}ms)"
        )

        return RetrievedContext(
            query=query,
            documents=documents,
            retrieval_time=retrieval_time,
        )

    def _search(self, query: str, method: SearchMethod, top_k: int) -> list[RetrievedDocument]:
        if method is SearchMethod.SEMANTIC:
            return self.store.search(query, top_k)
        if method is SearchMethod.KEYWORD:
            return self.store.search_keyword(query, top_k)
        if method is SearchMethod.HYBRID:
            return self._hybrid_search(query, top_k)
        raise ValueError(f"Unknown search method: {method!r}")

    def _hybrid_search(self, query: str, top_k: int) -> list[RetrievedDocument]:
        """Weighted fusion of semantic and keyword results, truncated to top_k."""
        if top_k <= 0:
            return []

        pool = top_k * HYBRID_CANDIDATE_MULTIPLIER
        semantic = self.store.search(query, pool)
        keyword = self.store.search_keyword(query, pool)

        semantic_scores = {doc.id: doc.similarity for doc in semantic}
        keyword_scores = {doc.id: doc.similarity for doc in keyword}

        # one entry per id; keep whichever copy carries metadata
        candidates: dict[str, RetrievedDocument] = {}
        for doc in [*semantic, *keyword]:
            existing = candidates.get(doc.id)
            if existing is None or (existing.metadata is None and doc.metadata is not None):
                candidates[doc.id] = doc

        order = {doc_id: i for i, doc_id in enumerate(self.store.document_ids())}

        fused = [
            (
                doc,
                self.semantic_weight * semantic_scores.get(doc_id, 0.0)
                + self.keyword_weight * keyword_scores.get(doc_id, 0.0),
            )
            for doc_id, doc in candidates.items()
        ]
        fused.sort(key=lambda x: (-x[1], order.get(x[0].id, len(order))))

        return [
            dataclasses.replace(doc, similarity=score, rank=rank)
            for rank, (doc, score) in enumerate(fused[:top_k], start=1)
        ]

    # -- rendering ----------------------------------------------------------

    def format_context(self, context: RetrievedContext) -> str:
        """Render retrieved documents as a readable block."""
        return format_context(context)

    def build_augmented_prompt(self, query: str, context: RetrievedContext) -> str:
        """Context block, instruction, then the original query."""
        return build_augmented_prompt(query, context)

    def augment_prompt(self, query: str, options: RetrieverOptions | None = None) -> AugmentedPrompt:
        """Retrieve and build the augmented prompt in one step."""
        context = self.retrieve(query, options)
        return AugmentedPrompt(
            augmented_prompt=self.build_augmented_prompt(query, context),
            context=context,
        )

    # -- corpus management (pass-through to the store) ----------------------

    def add_documents(self, docs: list[Document | Mapping[str, Any]]) -> list[Document]:
        """Add documents to the underlying store."""
        added = self.store.add_documents(docs)
        logger.debug(f"Added {len(added)} documents to retriever")
        return added

    def remove_document(self, doc_id: str) -> bool:
        """Remove a document from the underlying store."""
        removed = self.store.delete_document(doc_id)
        if removed:
            logger.debug(f"Removed document from retriever: {doc_id}")
        return removed

    def index_document(
        self,
        doc_id: str,
        content: str,
        metadata: Mapping[str, Any] | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> list[str]:
        """
        Chunk a long document and store each chunk as its own document.

        Chunk ids are "<doc_id>_chunk_<i>"; each chunk's metadata carries
        source_id, chunk_index and total_chunks on top of `metadata`.
        Re-indexing a source replaces all of its previous chunks.

        Returns:
            The chunk ids, in document order
        """
        chunks = chunk_text(content, chunk_size) or [content]
        docs = [
            {
                "id": f"{doc_id}_chunk_{i}",
                "content": chunk,
                "metadata": {
                    **(metadata or {}),
                    "source_id": doc_id,
                    "chunk_index": i,
                    "total_chunks": len(chunks),
                },
            }
            for i, chunk in enumerate(chunks)
        ]
        chunk_ids = [doc["id"] for doc in docs]
        previous = self._chunk_ids(doc_id)
        self.store.add_documents(docs)

        # chunks from an earlier, longer version of this source
        for stale_id in set(previous) - set(chunk_ids):
            self.store.delete_document(stale_id)

        logger.debug(f"Document indexed: {doc_id} ({len(chunks)} chunks)")
        return chunk_ids

    def remove_source(self, source_id: str) -> int:
        """
        Remove every chunk indexed from `source_id`, and a document with
        that exact id if one exists.

        Returns:
            Number of documents removed
        """
        doomed = self._chunk_ids(source_id)
        if self.store.get_document(source_id) is not None:
            doomed.append(source_id)
        removed = sum(1 for doc_id in doomed if self.store.delete_document(doc_id))
        logger.debug(f"Removed {removed} documents for source: {source_id}")
        return removed

    def _chunk_ids(self, source_id: str) -> list[str]:
        return [
            doc.id
            for doc in self.store.get_all_documents()
            if doc.metadata.get("source_id") == source_id
        ]

    def get_stats(self) -> dict[str, int]:
        """Live stats read straight from the store."""
        return {"document_count": self.store.get_document_count()}
