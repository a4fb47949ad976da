"""
Retrieval module - document storage, search and context assembly for RAG.

This module provides:
- Document: The document model
- DocumentStoreConfig: Configuration for stores
- InMemoryDocumentStore: The document store
- get_document_store(): Factory function
- Retriever: Search orchestration, hybrid fusion and prompt assembly
- RetrieverOptions / SearchMethod: Options for a retrieve() call

ARCHITECTURE:
-------------
1. Protocols define the contracts (in core.protocols)
2. InMemoryDocumentStore owns documents and raw search
3. Retriever holds a store reference and post-processes results
4. Factory function for instantiation, no module-level store
"""

# Document model
from context_retriever.retrieval.document import Document, DocumentValidationError

# Store implementation and factory
from context_retriever.retrieval.store import (
    DocumentStoreConfig,
    InMemoryDocumentStore,
    get_document_store,
    keyword_tokens,
)

# Orchestration
from context_retriever.retrieval.options import (
    DEFAULT_TOP_K,
    RetrieverOptions,
    SearchMethod,
)
from context_retriever.retrieval.prompts import (
    CONTEXT_HEADER,
    NO_CONTEXT_MESSAGE,
    build_augmented_prompt,
    format_context,
)
from context_retriever.retrieval.chunking import chunk_text
from context_retriever.retrieval.retriever import AugmentedPrompt, Retriever

# Seed data
from context_retriever.retrieval.seeds import (
    get_ai_documents,
    seed_document_store,
)

__all__ = [
    # Document
    "Document",
    "DocumentValidationError",
    # Store
    "DocumentStoreConfig",
    "InMemoryDocumentStore",
    "get_document_store",
    "keyword_tokens",
    # Retriever
    "DEFAULT_TOP_K",
    "RetrieverOptions",
    "SearchMethod",
    "Retriever",
    "AugmentedPrompt",
    # Rendering
    "CONTEXT_HEADER",
    "NO_CONTEXT_MESSAGE",
    "format_context",
    "build_augmented_prompt",
    "chunk_text",
    # Seeds
    "get_ai_documents",
    "seed_document_store",
]
