"""
context_retriever - document store and retriever for retrieval-augmented generation.

USAGE:
------
from context_retriever import Retriever, RetrieverOptions, SearchMethod, get_document_store

store = get_document_store()
retriever = Retriever(store)
retriever.add_documents([{"id": "doc1", "content": "The cat sat on the mat"}])

result = retriever.augment_prompt(
    "where did the cat sit?",
    RetrieverOptions(top_k=3, search_method=SearchMethod.HYBRID),
)
print(result.augmented_prompt)
"""

from context_retriever.core import (
    DocumentStore,
    EmbeddingProvider,
    RetrievedContext,
    RetrievedDocument,
)
from context_retriever.embeddings import HashingEmbeddings, get_embedding_provider
from context_retriever.retrieval import (
    AugmentedPrompt,
    Document,
    DocumentStoreConfig,
    DocumentValidationError,
    InMemoryDocumentStore,
    Retriever,
    RetrieverOptions,
    SearchMethod,
    build_augmented_prompt,
    format_context,
    get_document_store,
)

__version__ = "0.1.0"

__all__ = [
    "DocumentStore",
    "EmbeddingProvider",
    "RetrievedContext",
    "RetrievedDocument",
    "HashingEmbeddings",
    "get_embedding_provider",
    "AugmentedPrompt",
    "Document",
    "DocumentStoreConfig",
    "DocumentValidationError",
    "InMemoryDocumentStore",
    "Retriever",
    "RetrieverOptions",
    "SearchMethod",
    "build_augmented_prompt",
    "format_context",
    "get_document_store",
]
