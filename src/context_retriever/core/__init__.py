"""
Core module - shared protocols and types for the retrieval layer.

This module provides the foundational contracts that enable:
- Dependency injection of the store and the embedder
- Easy testing with mock implementations
- Clear separation of concerns

USAGE:
------
from context_retriever.core import DocumentStore, EmbeddingProvider

class MyEmbeddings:
    '''Implements EmbeddingProvider protocol.'''
    ...
"""

from context_retriever.core.protocols import (
    # Protocols
    EmbeddingProvider,
    DocumentStore,
    # Data classes
    RetrievedDocument,
    RetrievedContext,
)

__all__ = [
    # Protocols
    "EmbeddingProvider",
    "DocumentStore",
    # Data classes
    "RetrievedDocument",
    "RetrievedContext",
]
