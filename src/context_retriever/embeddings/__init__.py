"""
Embeddings module - text embedding generation.

1. Protocol (EmbeddingProvider, in core.protocols) defines the interface
2. Bundled deterministic implementation (HashingEmbeddings)
3. Factory function (get_embedding_provider)
"""

from context_retriever.core.protocols import EmbeddingProvider
from context_retriever.embeddings.hashing_embeddings import (
    DEFAULT_DIMENSIONS,
    HashingEmbeddings,
    cosine_similarity,
    get_embedding_provider,
)

__all__ = [
    "DEFAULT_DIMENSIONS",
    "EmbeddingProvider",
    "HashingEmbeddings",
    "cosine_similarity",
    "get_embedding_provider",
]
