"""
Seed data for the retrieval system.

This package contains externalized knowledge base content.
Separating data from infrastructure enables:
- Content updates without code changes
- Easy testing with controlled data
"""

from context_retriever.retrieval.seeds.ai_knowledge import (
    get_ai_documents,
    seed_document_store,
)

__all__ = ["get_ai_documents", "seed_document_store"]
