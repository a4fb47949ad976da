"""
AI/ML knowledge base seed data.

A small corpus used by the CLI demo and the retrieval quality eval.
In production, documents would come from a content pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from context_retriever.retrieval.document import Document

if TYPE_CHECKING:
    from context_retriever.core import DocumentStore


def get_ai_documents() -> list[Document]:
    """
    Get seed documents for the AI/ML knowledge base.

    Each document has a category and a source in its metadata.
    """
    return [
        Document(
            id="doc_machine_learning",
            content=(
                "Machine learning is a subset of artificial intelligence that enables "
                "systems to learn and improve from experience without being explicitly "
                "programmed."
            ),
            metadata={"category": "AI", "source": "textbook"},
        ),
        Document(
            id="doc_deep_learning",
            content=(
                "Deep learning uses artificial neural networks with multiple layers to "
                "process complex patterns in large amounts of data."
            ),
            metadata={"category": "AI", "source": "research"},
        ),
        Document(
            id="doc_nlp",
            content=(
                "Natural language processing allows computers to understand, interpret, "
                "and generate human language in meaningful ways."
            ),
            metadata={"category": "NLP", "source": "textbook"},
        ),
        Document(
            id="doc_computer_vision",
            content=(
                "Computer vision enables machines to interpret and understand the visual "
                "world using digital images and videos."
            ),
            metadata={"category": "Vision", "source": "documentation"},
        ),
        Document(
            id="doc_transformers",
            content=(
                "Transformers are neural network architectures based on self-attention "
                "mechanisms that have revolutionized NLP and other domains."
            ),
            metadata={"category": "NLP", "source": "research"},
        ),
        Document(
            id="doc_reinforcement_learning",
            content=(
                "Reinforcement learning trains an agent to choose actions by rewarding "
                "good outcomes and penalizing bad ones in an environment."
            ),
            metadata={"category": "AI", "source": "textbook"},
        ),
        Document(
            id="doc_gradient_descent",
            content=(
                "Gradient descent minimizes a loss function by repeatedly moving model "
                "parameters against the gradient, which is how neural networks learn "
                "their weights."
            ),
            metadata={"category": "Optimization", "source": "lecture"},
        ),
        Document(
            id="doc_embeddings",
            content=(
                "Embeddings map words or documents to dense vectors so that similar "
                "meanings end up close together, which powers semantic search."
            ),
            metadata={"category": "NLP", "source": "documentation"},
        ),
    ]


def seed_document_store(store: DocumentStore) -> int:
    """
    Seed a document store with the AI/ML documents.

    Works with any DocumentStore implementation.

    Returns:
        Number of documents added
    """
    return len(store.add_documents(get_ai_documents()))
