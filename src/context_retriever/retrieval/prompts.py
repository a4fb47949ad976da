"""
Context and prompt rendering.

Turns a RetrievedContext into text a language model can read, and wraps it
around the user's query. The context block always comes first, so the
header is found before the query in the final prompt.
"""

from __future__ import annotations

from typing import Any

from context_retriever.core import RetrievedContext

CONTEXT_HEADER = "RETRIEVED CONTEXT:"

NO_CONTEXT_MESSAGE = "No relevant context found."

AUGMENT_INSTRUCTION = "Based on the above context, please answer the following query:"


def _format_metadata(metadata: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in metadata.items())


def format_context(context: RetrievedContext) -> str:
    """
    Render retrieved documents as a readable block.

    Example:
        RETRIEVED CONTEXT:
        Query: how do neural networks learn
        Retrieved 1 documents in 0.42ms

        [Document 1: doc2]
        Similarity: 63%
        Deep learning uses artificial neural networks ...
    """
    lines = [
        CONTEXT_HEADER,
        f"Query: {context.query}",
        f"Retrieved {context.total_count} documents in {context.retrieval_time:.2f}ms",
        "",
    ]

    if not context.documents:
        lines.append(NO_CONTEXT_MESSAGE)
        return "\n".join(lines)

    for doc in context.documents:
        lines.append(f"[Document {doc.rank}: {doc.id}]")
        lines.append(f"Similarity: {round(doc.similarity * 100)}%")
        if doc.metadata:
            lines.append(f"Metadata: {_format_metadata(doc.metadata)}")
        lines.append(doc.content)
        lines.append("")

    return "\n".join(lines).rstrip("\n")


def build_augmented_prompt(query: str, context: RetrievedContext) -> str:
    """Context block, then the instruction, then the query verbatim."""
    return f"{format_context(context)}\n\n{AUGMENT_INSTRUCTION}\n{query}"
