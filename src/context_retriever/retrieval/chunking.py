"""
Sentence-based text chunking.

Long documents retrieve poorly as one vector. chunk_text() packs whole
sentences into chunks of at most `chunk_size` characters; a sentence longer
than that becomes a chunk on its own rather than being cut mid-word.
"""

from __future__ import annotations

import re

DEFAULT_CHUNK_SIZE = 512

# a boundary is terminator punctuation followed by whitespace, so "3.5" stays whole
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_BOUNDARY_RE.split(text.strip()) if s.strip()]


def chunk_text(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """
    Split text into sentence-aligned chunks.

    Args:
        text: Text to split
        chunk_size: Soft upper bound on chunk length in characters

    Returns:
        Chunks in document order; empty list for blank text
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    chunks: list[str] = []
    current = ""
    for sentence in split_sentences(text):
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) <= chunk_size:
            current = candidate
            continue
        if current:
            chunks.append(current)
        current = sentence

    if current:
        chunks.append(current)
    return chunks
