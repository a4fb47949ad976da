"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to fixed-length vectors.

HashingEmbeddings is the bundled provider. It is a hashed bag of features:
every casefolded word and every character trigram of every word is hashed
into one of `dimensions` buckets, counts are accumulated and the vector is
L2-normalized. Texts that share more words (or word fragments) land on more
of the same buckets, so their cosine similarity is higher.

Buckets come from blake2b, not hash(), so vectors are identical across
processes regardless of PYTHONHASHSEED.
"""

from __future__ import annotations

import hashlib
import re

import numpy as np

DEFAULT_DIMENSIONS = 512

# Unicode letters and digits, so non-Latin scripts hash like any other text
_WORD_RE = re.compile(r"\w+")


def _features(text: str) -> list[str]:
    """Words plus boundary-marked character trigrams."""
    features: list[str] = []
    for word in _WORD_RE.findall(text.casefold()):
        features.append(f"w:{word}")
        padded = f"#{word}#"
        for i in range(len(padded) - 2):
            features.append(f"c:{padded[i:i + 3]}")
    return features


class HashingEmbeddings:
    """
    Deterministic embedding provider with no model and no I/O.

    Any string, including "" or "?!", yields a vector. Strings without a
    single word character (in any script) yield the zero vector.
    """

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        if dimensions <= 0:
            raise ValueError(f"dimensions must be positive, got {dimensions}")
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _bucket(self, feature: str) -> int:
        digest = hashlib.blake2b(feature.encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big") % self._dimensions

    def embed(self, text: str) -> np.ndarray:
        """Generate a unit-length (or zero) vector for a single text."""
        vector = np.zeros(self._dimensions, dtype=np.float32)
        for feature in _features(text):
            vector[self._bucket(feature)] += 1.0

        norm = float(np.linalg.norm(vector))
        if norm > 0:
            vector /= norm
        return vector

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        return [self.embed(text) for text in texts]


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    Cosine similarity clamped to [0, 1].

    Zero vectors and mismatched lengths score 0 instead of NaN.
    """
    if a.shape != b.shape:
        return 0.0
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    score = float(np.dot(a, b) / (norm_a * norm_b))
    return min(max(score, 0.0), 1.0)


def get_embedding_provider(dimensions: int | None = None) -> HashingEmbeddings:
    """
    Factory function to get the default embedding provider.

    Args:
        dimensions: Vector length (default: RAG_EMBEDDING_DIM or 512)
    """
    if dimensions is None:
        from context_retriever.retrieval.store import DocumentStoreConfig

        dimensions = DocumentStoreConfig.from_env().embedding_dim
    return HashingEmbeddings(dimensions=dimensions)
