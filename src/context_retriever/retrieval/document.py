"""
Document model for the retrieval system.

Single responsibility: Define the structure of documents
stored in the document store, and validate what callers hand in.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

import numpy as np


class DocumentValidationError(ValueError):
    """Raised when a document lacks a string `id` or `content` field."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Document:
    """
    A document with embedding for retrieval.

    Frozen: the store replaces a document wholesale on every write, so a
    reader holds either the old or the new version, never a mix of both.
    Callers build documents without an embedding; the store fills it in.
    """

    id: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    embedding: np.ndarray | None = field(default=None, repr=False, compare=False)
    created_at: datetime = field(default_factory=utcnow, compare=False)
    updated_at: datetime = field(default_factory=utcnow, compare=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "content": self.content,
            "metadata": copy.deepcopy(self.metadata),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def coerce_document(raw: Document | Mapping[str, Any]) -> tuple[str, str, dict[str, Any]]:
    """
    Pull (id, content, metadata) out of a Document or a plain mapping.

    Missing or non-string id/content is a caller bug and raises
    DocumentValidationError. Missing metadata is fine.
    """
    if isinstance(raw, Document):
        doc_id, content, metadata = raw.id, raw.content, raw.metadata
    elif isinstance(raw, Mapping):
        if "id" not in raw:
            raise DocumentValidationError("document is missing required field 'id'")
        if "content" not in raw:
            raise DocumentValidationError(
                f"document {raw['id']!r} is missing required field 'content'"
            )
        doc_id, content, metadata = raw["id"], raw["content"], raw.get("metadata")
    else:
        raise DocumentValidationError(
            f"expected Document or mapping, got {type(raw).__name__}"
        )

    if not isinstance(doc_id, str):
        raise DocumentValidationError(f"document id must be str, got {type(doc_id).__name__}")
    if not isinstance(content, str):
        raise DocumentValidationError(
            f"content of document {doc_id!r} must be str, got {type(content).__name__}"
        )
    if metadata is None:
        metadata = {}
    elif not isinstance(metadata, Mapping):
        raise DocumentValidationError(
            f"metadata of document {doc_id!r} must be a mapping, got {type(metadata).__name__}"
        )

    return doc_id, content, copy.deepcopy(dict(metadata))
