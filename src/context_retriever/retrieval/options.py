"""
Retriever options - the explicit configuration for one retrieve() call.

Every recognized option is a declared field with a default. Unknown option
names are rejected instead of being silently ignored.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchMethod(str, Enum):
    """Which raw search(es) feed a retrieve() call."""

    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    HYBRID = "hybrid"


DEFAULT_TOP_K = 5


class RetrieverOptions(BaseModel):
    """Options for Retriever.retrieve()."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    top_k: int = Field(
        default=DEFAULT_TOP_K,
        description="Maximum number of documents returned; 0 or less returns none",
    )

    similarity_threshold: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Documents scoring strictly below this are dropped; 0 means no floor",
    )

    include_metadata: bool = Field(
        default=False,
        description="Keep each document's metadata in the result",
    )

    search_method: SearchMethod = Field(
        default=SearchMethod.SEMANTIC,
        description="semantic (embeddings), keyword (term overlap) or hybrid (weighted fusion)",
    )
