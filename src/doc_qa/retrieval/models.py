"""Domain models for persisted records and search hits."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StoredRecord(BaseModel):
    """One chunk as written to the vector store.

    Attributes
    ----------
    content:
        The chunk text.
    metadata:
        Source file name, chunk position and inherited document metadata.
    embedding:
        Dense vector computed for ``content``.
    """

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    embedding: list[float]


class SearchHit(BaseModel):
    """A stored record returned by similarity search, most similar first."""

    content: str
    score: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    id: str | None = None
