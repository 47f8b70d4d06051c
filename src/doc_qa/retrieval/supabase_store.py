"""Supabase (pgvector) implementation of the vector-store abstraction.

Records go into a plain table with ``content``, ``metadata`` (jsonb) and
``embedding`` (vector) columns.  Search goes through a Postgres function
exposed as an RPC, by default ``match_documents(query_embedding,
match_count)``, returning rows with ``content``, ``metadata`` and
``similarity``.
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from doc_qa.errors import StorageServiceError, describe
from doc_qa.retrieval.base import VectorStoreBase
from doc_qa.retrieval.models import SearchHit, StoredRecord

logger = logging.getLogger(__name__)


class SupabaseVectorStore(VectorStoreBase):
    """Supabase-backed vector store.

    Parameters
    ----------
    client:
        An already constructed ``supabase.Client``.
    table:
        Table receiving inserted records.
    match_function:
        Name of the similarity-search RPC.
    """

    def __init__(
        self,
        client: Client,
        *,
        table: str = "documents",
        match_function: str = "match_documents",
    ) -> None:
        super().__init__(table)
        self._client = client
        self._match_function = match_function

    @classmethod
    def from_credentials(cls, url: str, key: str, **kwargs: Any) -> SupabaseVectorStore:
        """Connect to the project at *url* with API *key*."""
        return cls(create_client(url, key), **kwargs)

    def insert(self, record: StoredRecord) -> None:
        try:
            self._client.table(self.collection_name).insert(record.model_dump()).execute()
        except Exception as exc:
            raise StorageServiceError(describe(exc)) from exc

    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[SearchHit]:
        try:
            response = self._client.rpc(
                self._match_function,
                {"query_embedding": query_embedding, "match_count": k},
            ).execute()
        except Exception as exc:
            raise StorageServiceError(describe(exc)) from exc

        return [
            SearchHit(
                content=row.get("content") or "",
                score=row.get("similarity"),
                metadata=row.get("metadata") or {},
                id=str(row["id"]) if row.get("id") is not None else None,
            )
            for row in response.data or []
        ]

    def health_check(self) -> bool:
        try:
            self._client.table(self.collection_name).select("id").limit(1).execute()
            return True
        except Exception:
            logger.warning("Supabase health-check failed", exc_info=True)
            return False
