"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

import chromadb

from doc_qa.errors import StorageServiceError, describe
from doc_qa.retrieval.base import VectorStoreBase
from doc_qa.retrieval.models import SearchHit, StoredRecord

logger = logging.getLogger(__name__)


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
    """Keep only the scalar values Chroma accepts as metadata."""
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    client:
        A Chroma client; when *None* an ``HttpClient`` is opened on
        *host*:*port*.
    """

    def __init__(
        self,
        collection_name: str = "documents",
        *,
        host: str = "localhost",
        port: int = 8000,
        client: Any = None,
    ) -> None:
        super().__init__(collection_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(collection_name)

    def insert(self, record: StoredRecord) -> None:
        try:
            self._collection.add(
                ids=[uuid4().hex],
                embeddings=[record.embedding],
                documents=[record.content],
                metadatas=[_flatten_metadata(record.metadata)],
            )
        except Exception as exc:
            raise StorageServiceError(describe(exc)) from exc

    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[SearchHit]:
        try:
            results = self._collection.query(
                query_embeddings=[query_embedding],
                n_results=k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise StorageServiceError(describe(exc)) from exc

        hits: list[SearchHit] = []
        ids = results.get("ids", [[]])[0]
        docs = results.get("documents", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]

        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            # Chroma returns L2 distances; convert to a 0-1 similarity score.
            hits.append(
                SearchHit(
                    id=doc_id,
                    content=content or "",
                    score=1.0 / (1.0 + dist),
                    metadata=meta or {},
                )
            )
        return hits

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
