"""In-memory stand-ins for the embedding service and the vector store."""

from __future__ import annotations

from langchain_core.embeddings import Embeddings

from doc_qa.errors import StorageServiceError
from doc_qa.retrieval.base import VectorStoreBase
from doc_qa.retrieval.models import SearchHit, StoredRecord


class FakeEmbeddings(Embeddings):
    """Deterministic embeddings that record every call.

    Parameters
    ----------
    dim:
        Length of every returned vector.
    fail_on_call:
        1-based ``embed_documents`` call number that raises instead.
    """

    def __init__(self, dim: int = 4, fail_on_call: int | None = None, error: Exception | None = None) -> None:
        self.dim = dim
        self.fail_on_call = fail_on_call
        self.error = error or RuntimeError("embedding service unavailable")
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def _vector(self, text: str) -> list[float]:
        return [float(len(text))] + [0.0] * (self.dim - 1)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        if self.fail_on_call is not None and len(self.document_calls) == self.fail_on_call:
            raise self.error
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        if self.fail_on_call is not None:
            raise self.error
        return self._vector(text)


class FakeVectorStore(VectorStoreBase):
    """In-memory fake that stores records and returns canned hits."""

    def __init__(
        self,
        hits: list[SearchHit] | None = None,
        fail_on_insert: int | None = None,
        search_error: Exception | None = None,
    ) -> None:
        super().__init__("test-collection")
        self.hits = hits or []
        self.fail_on_insert = fail_on_insert
        self.search_error = search_error
        self.records: list[StoredRecord] = []
        self.insert_attempts = 0
        self.searches: list[tuple[list[float], int]] = []

    def insert(self, record: StoredRecord) -> None:
        self.insert_attempts += 1
        if self.fail_on_insert is not None and self.insert_attempts == self.fail_on_insert:
            raise StorageServiceError("duplicate key value violates unique constraint")
        self.records.append(record)

    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[SearchHit]:
        self.searches.append((query_embedding, k))
        if self.search_error is not None:
            raise self.search_error
        return self.hits[:k]

    def health_check(self) -> bool:
        return True
