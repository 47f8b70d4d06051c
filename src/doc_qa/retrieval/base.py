"""Abstract base class for vector-store backends.

Adding a new backend (Pinecone, Weaviate, Qdrant …) only requires
subclassing :class:`VectorStoreBase` and implementing the three abstract
methods.  The upload and query pipelines are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from doc_qa.retrieval.models import SearchHit, StoredRecord


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the table / collection / index.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    @abstractmethod
    def insert(self, record: StoredRecord) -> None:
        """Persist a single *record*.

        Raises
        ------
        StorageServiceError
            When the backend rejects the write. The message is the
            backend's own description of the failure.
        """
        ...

    @abstractmethod
    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[SearchHit]:
        """Return up to *k* records nearest to *query_embedding*.

        Results are ordered by decreasing similarity.

        Raises
        ------
        StorageServiceError
            When the search call fails.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
