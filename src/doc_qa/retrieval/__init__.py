"""
Retrieval: vector-store backends for persisting and searching chunks.

Public surface
--------------
- :class:`VectorStoreBase`: abstract backend (subclass for Pinecone, etc.).
- :class:`SupabaseVectorStore`: default hosted Supabase backend.
- :class:`ChromaVectorStore`: Chroma server backend.
- :class:`StoredRecord`, :class:`SearchHit`: data models.
"""

from doc_qa.retrieval.base import VectorStoreBase
from doc_qa.retrieval.models import SearchHit, StoredRecord

__all__ = [
    "ChromaVectorStore",
    "SearchHit",
    "StoredRecord",
    "SupabaseVectorStore",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import the concrete backends so their client libraries load on demand."""
    if name == "ChromaVectorStore":
        from doc_qa.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    if name == "SupabaseVectorStore":
        from doc_qa.retrieval.supabase_store import SupabaseVectorStore

        return SupabaseVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
