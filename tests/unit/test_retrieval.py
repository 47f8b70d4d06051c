"""Unit tests for the retrieval layer: models and the concrete backends."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from doc_qa.errors import StorageServiceError
from doc_qa.retrieval.chroma_store import ChromaVectorStore, _flatten_metadata
from doc_qa.retrieval.models import SearchHit, StoredRecord
from doc_qa.retrieval.supabase_store import SupabaseVectorStore


class _APIError(Exception):
    """Shaped like the PostgREST error: the text lives in ``.message``."""

    def __init__(self, message: str) -> None:
        super().__init__({"message": message, "code": "23505"})
        self.message = message


RECORD = StoredRecord(
    content="Revenue is recognised when earned.",
    metadata={"file_name": "gaap.pdf", "chunk_index": 0, "total_chunks": 1, "page": 3},
    embedding=[0.1, 0.2, 0.3],
)


# ── Models ─────────────────────────────────────────────────────────────


class TestModels:
    def test_record_dump_has_wire_fields(self) -> None:
        assert set(RECORD.model_dump()) == {"content", "metadata", "embedding"}

    def test_hit_defaults(self) -> None:
        hit = SearchHit(content="text")
        assert hit.score is None
        assert hit.metadata == {}


# ── Supabase ───────────────────────────────────────────────────────────


@pytest.fixture()
def supabase_client() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def supabase_store(supabase_client: MagicMock) -> SupabaseVectorStore:
    return SupabaseVectorStore(supabase_client)


class TestSupabaseVectorStore:
    def test_insert_writes_one_row(self, supabase_client: MagicMock, supabase_store: SupabaseVectorStore) -> None:
        supabase_store.insert(RECORD)
        supabase_client.table.assert_called_with("documents")
        supabase_client.table.return_value.insert.assert_called_once_with(RECORD.model_dump())
        supabase_client.table.return_value.insert.return_value.execute.assert_called_once()

    def test_insert_failure_carries_service_message(
        self, supabase_client: MagicMock, supabase_store: SupabaseVectorStore
    ) -> None:
        supabase_client.table.return_value.insert.return_value.execute.side_effect = _APIError(
            "duplicate key value violates unique constraint"
        )
        with pytest.raises(StorageServiceError, match="^duplicate key value violates unique constraint$"):
            supabase_store.insert(RECORD)

    def test_search_calls_match_rpc(self, supabase_client: MagicMock, supabase_store: SupabaseVectorStore) -> None:
        supabase_client.rpc.return_value.execute.return_value = MagicMock(
            data=[
                {"id": 7, "content": "first", "metadata": {"page": 1}, "similarity": 0.91},
                {"id": 9, "content": "second", "metadata": None, "similarity": 0.55},
            ]
        )
        hits = supabase_store.similarity_search([0.1, 0.2], k=3)

        supabase_client.rpc.assert_called_once_with(
            "match_documents", {"query_embedding": [0.1, 0.2], "match_count": 3}
        )
        assert [h.content for h in hits] == ["first", "second"]
        assert hits[0].id == "7"
        assert hits[0].score == 0.91
        assert hits[1].metadata == {}

    def test_search_with_no_rows(self, supabase_client: MagicMock, supabase_store: SupabaseVectorStore) -> None:
        supabase_client.rpc.return_value.execute.return_value = MagicMock(data=[])
        assert supabase_store.similarity_search([0.0]) == []

    def test_search_failure_raises(self, supabase_client: MagicMock, supabase_store: SupabaseVectorStore) -> None:
        supabase_client.rpc.return_value.execute.side_effect = _APIError("permission denied for function")
        with pytest.raises(StorageServiceError, match="permission denied"):
            supabase_store.similarity_search([0.0])

    def test_custom_table_and_function(self, supabase_client: MagicMock) -> None:
        store = SupabaseVectorStore(supabase_client, table="chunks", match_function="match_chunks")
        supabase_client.rpc.return_value.execute.return_value = MagicMock(data=[])
        store.insert(RECORD)
        store.similarity_search([1.0], k=5)
        supabase_client.table.assert_called_with("chunks")
        assert supabase_client.rpc.call_args[0][0] == "match_chunks"

    def test_health_check(self, supabase_client: MagicMock, supabase_store: SupabaseVectorStore) -> None:
        assert supabase_store.health_check() is True
        supabase_client.table.return_value.select.side_effect = RuntimeError("unreachable")
        assert supabase_store.health_check() is False

    def test_from_credentials_creates_client(self) -> None:
        with patch("doc_qa.retrieval.supabase_store.create_client") as create:
            store = SupabaseVectorStore.from_credentials("https://x.supabase.co", "anon-key", table="docs")
        create.assert_called_once_with("https://x.supabase.co", "anon-key")
        assert store.collection_name == "docs"


# ── Chroma ─────────────────────────────────────────────────────────────


@pytest.fixture()
def chroma_client() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def chroma_store(chroma_client: MagicMock) -> ChromaVectorStore:
    return ChromaVectorStore("test", client=chroma_client)


class TestChromaVectorStore:
    def test_flatten_metadata_drops_nested_values(self) -> None:
        assert _flatten_metadata({"a": 1, "b": "x", "c": [1], "d": {"e": 1}, "f": None}) == {"a": 1, "b": "x"}

    def test_insert_adds_document(self, chroma_client: MagicMock, chroma_store: ChromaVectorStore) -> None:
        chroma_store.insert(RECORD)
        collection = chroma_client.get_or_create_collection.return_value
        kwargs = collection.add.call_args.kwargs
        assert kwargs["documents"] == [RECORD.content]
        assert kwargs["embeddings"] == [RECORD.embedding]
        assert kwargs["metadatas"] == [RECORD.metadata]
        assert len(kwargs["ids"]) == 1

    def test_insert_failure_raises(self, chroma_client: MagicMock, chroma_store: ChromaVectorStore) -> None:
        chroma_client.get_or_create_collection.return_value.add.side_effect = ValueError("dimension mismatch")
        with pytest.raises(StorageServiceError, match="dimension mismatch"):
            chroma_store.insert(RECORD)

    def test_search_converts_distances(self, chroma_client: MagicMock, chroma_store: ChromaVectorStore) -> None:
        chroma_client.get_or_create_collection.return_value.query.return_value = {
            "ids": [["a", "b"]],
            "documents": [["near", "far"]],
            "metadatas": [[{"page": 1}, None]],
            "distances": [[0.0, 1.0]],
        }
        hits = chroma_store.similarity_search([0.5], k=2)
        assert [h.content for h in hits] == ["near", "far"]
        assert hits[0].score == 1.0
        assert hits[1].score == 0.5
        assert hits[1].metadata == {}

    def test_health_check(self, chroma_client: MagicMock, chroma_store: ChromaVectorStore) -> None:
        assert chroma_store.health_check() is True
        chroma_client.heartbeat.side_effect = ConnectionError("refused")
        assert chroma_store.health_check() is False


def test_backends_are_importable_from_package() -> None:
    from doc_qa import retrieval

    assert retrieval.ChromaVectorStore is ChromaVectorStore
    assert retrieval.SupabaseVectorStore is SupabaseVectorStore
    with pytest.raises(AttributeError):
        retrieval.PineconeVectorStore  # noqa: B018
