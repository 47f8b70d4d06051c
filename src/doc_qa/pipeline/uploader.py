"""Batch uploader: embed chunks in fixed-size batches and persist them.

Batches are processed strictly one after another.  Within a batch the
embedding service is called once for all texts, then every record is
inserted sequentially.  The first failure aborts the whole upload;
records already written are left in place.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from doc_qa.errors import (
    ConfigurationError,
    EmbeddingServiceError,
    ServiceError,
    StorageServiceError,
    UploadFailedError,
    describe,
)
from doc_qa.ingestion.embedder import is_credential_error
from doc_qa.pipeline.models import UploadProgress, UploadReport
from doc_qa.retrieval.base import VectorStoreBase
from doc_qa.retrieval.models import StoredRecord

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

ProgressCallback = Callable[[UploadProgress], None]


class BatchUploader:
    """Persist chunk documents with their embeddings.

    Parameters
    ----------
    embeddings:
        Embedding client; ``embed_documents`` is called once per batch.
    store:
        Vector store receiving one ``insert`` per chunk.
    batch_size:
        Number of chunks per embedding request.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        store: VectorStoreBase,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._embeddings = embeddings
        self._store = store
        self.batch_size = batch_size

    def upload(
        self,
        chunks: list[Document],
        file_name: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadReport:
        """Embed and store *chunks* in order.

        Parameters
        ----------
        chunks:
            Ordered chunk documents of one uploaded file.
        file_name:
            Original file name, recorded in every record's metadata.
        on_progress:
            Called after each successful batch with cumulative progress.

        Returns
        -------
        UploadReport
            Total chunk and batch counts.

        Raises
        ------
        UploadFailedError
            On the first embedding or storage failure.
        ConfigurationError
            When the embedding service rejects the API key.
        """
        total = len(chunks)
        persisted = 0
        batches = 0
        dimension: int | None = None

        logger.info("Uploading %d chunks from %s in batches of %d", total, file_name, self.batch_size)

        for start in range(0, total, self.batch_size):
            batch = chunks[start : start + self.batch_size]
            batch_number = batches + 1
            try:
                vectors = self._embed_batch(batch)
                for offset, (chunk, vector) in enumerate(zip(batch, vectors)):
                    if dimension is None:
                        dimension = len(vector)
                    elif len(vector) != dimension:
                        raise EmbeddingServiceError(
                            f"Embedding dimension changed from {dimension} to {len(vector)}"
                        )
                    self._insert_record(
                        content=chunk.page_content,
                        metadata={
                            "file_name": file_name,
                            "chunk_index": start + offset,
                            "total_chunks": total,
                            **chunk.metadata,
                        },
                        embedding=vector,
                    )
                    persisted += 1
            except ServiceError as exc:
                logger.error(
                    "Upload of %s aborted in batch %d after %d of %d records: %s",
                    file_name,
                    batch_number,
                    persisted,
                    total,
                    exc,
                )
                raise UploadFailedError(
                    describe(exc), persisted=persisted, batch_number=batch_number
                ) from exc

            batches = batch_number
            progress = UploadProgress(processed=min(start + self.batch_size, total), total=total)
            logger.info("  %s", progress.message)
            if on_progress is not None:
                on_progress(progress)

        return UploadReport(file_name=file_name, total_chunks=total, batches=batches)

    def _embed_batch(self, batch: list[Document]) -> list[list[float]]:
        texts = [doc.page_content for doc in batch]
        try:
            vectors = self._embeddings.embed_documents(texts)
        except Exception as exc:
            if is_credential_error(exc):
                raise ConfigurationError(f"Embedding service rejected the API key: {describe(exc)}") from exc
            raise EmbeddingServiceError(describe(exc)) from exc
        if len(vectors) != len(texts):
            raise EmbeddingServiceError(
                f"Embedding service returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors

    def _insert_record(self, content: str, metadata: dict[str, Any], embedding: list[float]) -> None:
        try:
            self._store.insert(StoredRecord(content=content, metadata=metadata, embedding=embedding))
        except ServiceError:
            raise
        except Exception as exc:
            raise StorageServiceError(describe(exc)) from exc
