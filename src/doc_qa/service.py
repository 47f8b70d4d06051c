"""Document QA service: the user-facing upload and query operations.

Each operation kind (upload, query) runs behind its own
:class:`OperationGate`: while one invocation is in flight, a second one of
the same kind is rejected with a ``BUSY`` outcome instead of being queued.
Every failure is converted into a typed :class:`Outcome`, so callers
branch on ``outcome.kind`` rather than on message text.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from doc_qa.clients import ServiceClients, create_clients
from doc_qa.config import Settings
from doc_qa.errors import (
    ConfigurationError,
    InvalidDocumentError,
    OperationInProgressError,
    ServiceError,
    describe,
)
from doc_qa.ingestion.chunker import split_documents
from doc_qa.ingestion.loader import load_upload
from doc_qa.pipeline.models import OutcomeKind, QueryOutcome, UploadOutcome, UploadProgress
from doc_qa.pipeline.responder import QueryResponder
from doc_qa.pipeline.uploader import BatchUploader, ProgressCallback

logger = logging.getLogger(__name__)


class OperationGate:
    """Allow at most one operation through at a time; never wait."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the gate for the duration of the ``with`` block.

        Raises
        ------
        OperationInProgressError
            When the gate is already held.
        """
        if not self._lock.acquire(blocking=False):
            raise OperationInProgressError(f"A {self.name} is already in progress")
        try:
            yield
        finally:
            self._lock.release()


class DocumentQAService:
    """Upload documents and answer queries against one set of service clients.

    Parameters
    ----------
    settings:
        Chunking, batching and limit settings.
    clients:
        Embedding client and vector store, created once per process.
    """

    def __init__(self, settings: Settings, clients: ServiceClients) -> None:
        self.settings = settings
        self.clients = clients
        self.uploader = BatchUploader(
            clients.embeddings, clients.store, batch_size=settings.upload_batch_size
        )
        self.responder = QueryResponder(
            clients.embeddings, clients.store, top_k=settings.query_top_k
        )
        self.upload_gate = OperationGate("upload")
        self.query_gate = OperationGate("query")
        self.last_upload_message = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> DocumentQAService:
        """Create the service and its clients.

        Raises
        ------
        ConfigurationError
            When a service credential is missing.
        """
        return cls(settings, create_clients(settings))

    # -- operations -----------------------------------------------------------

    def upload_file(
        self,
        file_name: str,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadOutcome:
        """Load, chunk, embed and store one uploaded file."""
        try:
            with self.upload_gate.hold():
                outcome = self._upload(file_name, data, on_progress)
        except OperationInProgressError as exc:
            logger.warning("Rejected upload of %s: %s", file_name, exc)
            return UploadOutcome(kind=OutcomeKind.BUSY, message=f"Error: {exc}")

        self.last_upload_message = outcome.message
        return outcome

    def ask(self, query: str) -> QueryOutcome:
        """Return the stored chunks nearest to *query*."""
        if not query:
            return QueryOutcome(kind=OutcomeKind.SKIPPED)
        try:
            with self.query_gate.hold():
                return self.responder.respond(query)
        except OperationInProgressError as exc:
            logger.warning("Rejected query: %s", exc)
            return QueryOutcome(kind=OutcomeKind.BUSY, message=f"Error: {exc}")

    def status(self) -> dict[str, object]:
        """Busy flags and the last upload message, for polling clients."""
        return {
            "upload_in_progress": self.upload_gate.busy,
            "query_in_progress": self.query_gate.busy,
            "message": self.last_upload_message,
        }

    # -- internals ------------------------------------------------------------

    def _upload(
        self,
        file_name: str,
        data: bytes,
        on_progress: Optional[ProgressCallback],
    ) -> UploadOutcome:
        progress: list[str] = []

        def _record(update: UploadProgress) -> None:
            progress.append(update.message)
            self.last_upload_message = f"Processing... {update.message}"
            if on_progress is not None:
                on_progress(update)

        if len(data) > self.settings.max_upload_bytes:
            return UploadOutcome(
                kind=OutcomeKind.INVALID_INPUT,
                message=f"Error: {file_name} exceeds the {self.settings.max_upload_bytes}-byte limit",
            )

        self.last_upload_message = ""
        try:
            documents = load_upload(file_name, data)
            chunks = split_documents(
                documents,
                self.settings.chunking_strategy,
                chunk_size=self.settings.chunk_size,
                chunk_overlap=self.settings.chunk_overlap,
                max_tokens=self.settings.sentence_max_tokens,
            )
            logger.info("Created %d chunks from %s", len(chunks), file_name)
            report = self.uploader.upload(chunks, file_name, on_progress=_record)
        except InvalidDocumentError as exc:
            return UploadOutcome(kind=OutcomeKind.INVALID_INPUT, message=f"Error: {exc}")
        except ConfigurationError as exc:
            return UploadOutcome(kind=OutcomeKind.CONFIGURATION_ERROR, message=f"Error: {exc}")
        except ServiceError as exc:
            return UploadOutcome(
                kind=OutcomeKind.SERVICE_ERROR,
                message=f"Error: {describe(exc)}",
                progress=progress,
            )

        return UploadOutcome(
            kind=OutcomeKind.SUCCESS,
            message=report.message,
            total_chunks=report.total_chunks,
            progress=progress,
        )
