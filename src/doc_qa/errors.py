"""Exception hierarchy shared by the ingestion and query layers."""

from __future__ import annotations


class DocQAError(Exception):
    """Base class for every error raised by :mod:`doc_qa`."""


class ConfigurationError(DocQAError):
    """A required setting (service URL or key) is missing or invalid."""


class ServiceError(DocQAError):
    """An external service (embedding or storage) call failed."""


class EmbeddingServiceError(ServiceError):
    pass


class StorageServiceError(ServiceError):
    pass


class UploadFailedError(ServiceError):
    """An upload was aborted part-way.

    Attributes
    ----------
    persisted:
        Number of records written before the failure. They are not rolled back.
    batch_number:
        1-based number of the batch that failed.
    """

    def __init__(self, message: str, *, persisted: int, batch_number: int) -> None:
        super().__init__(message)
        self.persisted = persisted
        self.batch_number = batch_number


class InvalidDocumentError(DocQAError):
    """An uploaded file could not be turned into documents."""


class UnsupportedFileError(InvalidDocumentError):
    """The uploaded file is neither a PDF nor a plain-text file."""


class OperationInProgressError(DocQAError):
    """Another operation of the same kind is still running."""


def describe(exc: BaseException) -> str:
    """Return the most human-readable message an exception carries."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__
