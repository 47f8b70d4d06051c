"""
Pipeline: the upload and query operations.

Public API
----------
- :class:`BatchUploader`: embed and persist chunks batch by batch.
- :class:`QueryResponder`: embed a query and collect the nearest chunks.
- :class:`Outcome` and friends: typed results of user operations.
"""

from doc_qa.pipeline.models import (
    NO_MATCHES_MESSAGE,
    Outcome,
    OutcomeKind,
    QueryOutcome,
    UploadOutcome,
    UploadProgress,
    UploadReport,
)
from doc_qa.pipeline.responder import QueryResponder
from doc_qa.pipeline.uploader import BatchUploader

__all__ = [
    "NO_MATCHES_MESSAGE",
    "BatchUploader",
    "Outcome",
    "OutcomeKind",
    "QueryOutcome",
    "QueryResponder",
    "UploadOutcome",
    "UploadProgress",
    "UploadReport",
]
