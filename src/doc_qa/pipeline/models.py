"""Progress reports and typed operation outcomes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

NO_MATCHES_MESSAGE = "No matching documents found."


class UploadProgress(BaseModel):
    """Cumulative progress reported after each completed batch."""

    processed: int
    total: int

    @property
    def message(self) -> str:
        return f"{self.processed} of {self.total} chunks processed"


class UploadReport(BaseModel):
    """Summary of a fully successful upload."""

    file_name: str
    total_chunks: int
    batches: int

    @property
    def message(self) -> str:
        return f"File uploaded and processed successfully! Created {self.total_chunks} chunks."


class OutcomeKind(str, Enum):
    """What happened to a user-triggered operation."""

    SUCCESS = "success"
    NO_RESULTS = "no_results"
    SKIPPED = "skipped"
    BUSY = "busy"
    INVALID_INPUT = "invalid_input"
    CONFIGURATION_ERROR = "configuration_error"
    SERVICE_ERROR = "service_error"

    @property
    def is_error(self) -> bool:
        return self in (
            OutcomeKind.BUSY,
            OutcomeKind.INVALID_INPUT,
            OutcomeKind.CONFIGURATION_ERROR,
            OutcomeKind.SERVICE_ERROR,
        )


class Outcome(BaseModel):
    """Result of one operation: a kind to branch on and a message to display."""

    kind: OutcomeKind
    message: str = ""

    @property
    def ok(self) -> bool:
        return not self.kind.is_error


class UploadOutcome(Outcome):
    total_chunks: int = 0
    progress: list[str] = Field(default_factory=list)


class QueryOutcome(Outcome):
    contents: list[str] = Field(default_factory=list)
