"""FastAPI application exposing document upload and query over HTTP."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, File, Request, Response, UploadFile
from pydantic import BaseModel

from doc_qa.config import Settings, get_settings
from doc_qa.pipeline.models import Outcome, OutcomeKind, QueryOutcome, UploadOutcome
from doc_qa.service import DocumentQAService

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    OutcomeKind.SUCCESS: 200,
    OutcomeKind.NO_RESULTS: 200,
    OutcomeKind.SKIPPED: 200,
    OutcomeKind.BUSY: 409,
    OutcomeKind.INVALID_INPUT: 400,
    OutcomeKind.CONFIGURATION_ERROR: 500,
    OutcomeKind.SERVICE_ERROR: 502,
}


# ── Request / Response schemas ────────────────────────────────────────
class QueryRequest(BaseModel):
    """Incoming question from the user."""

    query: str


class StatusResponse(BaseModel):
    upload_in_progress: bool
    query_in_progress: bool
    message: str = ""


def status_code_for(outcome: Outcome) -> int:
    return _STATUS_CODES[outcome.kind]


def create_app(service: DocumentQAService | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Parameters
    ----------
    service:
        A ready service, mainly for tests.  When *None* the service and its
        clients are created at startup from *settings* (or the environment);
        missing credentials then abort startup with ``ConfigurationError``.
    settings:
        Settings used when *service* is not given.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if service is not None:
            app.state.service = service
        else:
            cfg = settings or get_settings()
            logging.basicConfig(
                level=cfg.log_level.upper(),
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )
            app.state.service = DocumentQAService.from_settings(cfg)
            logger.info("Document QA service ready")
        yield

    app = FastAPI(
        title="Document QA API",
        version="0.1.0",
        description="Upload PDF or text documents and query them by similarity search.",
        lifespan=lifespan,
    )

    # ── Routes ────────────────────────────────────────────────────────
    @app.get("/health")
    def health(request: Request) -> dict[str, str]:
        """Liveness probe, plus vector-store reachability."""
        svc: DocumentQAService = request.app.state.service
        store_ok = svc.clients.store.health_check()
        return {"status": "ok", "vector_store": "ok" if store_ok else "unreachable"}

    @app.get("/status", response_model=StatusResponse)
    def status(request: Request) -> StatusResponse:
        """Busy flags and the latest upload progress message."""
        return StatusResponse(**request.app.state.service.status())

    @app.post("/upload", response_model=UploadOutcome)
    def upload(request: Request, response: Response, file: UploadFile = File(...)) -> UploadOutcome:
        """Chunk, embed and store one ``.pdf`` or ``.txt`` file."""
        svc: DocumentQAService = request.app.state.service
        # Reading one byte past the limit is enough for the size check.
        data = file.file.read(svc.settings.max_upload_bytes + 1)
        outcome = svc.upload_file(file.filename or "", data)
        response.status_code = status_code_for(outcome)
        return outcome

    @app.post("/query", response_model=QueryOutcome)
    def query(request: Request, response: Response, body: QueryRequest) -> QueryOutcome:
        """Return the stored chunks nearest to the query."""
        svc: DocumentQAService = request.app.state.service
        outcome = svc.ask(body.query)
        response.status_code = status_code_for(outcome)
        return outcome

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
