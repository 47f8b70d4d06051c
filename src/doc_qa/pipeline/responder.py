"""Query responder: embed a question and return the nearest stored chunks."""

from __future__ import annotations

import logging

from langchain_core.embeddings import Embeddings

from doc_qa.errors import describe
from doc_qa.ingestion.embedder import is_credential_error
from doc_qa.pipeline.models import NO_MATCHES_MESSAGE, OutcomeKind, QueryOutcome
from doc_qa.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3


def unique_contents(contents: list[str]) -> list[str]:
    """Drop exact duplicates, keeping first-seen order."""
    return list(dict.fromkeys(contents))


class QueryResponder:
    """Answer free-text queries by similarity search.

    Parameters
    ----------
    embeddings:
        Embedding client; ``embed_query`` is called once per query.
    store:
        Vector store searched for the nearest records.
    top_k:
        Number of records requested per query.
    """

    def __init__(self, embeddings: Embeddings, store: VectorStoreBase, *, top_k: int = DEFAULT_TOP_K) -> None:
        self._embeddings = embeddings
        self._store = store
        self.top_k = top_k

    def respond(self, query: str) -> QueryOutcome:
        """Return the unique contents of the *top_k* nearest records.

        An empty *query* is skipped without touching either service.
        Failures are not retried; they come back as a ``SERVICE_ERROR``
        outcome whose message starts with ``"Error: "``.
        """
        if not query:
            return QueryOutcome(kind=OutcomeKind.SKIPPED)

        try:
            vector = self._embeddings.embed_query(query)
            hits = self._store.similarity_search(vector, k=self.top_k)
        except Exception as exc:
            logger.error("Query failed: %s", exc, exc_info=True)
            kind = OutcomeKind.CONFIGURATION_ERROR if is_credential_error(exc) else OutcomeKind.SERVICE_ERROR
            return QueryOutcome(kind=kind, message=f"Error: {describe(exc)}")

        if not hits:
            return QueryOutcome(kind=OutcomeKind.NO_RESULTS, message=NO_MATCHES_MESSAGE)

        contents = unique_contents([hit.content for hit in hits])
        logger.debug("Query matched %d record(s), %d unique", len(hits), len(contents))
        return QueryOutcome(kind=OutcomeKind.SUCCESS, message="\n\n".join(contents), contents=contents)
