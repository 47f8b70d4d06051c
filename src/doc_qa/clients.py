"""External service clients, constructed once and passed by reference.

Usage::

    from doc_qa.clients import create_clients
    from doc_qa.config import get_settings

    clients = create_clients(get_settings())
    uploader = BatchUploader(clients.embeddings, clients.store)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from langchain_core.embeddings import Embeddings

from doc_qa.config import Settings, VectorBackend
from doc_qa.ingestion.embedder import get_embedding_function
from doc_qa.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceClients:
    """The embedding client and vector store shared by every operation."""

    embeddings: Embeddings
    store: VectorStoreBase


def build_vector_store(settings: Settings) -> VectorStoreBase:
    """Return the vector store selected by ``settings.vector_backend``."""
    if settings.vector_backend is VectorBackend.CHROMA:
        from doc_qa.retrieval.chroma_store import ChromaVectorStore

        logger.info(
            "Connecting to Chroma at %s:%d (collection %r)",
            settings.chroma_host,
            settings.chroma_port,
            settings.chroma_collection,
        )
        return ChromaVectorStore(
            settings.chroma_collection,
            host=settings.chroma_host,
            port=settings.chroma_port,
        )

    from doc_qa.retrieval.supabase_store import SupabaseVectorStore

    logger.info("Connecting to Supabase at %s (table %r)", settings.supabase_url, settings.supabase_table)
    return SupabaseVectorStore.from_credentials(
        settings.supabase_url,
        settings.supabase_key,
        table=settings.supabase_table,
        match_function=settings.supabase_match_function,
    )


def create_clients(settings: Settings) -> ServiceClients:
    """Validate credentials and open the service clients.

    Raises
    ------
    ConfigurationError
        When a service URL or API key is missing.
    """
    settings.validate_credentials()
    return ServiceClients(
        embeddings=get_embedding_function(settings),
        store=build_vector_store(settings),
    )
