"""Embedding client construction: single place to swap providers.

Supports two providers:

1. **OpenAI** (default): hosted embeddings, requires ``OPENAI_API_KEY``.
2. **HuggingFace**: a local sentence-transformer, useful for development
   without network access.

Both are returned as :class:`langchain_core.embeddings.Embeddings`, whose
``embed_query`` / ``embed_documents`` methods are the only calls the
pipeline makes.
"""

from __future__ import annotations

import logging

import openai
from langchain_core.embeddings import Embeddings

from doc_qa.config import EmbeddingProvider, Settings

logger = logging.getLogger(__name__)


def get_embedding_function(settings: Settings) -> Embeddings:
    """Return the configured embeddings client."""
    if settings.embedding_provider is EmbeddingProvider.HUGGINGFACE:
        from langchain_huggingface import HuggingFaceEmbeddings

        logger.info("Using local HuggingFace embeddings: %s", settings.embedding_model)
        return HuggingFaceEmbeddings(model_name=settings.embedding_model)

    from langchain_openai import OpenAIEmbeddings

    logger.info("Using OpenAI embeddings: %s", settings.embedding_model)
    return OpenAIEmbeddings(model=settings.embedding_model, api_key=settings.openai_api_key)


def is_credential_error(exc: BaseException) -> bool:
    """Return ``True`` when *exc* means the embedding API key was rejected."""
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))
