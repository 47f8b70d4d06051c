"""Text chunking strategies.

Two strategies are available:

* **structural** (default): LangChain's ``RecursiveCharacterTextSplitter``
  cuts on paragraph, line and word boundaries down to ``chunk_size``
  characters with a fixed overlap.
* **sentence**: the text is sanitised, cut on ``.``/``!``/``?`` and
  sentences are packed greedily under an estimated-token ceiling.
  A sentence that alone exceeds the ceiling becomes its own chunk; it is
  not subdivided further.
"""

from __future__ import annotations

import math
import re

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from doc_qa.config import ChunkingStrategy
from doc_qa.ingestion.normalizer import sanitize_text

DEFAULT_SEPARATORS = ["\n\n", "\n", " ", ""]
DEFAULT_MAX_TOKENS = 2000
CHARS_PER_TOKEN = 4

_SENTENCE_END = re.compile(r"[.!?]+")


def estimate_tokens(text: str) -> int:
    """Rough token estimate (1 token ≈ 4 characters)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def chunk_documents(
    documents: list[Document],
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[Document]:
    """Split *documents* into smaller chunks for embedding.

    Parameters
    ----------
    documents:
        Source documents produced by a loader.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.

    Returns
    -------
    list[Document]
        Chunked documents ready for embedding, carrying their source metadata.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=DEFAULT_SEPARATORS,
    )
    return splitter.split_documents(documents)


def split_sentences(text: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> list[str]:
    """Pack the sentences of *text* into chunks under *max_tokens*.

    The text is passed through :func:`sanitize_text` first. Every emitted
    sentence gets a ``.`` re-appended, whatever terminator it had.
    """
    chunks: list[str] = []
    current = ""
    current_tokens = 0

    for raw in _SENTENCE_END.split(sanitize_text(text)):
        sentence = raw.strip()
        if not sentence:
            continue

        sentence_tokens = estimate_tokens(sentence)
        if current_tokens + sentence_tokens < max_tokens:
            current += (" " if current else "") + sentence + "."
            current_tokens += sentence_tokens
        else:
            if current:
                chunks.append(current)
            current = sentence + "."
            current_tokens = sentence_tokens

    if current:
        chunks.append(current)
    return chunks


def chunk_documents_by_sentence(
    documents: list[Document],
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> list[Document]:
    """Apply :func:`split_sentences` to each document, keeping its metadata."""
    return [
        Document(page_content=text, metadata=dict(doc.metadata))
        for doc in documents
        for text in split_sentences(doc.page_content, max_tokens=max_tokens)
    ]


def split_documents(
    documents: list[Document],
    strategy: ChunkingStrategy = ChunkingStrategy.STRUCTURAL,
    *,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> list[Document]:
    """Chunk *documents* with the selected *strategy*."""
    if strategy is ChunkingStrategy.SENTENCE:
        return chunk_documents_by_sentence(documents, max_tokens=max_tokens)
    return chunk_documents(documents, chunk_size=chunk_size, chunk_overlap=chunk_overlap)
