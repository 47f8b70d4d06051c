"""Document loaders: turn an uploaded file into LangChain documents."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from langchain_community.document_loaders import PyPDFLoader, TextLoader
from langchain_core.documents import Document

from doc_qa.errors import InvalidDocumentError, UnsupportedFileError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".txt")


def file_kind(file_name: str) -> str:
    """Return ``"pdf"`` or ``"txt"`` for *file_name*.

    Raises
    ------
    UnsupportedFileError
        When the extension is not one of :data:`SUPPORTED_EXTENSIONS`.
    """
    suffix = Path(file_name).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(
            f"Unsupported file type {suffix or '(none)'!r}; expected one of "
            f"{', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return suffix[1:]


def load_pdf(path: str | Path, *, source: str | None = None) -> list[Document]:
    """Load a PDF file, one document per page.

    *source* replaces the ``source`` metadata (by default the file path)
    so that chunks remember the name the user uploaded.
    """
    documents = PyPDFLoader(str(path)).load()
    if source is not None:
        for doc in documents:
            doc.metadata["source"] = source
    return documents


def load_text(path: str | Path, *, source: str | None = None) -> list[Document]:
    """Load a UTF-8 text file as a single document."""
    documents = TextLoader(str(path), encoding="utf-8").load()
    if source is not None:
        for doc in documents:
            doc.metadata["source"] = source
    return documents


@contextmanager
def _spooled(data: bytes, suffix: str) -> Iterator[str]:
    """Write *data* to a temporary file and yield its path."""
    fd, tmp_path = tempfile.mkstemp(suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        yield tmp_path
    finally:
        os.unlink(tmp_path)


def load_upload(file_name: str, data: bytes) -> list[Document]:
    """Load the raw bytes of an uploaded ``.pdf`` or ``.txt`` file.

    Parameters
    ----------
    file_name:
        Name of the file as chosen by the user; selects the loader.
    data:
        File contents.  Undecodable bytes in a text file are replaced.

    Returns
    -------
    list[Document]
        Per-page documents for a PDF, a single document for a text file.
    """
    kind = file_kind(file_name)
    if kind == "txt":
        # TextLoader decodes strictly, so repair the bytes before spooling.
        data = data.decode("utf-8", errors="replace").encode("utf-8")
        loader = load_text
    else:
        loader = load_pdf

    # The LangChain loaders read from a path, so spill the upload to a temp file.
    with _spooled(data, f".{kind}") as tmp_path:
        try:
            documents = loader(tmp_path, source=file_name)
        except Exception as exc:
            raise InvalidDocumentError(f"Could not read {kind.upper()} {file_name!r}: {exc}") from exc

    logger.info("Loaded %d document(s) from %s", len(documents), file_name)
    return documents
