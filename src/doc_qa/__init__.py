"""doc_qa: upload documents, embed their chunks, and query them by similarity."""

__version__ = "0.1.0"
