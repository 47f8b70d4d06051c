"""
Ingestion: document loading, normalisation, chunking, and embedding setup.

This module converts an uploaded PDF or text file into ordered chunks
ready for the batch uploader.
"""
