"""
Ingestion — note loading, markdown parsing, chunking and re-index planning.

This module is the I/O-facing side of the chunker: it turns raw markdown
notes (from disk or LangChain documents) into chunks and records ready for
an external embedding and indexing step.
"""
