"""Content hashing for derived chunk identities."""

from __future__ import annotations

import hashlib


def content_hash(text: str) -> str:
    """Return the SHA-256 digest of *text* as 64 lowercase hex characters.

    The text is hashed exactly as given (UTF-8 encoded).  Any normalisation
    must happen before this call; see
    :func:`note_chunker.chunking.embedding_text.normalize_text`.
    """
    if not isinstance(text, str):
        raise TypeError(f"content_hash() expects str, got {type(text).__name__}")
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
