"""Note loaders — thin wrappers around LangChain document loaders."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import DirectoryLoader, TextLoader

from note_chunker.config import settings

if TYPE_CHECKING:
    from langchain_core.documents import Document


def load_notes(path: str | Path, glob: str | None = None) -> list[Document]:
    """Recursively load all markdown notes under *path*.

    Parameters
    ----------
    path:
        Root directory of the vault.
    glob:
        File-matching pattern forwarded to ``DirectoryLoader``.  Defaults
        to ``settings.notes_glob``.

    Returns
    -------
    list[Document]
        One document per note, sorted by ``metadata["source"]`` so repeated
        runs see notes in the same order.
    """
    loader = DirectoryLoader(
        str(path),
        glob=glob or settings.notes_glob,
        loader_cls=TextLoader,  # type: ignore[arg-type]
        loader_kwargs={"encoding": "utf-8"},
        show_progress=False,
        use_multithreading=True,
    )
    return sorted(loader.load(), key=lambda doc: str(doc.metadata.get("source", "")))


def load_note(path: str | Path) -> list[Document]:
    """Load a single markdown note."""
    return TextLoader(str(path), encoding="utf-8").load()
