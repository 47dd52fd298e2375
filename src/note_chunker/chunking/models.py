"""Domain models for parsed note blocks and identified chunks."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from note_chunker.chunking import hashing
from note_chunker.chunking.embedding_text import build_embedding_text, normalize_text

if TYPE_CHECKING:
    from langchain_core.documents import Document


class BlockKind(str, Enum):
    """Block kinds produced by :func:`note_chunker.ingestion.parser.parse_markdown`.

    :attr:`Block.kind` is a plain string so that parsers may emit kinds not
    listed here; the assembler turns those into opaque chunks.
    """

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    CODE = "code"
    TABLE = "table"
    QUOTE = "quote"
    CALLOUT = "callout"
    THEMATIC_BREAK = "thematic_break"
    FRONTMATTER = "frontmatter"
    COMMENT = "comment"


class ChunkType(str, Enum):
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    LIST_GROUP = "list_group"
    CODE = "code"
    TABLE = "table"
    QUOTE = "quote"
    OPAQUE = "opaque"


class Block(BaseModel):
    """One structural block of a parsed note.

    Attributes
    ----------
    kind:
        Block kind, usually a :class:`BlockKind` value.
    text:
        Raw block content.  For headings, the title without ``#`` markers.
    level:
        Heading level (1-6); ``0`` for every other kind.
    start_line / end_line:
        1-based inclusive source lines, when known.
    children:
        Nested blocks: the items of a ``list``, or the sub-items of a
        ``list_item``.
    """

    kind: str
    text: str = ""
    level: int = 0
    start_line: int | None = None
    end_line: int | None = None
    children: list[Block] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class ExplicitAnchor(BaseModel):
    """Identity taken verbatim from a user-authored anchor."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit"] = "explicit"
    anchor: str = Field(min_length=1)

    @property
    def value(self) -> str:
        return self.anchor


class DerivedHash(BaseModel):
    """Identity derived from the hash of the chunk's embedding text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["derived"] = "derived"
    digest: str = Field(pattern=r"^[0-9a-f]{64}$")

    @property
    def value(self) -> str:
        return self.digest


ChunkIdentity = Annotated[Union[ExplicitAnchor, DerivedHash], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Chunk
# ---------------------------------------------------------------------------


def _as_list(value: Any) -> list[str]:
    """Coerce a tags / aliases value to a list of strings.

    Comma-separated strings are split; ``None`` gives an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value)]


class NoteContext(BaseModel):
    """Provenance of the note a chunk came from."""

    note_path: str = ""
    original_id: str = ""
    title: str = ""
    tags: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)

    @classmethod
    def from_metadata(
        cls,
        metadata: dict[str, Any],
        frontmatter: dict[str, Any] | None = None,
    ) -> NoteContext:
        """Build a context from LangChain document metadata.

        ``tags`` and ``aliases`` come from the note's *frontmatter* when it
        has them, else from *metadata*.
        """
        source = str(metadata.get("source", ""))
        frontmatter = frontmatter or {}
        return cls(
            note_path=source,
            original_id=str(metadata.get("original_id") or metadata.get("doc_id") or source),
            title=str(metadata.get("title") or (PurePath(source).stem if source else "")),
            tags=_as_list(frontmatter.get("tags", metadata.get("tags"))),
            aliases=_as_list(frontmatter.get("aliases", metadata.get("aliases"))),
        )


class Chunk(BaseModel):
    """An identified, embedding-ready unit of note content.

    Chunks are immutable.  ``embedding_text`` is never stored; it is
    recomputed from ``headings_path``, ``parent_item_text`` and ``text``.
    """

    model_config = ConfigDict(frozen=True)

    identity: ChunkIdentity
    chunk_type: ChunkType = ChunkType.PARAGRAPH
    headings_path: tuple[str, ...] = ()
    parent_item_text: str | None = None
    text: str
    chunk_index: int = Field(default=0, ge=0)
    list_depth: int | None = None
    item_index: int | None = None
    item_index_range: tuple[int, int] | None = None
    start_line: int | None = None
    end_line: int | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.identity.value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def embedding_text(self) -> str:
        return build_embedding_text(self.headings_path, self.parent_item_text, normalize_text(self.text))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def content_hash(self) -> str:
        """Hash of the raw chunk text, used to detect in-place edits."""
        return hashing.content_hash(self.text)

    @property
    def section(self) -> str:
        return self.headings_path[-1] if self.headings_path else ""

    @property
    def is_anchored(self) -> bool:
        return isinstance(self.identity, ExplicitAnchor)

    @model_validator(mode="after")
    def _check_derived_identity(self) -> Chunk:
        if isinstance(self.identity, DerivedHash):
            expected = hashing.content_hash(self.embedding_text)
            if self.identity.digest != expected:
                raise ValueError(
                    f"derived id {self.identity.digest[:12]}… does not match the "
                    f"embedding text hash {expected[:12]}…"
                )
        return self

    def vector_id(self, original_id: str = "") -> str:
        """Return the point id used by the vector store: ``<original_id>#<id>``."""
        return f"{original_id}#{self.id}" if original_id else self.id

    def to_document(self, context: NoteContext | None = None) -> Document:
        """Convert to a LangChain ``Document`` for the embedding step.

        ``page_content`` is the embedding text; metadata omits ``None``
        values and is flat except for the note's ``tags`` and ``aliases``
        lists, which are left out when empty.
        """
        from langchain_core.documents import Document

        context = context or NoteContext()
        metadata: dict[str, Any] = {
            "chunk_id": self.id,
            "chunk_type": self.chunk_type.value,
            "chunk_index": self.chunk_index,
            "section": self.section,
            "headings_path": " > ".join(self.headings_path),
            "parent_item_text": self.parent_item_text,
            "list_depth": self.list_depth,
            "item_index": self.item_index,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "content_hash": self.content_hash,
            "anchored": self.is_anchored,
            "source": context.note_path or None,
            "original_id": context.original_id or None,
            "title": context.title or None,
            "tags": list(context.tags) or None,
            "aliases": list(context.aliases) or None,
        }
        return Document(
            id=self.vector_id(context.original_id),
            page_content=self.embedding_text,
            metadata={k: v for k, v in metadata.items() if v is not None},
        )
