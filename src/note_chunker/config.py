"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


class ChunkOptions(BaseModel):
    """Tuning knobs for the chunk assembler.

    Every option changes chunk boundaries, and boundaries feed the derived
    ids, so changing any of them re-keys the affected chunks downstream.
    """

    # Long paragraphs
    long_paragraph_word_threshold: int = Field(
        default=300, gt=0, description="Split paragraphs with more words than this"
    )
    long_paragraph_token_threshold: int = Field(
        default=800, gt=0, description="Split paragraphs with more rough tokens (chars / 4) than this"
    )
    split_chunk_size: int = Field(default=1200, gt=0, description="Max characters per split paragraph piece")
    split_chunk_overlap: int = Field(default=200, ge=0, description="Characters shared by consecutive pieces")

    # Short list items
    group_list_items: bool = True
    list_short_char_threshold: int = Field(
        default=120, gt=0, description="List items shorter than this are grouping candidates"
    )
    list_group_min: int = Field(default=3, ge=2)
    list_group_max: int = Field(default=7, ge=2)

    # Filtering
    skip_code_blocks: bool = True
    filter_noise: bool = Field(
        default=True,
        description="Drop embeds, separators, callouts and link-only / anchor-only blocks",
    )

    max_chunks: int | None = Field(default=None, gt=0, description="Soft cap on chunks per note")

    @model_validator(mode="after")
    def _check_ranges(self) -> ChunkOptions:
        if self.split_chunk_overlap >= self.split_chunk_size:
            raise ValueError(
                f"split_chunk_overlap ({self.split_chunk_overlap}) must be < "
                f"split_chunk_size ({self.split_chunk_size})"
            )
        if self.list_group_min > self.list_group_max:
            raise ValueError(
                f"list_group_min ({self.list_group_min}) must be <= list_group_max ({self.list_group_max})"
            )
        return self


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file.

    Nested chunking options use a double underscore, e.g.
    ``NOTE_CHUNKER_CHUNKING__SKIP_CODE_BLOCKS=false``.
    """

    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    # Loading
    notes_glob: str = Field(default="**/*.md", description="Glob used when loading a notes directory")
    max_workers: int | None = Field(default=None, description="Thread pool size for multi-note chunking")

    # Chunking
    chunking: ChunkOptions = Field(default_factory=ChunkOptions)

    model_config = {
        "env_prefix": "NOTE_CHUNKER_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton: import `settings` wherever needed.
settings = Settings()
