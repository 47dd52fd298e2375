"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from note_chunker.config import ChunkOptions, Settings


class TestChunkOptions:
    """Tests for ``note_chunker.config.ChunkOptions``."""

    def test_defaults(self) -> None:
        opts = ChunkOptions()
        assert opts.long_paragraph_word_threshold == 300
        assert opts.long_paragraph_token_threshold == 800
        assert opts.list_short_char_threshold == 120
        assert (opts.list_group_min, opts.list_group_max) == (3, 7)
        assert opts.skip_code_blocks is True
        assert opts.filter_noise is True
        assert opts.max_chunks is None

    def test_overlap_must_be_smaller_than_size(self) -> None:
        with pytest.raises(ValidationError, match="split_chunk_overlap"):
            ChunkOptions(split_chunk_size=100, split_chunk_overlap=100)

    def test_group_bounds(self) -> None:
        with pytest.raises(ValidationError, match="list_group_min"):
            ChunkOptions(list_group_min=5, list_group_max=4)

    def test_max_chunks_positive(self) -> None:
        with pytest.raises(ValidationError):
            ChunkOptions(max_chunks=0)


class TestSettings:
    """Tests for ``note_chunker.config.Settings``."""

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTE_CHUNKER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("NOTE_CHUNKER_NOTES_GLOB", "*.markdown")
        monkeypatch.setenv("NOTE_CHUNKER_CHUNKING__SKIP_CODE_BLOCKS", "false")
        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.notes_glob == "*.markdown"
        assert settings.chunking.skip_code_blocks is False

    def test_invalid_env_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTE_CHUNKER_CHUNKING__SPLIT_CHUNK_OVERLAP", "5000")
        with pytest.raises(ValidationError, match="split_chunk_overlap"):
            Settings(_env_file=None)
