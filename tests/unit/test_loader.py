"""Unit tests for note loading."""

from pathlib import Path

from note_chunker.ingestion.loader import load_note, load_notes


def test_load_notes_sorted_by_source(tmp_path: Path) -> None:
    """Notes come back in path order whatever order the loader finishes in."""
    (tmp_path / "b.md").write_text("# B", encoding="utf-8")
    (tmp_path / "a.md").write_text("# A", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.md").write_text("# C", encoding="utf-8")
    (tmp_path / "ignored.txt").write_text("not a note", encoding="utf-8")

    docs = load_notes(tmp_path)

    sources = [Path(d.metadata["source"]).relative_to(tmp_path).as_posix() for d in docs]
    assert sources == ["a.md", "b.md", "sub/c.md"]
    assert docs[0].page_content == "# A"


def test_load_notes_custom_glob(tmp_path: Path) -> None:
    (tmp_path / "a.md").write_text("# A", encoding="utf-8")
    (tmp_path / "b.markdown").write_text("# B", encoding="utf-8")
    docs = load_notes(tmp_path, glob="*.markdown")
    assert [Path(d.metadata["source"]).name for d in docs] == ["b.markdown"]


def test_load_note_utf8(tmp_path: Path) -> None:
    path = tmp_path / "note.md"
    path.write_text("Заметка ✓", encoding="utf-8")
    [doc] = load_note(path)
    assert doc.page_content == "Заметка ✓"
    assert doc.metadata["source"] == str(path)
