"""Unit tests for the markdown block parser."""

import logging

import pytest

from note_chunker.chunking.models import BlockKind
from note_chunker.ingestion.parser import parse_markdown, read_frontmatter

NOTE = """# Title

Intro para.

## Sub

- a
- b
  - c

```py
code
```

| a | b |
|---|---|
| 1 | 2 |

> quote line
> more

> [!note] Callout
> body

---

%% hidden %%
"""


class TestParseMarkdown:
    """Tests for ``note_chunker.ingestion.parser.parse_markdown``."""

    def test_block_sequence(self) -> None:
        kinds = [b.kind for b in parse_markdown(NOTE)]
        assert kinds == [
            BlockKind.HEADING,
            BlockKind.PARAGRAPH,
            BlockKind.HEADING,
            BlockKind.LIST,
            BlockKind.CODE,
            BlockKind.TABLE,
            BlockKind.QUOTE,
            BlockKind.CALLOUT,
            BlockKind.THEMATIC_BREAK,
            BlockKind.COMMENT,
        ]

    def test_headings(self) -> None:
        blocks = parse_markdown(NOTE)
        assert (blocks[0].text, blocks[0].level) == ("Title", 1)
        assert (blocks[2].text, blocks[2].level) == ("Sub", 2)

    def test_closing_hashes_stripped(self) -> None:
        [heading] = parse_markdown("## Setup ##")
        assert heading.text == "Setup"

    def test_heading_anchor_stripped(self) -> None:
        blocks = parse_markdown("## Setup ^sec1\n\n### Linux ^(sec-1)")
        assert [b.text for b in blocks] == ["Setup", "Linux"]

    def test_heading_caret_word_kept(self) -> None:
        [heading] = parse_markdown("## Powers of x^2")
        assert heading.text == "Powers of x^2"

    def test_hashtag_is_not_heading(self) -> None:
        [block] = parse_markdown("#hashtag and text")
        assert block.kind == BlockKind.PARAGRAPH

    def test_nested_list_structure(self) -> None:
        lst = parse_markdown(NOTE)[3]
        assert [item.text for item in lst.children] == ["a", "b"]
        assert [child.text for child in lst.children[1].children] == ["c"]
        assert (lst.start_line, lst.end_line) == (7, 9)

    def test_line_numbers(self) -> None:
        blocks = parse_markdown(NOTE)
        assert (blocks[1].start_line, blocks[1].end_line) == (3, 3)
        assert (blocks[4].start_line, blocks[4].end_line) == (11, 13)
        assert (blocks[5].start_line, blocks[5].end_line) == (15, 17)

    def test_code_keeps_fences(self) -> None:
        code = parse_markdown(NOTE)[4]
        assert code.text == "```py\ncode\n```"

    def test_quote_markers_removed(self) -> None:
        assert parse_markdown(NOTE)[6].text == "quote line\nmore"

    def test_callout_kept_raw(self) -> None:
        assert parse_markdown(NOTE)[7].text.startswith("> [!note]")

    def test_frontmatter(self) -> None:
        blocks = parse_markdown("---\ntitle: x\n---\n# H")
        assert blocks[0].kind == BlockKind.FRONTMATTER
        assert blocks[0].text == "title: x"
        assert (blocks[1].kind, blocks[1].start_line) == (BlockKind.HEADING, 4)

    def test_multiline_paragraph(self) -> None:
        [para] = parse_markdown("line one\nline two  \n")
        assert para.text == "line one\nline two"
        assert (para.start_line, para.end_line) == (1, 2)

    def test_lazy_list_continuation(self) -> None:
        [lst] = parse_markdown("- item one\ncontinues here")
        assert lst.children[0].text == "item one continues here"

    def test_paragraph_after_list(self) -> None:
        blocks = parse_markdown("- a\n\nAfter the list.")
        assert [b.kind for b in blocks] == [BlockKind.LIST, BlockKind.PARAGRAPH]

    def test_indented_continuation_after_blank(self) -> None:
        [lst] = parse_markdown("- a\n\n  more of a")
        assert lst.children[0].text == "a more of a"

    def test_numbered_and_tab_indented_items(self) -> None:
        [lst] = parse_markdown("1. first\n\t2. nested\n3) third")
        assert [i.text for i in lst.children] == ["first", "third"]
        assert lst.children[0].children[0].text == "nested"

    def test_paragraph_then_list_without_blank(self) -> None:
        blocks = parse_markdown("Steps:\n- one")
        assert [b.kind for b in blocks] == [BlockKind.PARAGRAPH, BlockKind.LIST]

    def test_unclosed_fence_runs_to_end(self) -> None:
        [code] = parse_markdown("```\nno end")
        assert code.kind == BlockKind.CODE
        assert code.end_line == 2

    def test_empty_input(self) -> None:
        assert parse_markdown("") == []
        assert parse_markdown("  \n\n") == []


class TestReadFrontmatter:
    """Tests for ``note_chunker.ingestion.parser.read_frontmatter``."""

    def test_mapping(self) -> None:
        data = read_frontmatter("---\ntags: [linux, setup]\naliases: Install\n---\n# H")
        assert data == {"tags": ["linux", "setup"], "aliases": "Install"}

    def test_no_frontmatter(self) -> None:
        assert read_frontmatter("# H\n\nBody.") == {}
        assert read_frontmatter("") == {}

    def test_empty_frontmatter(self) -> None:
        assert read_frontmatter("---\n---\nBody.") == {}

    def test_malformed_yaml(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert read_frontmatter("---\ntags: [unclosed\n---\nBody.") == {}
        assert "malformed front matter" in caplog.text

    def test_not_a_mapping(self) -> None:
        assert read_frontmatter("---\n- a\n- b\n---\nBody.") == {}
