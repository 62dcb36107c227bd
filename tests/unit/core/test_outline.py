"""Unit tests for core/outline.py"""

from postmatter.core.outline import outline, summarize


BODY = """\
# Intro

Text here.

## Ownership

```rust,ignore
fn main() {}
```

```
plain
```
"""


def test_outline_headings_and_code():
    """Headings and code blocks are returned in source order with levels and languages."""
    blocks = outline(BODY)
    assert [(b.type, b.level, b.language) for b in blocks] == [
        ("heading", 1, None),
        ("heading", 2, None),
        ("code", None, "rust"),
        ("code", None, None),
    ]
    assert blocks[0].content == "Intro"
    assert blocks[1].content == "Ownership"
    assert blocks[2].content == "fn main() {}\n"


def test_outline_source_lines():
    """Each block records its 0-based line in the body."""
    assert [b.line for b in outline(BODY)] == [0, 4, 6, 10]


def test_outline_indented_code_block():
    """Indented code blocks count as code without a language."""
    blocks = outline("Para.\n\n    let x = 1;\n")
    assert len(blocks) == 1
    assert blocks[0].type == "code"
    assert blocks[0].language is None


def test_outline_empty_body():
    assert outline("") == []


def test_summarize_counts():
    """summarize reports headings, code blocks, and per-language counts."""
    summary = summarize(BODY)
    assert summary["headings"] == 2
    assert summary["code_blocks"] == 2
    assert summary["languages"] == {"rust": 1, "plain": 1}


def test_summarize_words():
    assert summarize("one two  three\nfour")["words"] == 4
