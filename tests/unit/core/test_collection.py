"""Unit tests for file discovery and partial-failure-tolerant collection loading"""

import pytest

from postmatter.core.errors import DuplicateDocument, MalformedDocument, MissingMetadata, UnreadableDocument
from postmatter.core.parse import discover_files, load_collection, load_file, load_texts


def test_discover_files_single(tmp_path):
    """discover_files returns a list with one file when given a file path."""
    f = tmp_path / "doc.md"
    f.write_text("+++\n+++\n")
    assert discover_files(f) == [f]


def test_discover_files_non_md_skipped(tmp_path):
    """discover_files ignores non-.md/.mdx files."""
    (tmp_path / "notes.txt").write_text("text")
    assert discover_files(tmp_path) == []


def test_discover_files_dir_sorted(tmp_path):
    """discover_files finds .md and .mdx files recursively, sorted."""
    (tmp_path / "b.md").write_text("b")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "a.mdx").write_text("a")
    assert discover_files(tmp_path) == [tmp_path / "b.md", sub / "a.mdx"]


def test_load_file_relative_path(content_dir):
    """load_file reports the path relative to root when one is given."""
    doc = load_file(content_dir / "posts" / "ownership.md", content_dir)
    assert doc.path == "posts/ownership.md"
    assert doc.metadata.title == "Understanding Ownership"


def test_load_file_unreadable(tmp_path):
    """Bytes that are not UTF-8 fail with UnreadableDocument."""
    f = tmp_path / "latin1.md"
    f.write_bytes(b"+++\ntitle = '\xe9t\xe9'\n+++\n")
    with pytest.raises(UnreadableDocument):
        load_file(f)


def test_load_file_keeps_crlf(tmp_path):
    """Line endings in the body are kept as written."""
    f = tmp_path / "win.md"
    f.write_bytes(b"+++\r\ntitle = 'X'\r\n+++\r\nBody\r\n")
    assert load_file(f).body == "Body\r\n"


def test_load_collection_partial_failure(content_dir):
    """A malformed item is reported without aborting the other loads."""
    collection = load_collection(content_dir)
    assert [r.path for r in collection.results] == [
        "posts/borrowing.md", "posts/broken.md", "posts/ownership.md",
    ]
    assert len(collection.documents) == 2
    assert [r.path for r in collection.failures] == ["posts/broken.md"]
    assert isinstance(collection.failures[0].error, MalformedDocument)
    assert collection.failures[0].document is None
    assert not collection.ok


def test_load_collection_logs_failures(content_dir, caplog):
    """Each failed item is logged at warning level with its path and error kind."""
    caplog.set_level("WARNING", logger="postmatter.core.parse")
    load_collection(content_dir)
    assert "posts/broken.md" in caplog.text
    assert "MalformedDocument" in caplog.text


def test_load_collection_get_by_path(content_dir):
    """Collection.get looks documents up by their relative path."""
    collection = load_collection(content_dir)
    assert collection.get("posts/borrowing.md").metadata.title == "Borrowing"
    assert collection.get("posts/broken.md") is None
    assert collection.get("missing.md") is None


def test_load_collection_single_file(content_dir):
    """A single file loads with its name as path."""
    collection = load_collection(content_dir / "posts" / "ownership.md")
    assert collection.ok
    assert [d.path for d in collection.documents] == ["ownership.md"]


def test_load_collection_policies_apply_per_item(tmp_path):
    """Loader policies are forwarded to every item."""
    (tmp_path / "plain.md").write_text("No front matter here.\n")
    assert isinstance(load_collection(tmp_path).failures[0].error, MissingMetadata)
    collection = load_collection(tmp_path, missing_metadata="body")
    assert collection.ok
    assert collection.documents[0].body == "No front matter here.\n"


def test_load_collection_rejects_unknown_policy(tmp_path):
    """Bad policy names fail before any file is read."""
    with pytest.raises(ValueError):
        load_collection(tmp_path, unknown_keys="drop")


def test_load_texts_duplicate_path():
    """A repeated path fails as DuplicateDocument; the first one is kept."""
    collection = load_texts([
        ("a.md", "+++\ntitle = 'first'\n+++\n"),
        ("a.md", "+++\ntitle = 'second'\n+++\n"),
        ("b.md", "+++\n+++\n"),
    ])
    assert len(collection) == 3
    assert collection.get("a.md").metadata.title == "first"
    assert isinstance(collection.results[1].error, DuplicateDocument)
    assert [d.path for d in collection.documents] == ["a.md", "b.md"]


def test_load_texts_empty():
    """No items yields an empty, successful collection."""
    collection = load_texts([])
    assert len(collection) == 0
    assert collection.ok
