"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from postmatter.config import Settings, load_config
from postmatter.core.emit import document_record, dump_document
from postmatter.core.errors import DocumentError
from postmatter.core.models import Collection
from postmatter.core.outline import summarize
from postmatter.core.parse import load_collection, load_file, read_source
from postmatter.core.utils.diff import unified_diff


MissingOpt = Annotated[Optional[str], typer.Option("--missing-metadata", help="error, or body (whole text as body)")]
UnknownOpt = Annotated[Optional[str], typer.Option("--unknown-keys", help="ignore, preserve, or error")]
PathArg = Annotated[Optional[str], typer.Argument(help="File or directory (default: content_dir)")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _load(path: Optional[str], settings: Settings, policies: dict = None) -> tuple[Path, Collection]:
    """Resolve the target path and load it as a collection; exit 1 if nothing is found."""
    target = Path(path or settings.content_dir)
    if not target.exists():
        _fail(f"Path not found: {target}")
    collection = load_collection(target, **(policies or settings.policies()))
    if not collection.results:
        typer.echo(f"No .md/.mdx files found under {target}.")
        raise typer.Exit(1)
    root = target if target.is_dir() else target.parent
    return root, collection


def _echo_failures(collection: Collection) -> None:
    for r in collection.failures:
        typer.echo(f"  FAILED {r.path}: {r.error.kind}: {r.error.message}")


def check_cmd(
    path: PathArg = None,
    missing: MissingOpt = None,
    unknown: UnknownOpt = None,
    ):
    """Load every document and report per-item failures."""
    settings = _settings(overrides={"missing_metadata": missing, "unknown_keys": unknown})
    _, collection = _load(path, settings)

    for r in collection.results:
        if r.ok:
            typer.echo(f"  ok: {r.path}")
    _echo_failures(collection)
    typer.echo(
        f"Checked {len(collection)} document(s) - "
        f"{len(collection.documents)} ok, "
        f"{len(collection.failures)} failed"
    )
    if not collection.ok:
        raise typer.Exit(1)


def show_cmd(
    file: Annotated[str, typer.Argument(help="Document to inspect")],
    missing: MissingOpt = None,
    unknown: UnknownOpt = None,
    ):
    """Print a document's metadata and a summary of its body as JSON."""
    settings = _settings(overrides={"missing_metadata": missing, "unknown_keys": unknown})
    try:
        doc = load_file(Path(file), **settings.policies())
    except DocumentError as e:
        _fail(f"{e.kind}: {e}")

    payload = {
        "path": doc.path,
        "metadata": doc.metadata.as_dict(),
        "extra": doc.extra,
        "body": summarize(doc.body, settings.outline_preset),
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def export_cmd(
    path: PathArg = None,
    out: Annotated[str, typer.Option("--out", "-o", help="JSON index file to write")] = "index.json",
    missing: MissingOpt = None,
    unknown: UnknownOpt = None,
    ):
    """Write a JSON index (path, body hash, metadata) of the loaded documents."""
    settings = _settings(overrides={"missing_metadata": missing, "unknown_keys": unknown})
    _, collection = _load(path, settings)

    records = [document_record(doc) for doc in collection.documents]
    out_file = Path(out)
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(json.dumps(records, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    except OSError as e:
        _fail("Export failed", e)

    _echo_failures(collection)
    typer.echo(f"Exported {len(records)} document(s) to {out_file}")
    if not collection.ok:
        raise typer.Exit(1)


def fmt_cmd(
    path: PathArg = None,
    write: Annotated[bool, typer.Option("--write", help="Rewrite files instead of printing diffs")] = False,
    to: Annotated[Optional[str], typer.Option("--to", help="Delimiter to write: +++, ---, or keep")] = None,
    missing: MissingOpt = None,
    unknown: UnknownOpt = None,
    ):
    """Re-emit front matter in canonical form; print diffs or rewrite with --write.

    Unrecognized keys are always carried over; only the 'error' policy changes that.
    """
    settings = _settings(overrides={"delimiter": to, "missing_metadata": missing, "unknown_keys": unknown})
    policies = settings.policies()
    if policies["unknown_keys"] == "ignore":
        policies["unknown_keys"] = "preserve"
    root, collection = _load(path, settings, policies)
    delimiter = None if settings.delimiter == "keep" else settings.delimiter

    changed = 0
    unwritable: list[tuple[str, Exception]] = []
    for doc in collection.documents:
        source = root / doc.path
        try:
            formatted = dump_document(doc, delimiter)
        except TypeError as e:
            unwritable.append((doc.path, e))
            continue
        original = read_source(source)
        if formatted == original:
            continue
        changed += 1
        if write:
            source.write_text(formatted, encoding="utf-8", newline="")
            typer.echo(f"  formatted: {doc.path}")
        else:
            typer.echo("".join(unified_diff(original, formatted, f"a/{doc.path}", f"b/{doc.path}")), nl=False)

    _echo_failures(collection)
    for doc_path, e in unwritable:
        typer.echo(f"  FAILED {doc_path}: {type(e).__name__}: {e}")
    verb = "reformatted" if write else "would be reformatted"
    typer.echo(f"{changed} of {len(collection.documents)} document(s) {verb}")
    if not collection.ok or unwritable:
        raise typer.Exit(1)
