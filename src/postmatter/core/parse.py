"""File discovery, front-matter extraction, and document loading"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

import yaml
from pydantic import ValidationError

from postmatter.core.errors import (
    DocumentError,
    DuplicateDocument,
    InvalidMetadata,
    MalformedDocument,
    MissingMetadata,
    UnrecognizedKey,
    UnreadableDocument,
)
from postmatter.core.models import KNOWN_KEYS, Collection, Document, LoadResult, Metadata


logger = logging.getLogger(__name__)

TOML_DELIMITER = "+++"
YAML_DELIMITER = "---"
DELIMITERS = (TOML_DELIMITER, YAML_DELIMITER)
MD_EXTENSIONS = {'.md', '.mdx'}
MISSING_POLICIES = ("error", "body")
UNKNOWN_KEY_POLICIES = ("ignore", "preserve", "error")

_BOM = "\ufeff"


def _iter_lines(text: str) -> Iterator[str]:
    """Yield lines split on '\\n' only, terminators kept."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        end = len(text) if end == -1 else end + 1
        yield text[start:end]
        start = end


def _newline(text: str) -> str:
    """Line terminator used by the first line of text (CRLF or LF)."""
    first = next(_iter_lines(text.removeprefix(_BOM)), "")
    return "\r\n" if first.endswith("\r\n") else "\n"


def split_front_matter(text: str, path: str | None = None) -> tuple[str, str, str]:
    """Return (delimiter, block, body) for text opening with a delimiter line.

    Raises MissingMetadata if the first line is not a delimiter, and
    MalformedDocument if the opening delimiter is never closed.
    """
    text = text.removeprefix(_BOM)
    lines = _iter_lines(text)
    first = next(lines, "")
    delimiter = first.strip()
    if delimiter not in DELIMITERS:
        raise MissingMetadata("No front-matter block found", path)

    offset = len(first)
    for line in lines:
        if line.strip() == delimiter:
            return delimiter, text[len(first):offset], text[offset + len(line):]
        offset += len(line)
    raise MalformedDocument(f"Opening {delimiter!r} has no matching closing delimiter", path)


def parse_block(delimiter: str, block: str, path: str | None = None) -> dict[str, Any]:
    """Parse a metadata block: TOML under '+++', YAML under '---'."""
    if delimiter == TOML_DELIMITER:
        try:
            return tomllib.loads(block)
        except tomllib.TOMLDecodeError as e:
            raise InvalidMetadata(f"Invalid TOML front matter: {e}", path) from e

    try:
        data = yaml.safe_load(block) or {}
    except yaml.YAMLError as e:
        raise InvalidMetadata(f"Invalid YAML front matter: {e}", path) from e
    if not isinstance(data, dict):
        raise InvalidMetadata(f"Invalid YAML front matter: expected a mapping, got {type(data).__name__}", path)
    return data


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def _check_policies(missing_metadata: str, unknown_keys: str) -> None:
    if missing_metadata not in MISSING_POLICIES:
        raise ValueError(f"missing_metadata must be one of {MISSING_POLICIES}, got {missing_metadata!r}")
    if unknown_keys not in UNKNOWN_KEY_POLICIES:
        raise ValueError(f"unknown_keys must be one of {UNKNOWN_KEY_POLICIES}, got {unknown_keys!r}")


def load_document(
    text: str,
    path: str = "<string>",
    missing_metadata: str = "error",
    unknown_keys: str = "ignore",
    ) -> Document:
    """Parse text into a Document. Pure; raises a DocumentError subclass on failure.

    missing_metadata='body' turns a text without a front-matter block into a
    Document with empty metadata and the whole text as body.
    unknown_keys selects what happens to keys outside the known set:
    'ignore' drops them, 'preserve' keeps them in Document.extra, 'error'
    raises UnrecognizedKey.
    """
    _check_policies(missing_metadata, unknown_keys)
    try:
        delimiter, block, body = split_front_matter(text, path)
    except MissingMetadata:
        if missing_metadata == "error":
            raise
        logger.debug("%s: no front matter, using full text as body", path)
        return Document(path=path, body=text.removeprefix(_BOM), newline=_newline(text))

    known: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in parse_block(delimiter, block, path).items():
        if key in KNOWN_KEYS:
            # An empty YAML value is treated as an absent key
            if value is not None:
                known[key] = value
        elif unknown_keys == "error":
            raise UnrecognizedKey(str(key), path)
        elif unknown_keys == "preserve":
            extra[str(key)] = value
        else:
            logger.debug("%s: ignoring unrecognized key %r", path, key)

    try:
        metadata = Metadata.model_validate(known)
    except ValidationError as e:
        raise InvalidMetadata(_describe(e), path) from e

    return Document(
        path=path,
        metadata=metadata,
        body=body,
        extra=extra,
        delimiter=delimiter,
        newline=_newline(text),
    )


def read_source(file: Path) -> str:
    """Return file content decoded as UTF-8 with line endings untouched."""
    return file.read_bytes().decode('utf-8')


def load_file(file: Path, root: Path | None = None, **policies: str) -> Document:
    """Read and load one file. The document path is relative to root when given."""
    path = file.relative_to(root).as_posix() if root is not None else str(file)
    try:
        text = read_source(file)
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableDocument(f"Cannot read file: {e}", path) from e
    return load_document(text, path, **policies)


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS and p.is_file())


def _collect(items: Iterable[tuple[str, Callable[[], Document]]]) -> Collection:
    """Run each loader independently, recording a LoadResult per item."""
    collection = Collection()
    seen: set[str] = set()
    for path, load in items:
        try:
            if path in seen:
                raise DuplicateDocument("Path already present in the collection", path)
            seen.add(path)
            collection.results.append(LoadResult(path=path, document=load()))
        except DocumentError as e:
            logger.warning("Failed to load %s: %s: %s", path, e.kind, e.message)
            collection.results.append(LoadResult(path=path, error=e))
    return collection


def load_collection(path: Path, **policies: str) -> Collection:
    """Load every .md/.mdx file under path; failures are captured per item."""
    _check_policies(policies.get("missing_metadata", "error"), policies.get("unknown_keys", "ignore"))
    root = path if path.is_dir() else path.parent
    files = discover_files(path)
    logger.debug("Discovered %d file(s) under %s", len(files), path)
    return _collect(
        (f.relative_to(root).as_posix(), lambda f=f: load_file(f, root, **policies))
        for f in files
    )


def load_texts(items: Iterable[tuple[str, str]], **policies: str) -> Collection:
    """Load in-memory (path, text) pairs; a repeated path fails as DuplicateDocument."""
    _check_policies(policies.get("missing_metadata", "error"), policies.get("unknown_keys", "ignore"))
    return _collect(
        (path, lambda path=path, text=text: load_document(text, path, **policies))
        for path, text in items
    )
