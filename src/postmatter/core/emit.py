"""Serialize documents back to front-matter text, and to JSON-ready records"""

import json
import re
from datetime import date, datetime, time
from typing import Any

import yaml

from postmatter.core.models import Document, Metadata
from postmatter.core.parse import TOML_DELIMITER, YAML_DELIMITER
from postmatter.core.utils.hashing import sha256


_BARE_KEY_RE = re.compile(r'^[A-Za-z0-9_-]+$')


def _toml_string(value: str) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes; DEL is not escaped by json
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


def _toml_key(key: str) -> str:
    return key if _BARE_KEY_RE.match(key) else _toml_string(key)


def _toml_value(value: Any) -> str:
    """Render a value as an inline TOML literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return _toml_string(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        return "{ " + ", ".join(f"{_toml_key(str(k))} = {_toml_value(v)}" for k, v in value.items()) + " }"
    raise TypeError(f"Cannot write {type(value).__name__} as TOML")


def dump_metadata(
    metadata: Metadata,
    delimiter: str = TOML_DELIMITER,
    extra: dict[str, Any] = None,
    newline: str = "\n",
    ) -> str:
    """Return the delimited metadata block, closing delimiter and newline included.

    Recognized keys come first in field order, then any preserved extras.
    Every line ends with newline. Raises TypeError for an extra value the
    target format cannot hold (e.g. null or binary under TOML).
    """
    data = metadata.as_dict()
    data.update(extra or {})

    if delimiter == TOML_DELIMITER:
        block = "".join(f"{_toml_key(k)} = {_toml_value(v)}\n" for k, v in data.items())
    elif delimiter == YAML_DELIMITER:
        block = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False) if data else ""
    else:
        raise ValueError(f"Unsupported delimiter: {delimiter!r}")
    text = f"{delimiter}\n{block}{delimiter}\n"
    return text if newline == "\n" else text.replace("\n", newline)


def dump_document(doc: Document, delimiter: str | None = None) -> str:
    """Return the full text for doc: metadata block followed by the verbatim body.

    Uses the document's own delimiter unless one is given, and always its own
    line terminator. A document loaded without a front-matter block is
    returned as its body alone.
    """
    delimiter = delimiter or doc.delimiter
    if delimiter is None:
        return doc.body
    return dump_metadata(doc.metadata, delimiter, doc.extra, doc.newline) + doc.body


def document_record(doc: Document) -> dict[str, Any]:
    """Build the JSON-ready index entry for a document: path, body hash, metadata."""
    return {
        "path": doc.path,
        "hash": sha256(doc.body),
        "metadata": doc.metadata.as_dict(),
        "extra": doc.extra,
    }
