"""Data models for loaded documents and collection results"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from postmatter.core.errors import DocumentError


class Metadata(BaseModel):
    """Recognized front-matter keys. Only keys present in the source are set."""
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    date:        Optional[str] = None
    draft:       Optional[bool] = None
    title:       Optional[str] = None
    tags:        Optional[list[str]] = None
    categories:  Optional[list[str]] = None
    description: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_string(cls, value: Any) -> Any:
        """Bare TOML datetimes and unquoted YAML dates become ISO-8601 strings."""
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return value

    def as_dict(self) -> dict[str, Any]:
        """Return the mapping of keys that were present in the source."""
        return self.model_dump(exclude_unset=True)


KNOWN_KEYS: tuple[str, ...] = tuple(Metadata.model_fields)


class Document(BaseModel):
    """One content item: metadata plus verbatim body, identified by path."""
    model_config = ConfigDict(frozen=True)

    path: str
    metadata: Metadata = Field(default_factory=Metadata)
    body: str = ""
    extra: dict[str, Any] = Field(default_factory=dict)
    delimiter: Optional[str] = None     # None when loaded without a front-matter block
    newline: str = "\n"                 # line terminator of the opening delimiter line


class OutlineBlock(BaseModel):
    """A structural element of a body: a heading or a code block."""
    type: str                           # "heading" or "code"
    content: str
    level: Optional[int] = None         # heading level (1-6)
    language: Optional[str] = None      # fence info string, first word
    line: Optional[int] = None          # 0-based source line in the body


@dataclass
class LoadResult:
    """Outcome of loading one collection item: a document or an error."""
    path: str
    document: Document | None = None
    error: DocumentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Collection:
    """Per-item load results, in discovery order."""
    results: list[LoadResult] = field(default_factory=list)

    @property
    def documents(self) -> list[Document]:
        return [r.document for r in self.results if r.document is not None]

    @property
    def failures(self) -> list[LoadResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def get(self, path: str) -> Document | None:
        """Return the loaded document with the given path, or None."""
        for r in self.results:
            if r.document is not None and r.document.path == path:
                return r.document
        return None

    def __len__(self) -> int:
        return len(self.results)
