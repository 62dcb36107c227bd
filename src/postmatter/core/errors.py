"""Error kinds raised while loading documents"""


class DocumentError(Exception):
    """Base for all per-document load failures; carries the item path."""
    kind = "DocumentError"

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class MalformedDocument(DocumentError):
    """Opening delimiter without a matching closing delimiter."""
    kind = "MalformedDocument"


class MissingMetadata(DocumentError):
    """No delimited metadata block at the start of the text."""
    kind = "MissingMetadata"


class InvalidMetadata(DocumentError):
    """Metadata block could not be parsed, or a value has the wrong type."""
    kind = "InvalidMetadata"


class UnrecognizedKey(DocumentError):
    """Metadata key outside the known set (fatal only under the 'error' policy)."""
    kind = "UnrecognizedKey"

    def __init__(self, key: str, path: str | None = None):
        super().__init__(f"Unrecognized metadata key: {key!r}", path)
        self.key = key


class DuplicateDocument(DocumentError):
    """A path already present in the collection."""
    kind = "DuplicateDocument"


class UnreadableDocument(DocumentError):
    """File could not be read or decoded as UTF-8."""
    kind = "UnreadableDocument"
