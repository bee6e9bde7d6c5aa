from typing import List, Optional


class BlogError(Exception):
    """Base class for expected content failures.

    Raised by the parsing and loading services, caught per file by the
    content loader and translated into HTTP responses by the routers.
    """

    kind = "BlogError"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.kind}: {self.message} (path: {self.path})"
        return f"{self.kind}: {self.message}"

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "message": self.message}
        if self.path:
            data["path"] = self.path
        return data


class ParseError(BlogError):
    """Malformed frontmatter delimiters or YAML."""

    kind = "ParseError"


class ValidationError(BlogError):
    """One or more frontmatter, content or image rules were violated."""

    kind = "ValidationError"

    def __init__(
        self, reasons: List[str] | str, prefix: str = "Validation failed", path=None
    ):
        if isinstance(reasons, str):
            reasons = [reasons]
        self.reasons = list(reasons)
        super().__init__(f"{prefix}: {', '.join(self.reasons)}", path=path)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "reasons": self.reasons}


class ContentIOError(BlogError):
    """Filesystem read or write failure."""

    kind = "IOError"


class DataError(BlogError):
    """Every post in the posts directory failed to load."""

    kind = "DataError"


class ConflictError(BlogError):
    """A post with the same slug already exists."""

    kind = "ConflictError"
