"""Crate index error types.

All errors inherit from CrateIndexError for easy catching.
Follow "fail fast" principle with explicit, actionable messages.
"""

from crate_query_common import CrateQueryError


class CrateIndexError(CrateQueryError):
    """Base exception for all crate index errors."""

    pass


class InvalidPackageName(CrateIndexError):
    """Package name is empty or contains characters a crate name cannot hold.

    Raised before any I/O happens.
    """

    def __init__(self, name: str, reason: str = "invalid characters"):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid package name {name!r}: {reason}")


class PackageNotFound(CrateIndexError):
    """Index has no shard for the package."""

    def __init__(self, name: str, path: str = ""):
        self.name = name
        self.path = path
        super().__init__(f"Package not found in index: {name}")


class MalformedRecord(CrateIndexError):
    """A shard line could not be decoded into a version record.

    Attributes:
        line_number: 1-based line number inside the shard
        detail: Decoder message
    """

    def __init__(self, line_number: int, detail: str):
        self.line_number = line_number
        self.detail = detail
        super().__init__(f"Malformed record on line {line_number}: {detail}")


class InvalidVersion(CrateIndexError, ValueError):
    """String is not a valid semantic version."""

    def __init__(self, text: str, reason: str = "expected MAJOR.MINOR.PATCH"):
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid version {text!r}: {reason}")


class InvalidVersionRange(CrateIndexError, ValueError):
    """Version range expression could not be parsed."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid version range {text!r}: {reason}")


class IndexFetchError(CrateIndexError):
    """Shard could not be fetched (transport or server error other than 404).

    Attributes:
        path: Shard path that was requested
        status_code: HTTP status code, or 0 for non-HTTP failures
    """

    def __init__(self, path: str, message: str, status_code: int = 0):
        self.path = path
        self.status_code = status_code
        self.message = message
        detail = f"HTTP {status_code}: {message}" if status_code else message
        super().__init__(f"Failed to fetch {path}: {detail}")
