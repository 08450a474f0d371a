"""Exceptions raised by the domain snapshot system."""


class DomainSnapshotError(Exception):
    """Base exception for all snapshot, manifest and diff errors.

    Allows callers to catch every failure of this package with a single
    except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize the error.

        Args:
            message: Human-readable error description
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class SnapshotParseError(DomainSnapshotError):
    """Error decoding a snapshot or manifest document.

    Raised when:
    - The document is not valid JSON/YAML
    - A required field is missing
    - A field has the wrong type or an unparseable value (version, timestamp)
    """

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        cause: Exception | None = None,
    ):
        if field_path:
            message = f"{message} (at '{field_path}')"
        super().__init__(message, cause)
        self.field_path = field_path


class SnapshotNotFoundError(DomainSnapshotError, FileNotFoundError):
    """A snapshot file or stored version does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Snapshot file not found: {path}")
        self.path = path


class ManifestNotFoundError(DomainSnapshotError, FileNotFoundError):
    """A manifest file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Manifest file not found: {path}")
        self.path = path


class ManifestValidationError(DomainSnapshotError, ValueError):
    """A manifest violates the input contract (e.g. duplicate names)."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []
