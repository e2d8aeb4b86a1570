"""Exception hierarchy shared by the daemon components."""


class JournalWriterError(Exception):
    """Base class for all journal-writer errors."""


class ConfigError(JournalWriterError):
    """Raised when the configuration document is missing or invalid."""


class StorageError(JournalWriterError):
    """Raised when the cursor file cannot be read or written."""


class RecordError(JournalWriterError):
    """A single journal record cannot be delivered; the loop skips it."""

    position_token: str | None = None


class MissingFieldError(RecordError):
    """Raised when a record lacks a field required for formatting."""

    def __init__(self, field: str):
        super().__init__(f"Record has no {field} field")
        self.field = field


class MalformedFieldError(RecordError):
    """Raised when a journal entry field cannot be interpreted."""

    def __init__(self, field: str, value, position_token: str | None = None):
        super().__init__(f"Record field {field} is malformed: {value!r}")
        self.field = field
        self.position_token = position_token


class StartupError(JournalWriterError):
    """Raised when the daemon cannot establish a known start position."""


class FatalError(JournalWriterError):
    """Raised on structural failures of the source or sink."""
