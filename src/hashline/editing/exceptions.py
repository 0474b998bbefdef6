"""Exceptions for read and edit operations."""


class EditingError(Exception):
    """Base exception for all read/edit operations."""


class SnapshotError(EditingError):
    """Raised when a file cannot be read into a snapshot."""


class ReadError(EditingError):
    """Base exception for read-path failures."""


class OversizeLineError(ReadError):
    """Raised when a single line exceeds the read byte ceiling."""


class OffsetOutOfRangeError(ReadError):
    """Raised when a read offset is beyond the end of the file."""


class MutationError(EditingError):
    """Base exception for mutation executor failures."""


class ExternalMutationError(MutationError):
    """Raised when the executor reports an error; the message is its output verbatim."""


class MutationTimeoutError(MutationError):
    """Raised when the executor does not finish within its timeout."""


class MutationAbortedError(MutationError):
    """Raised when cancellation fires before the mutation is dispatched."""
