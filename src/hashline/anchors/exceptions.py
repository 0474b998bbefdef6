"""Exceptions for anchor resolution.

Every resolution failure is raised before a mutation is dispatched, so none
of these can leave a file partially edited.
"""


class AnchorError(Exception):
    """Base exception for all anchor operations.

    Attributes:
        anchor: The anchor that failed to resolve (None when not applicable).
        lines: 1-indexed line numbers involved in the failure.
    """

    def __init__(
        self,
        message: str,
        anchor: str | None = None,
        lines: list[int] | None = None,
    ) -> None:
        super().__init__(message)
        self.anchor = anchor
        self.lines = list(lines or [])


class StaleAnchorError(AnchorError):
    """Raised when an anchor has no candidate in the current snapshot."""


class AmbiguousAnchorError(AnchorError):
    """Raised when an anchor matches several lines and strict mode is on."""


class AmbiguousContextError(AnchorError):
    """Raised when the context anchor itself does not resolve to one line."""


class InvalidRangeError(AnchorError):
    """Raised when the resolved stop line precedes the resolved start line."""


class AnchorFormatError(AnchorError):
    """Raised when an anchor is not two base-62 characters."""
