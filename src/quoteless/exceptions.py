"""Exceptions for quoteless quotation extraction."""

from dataclasses import dataclass


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    pass


@dataclass
class InvalidOptionError(ExtractionError):
    """An extraction option is out of range.

    Raised when:
    - max_lines_count is not a positive integer
    - node_limit is not a positive integer
    """

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class MarkupParseError(ExtractionError):
    """The markup body could not be turned into a tree.

    Attributes:
        message: Description of the error.
        reason: Message of the underlying parser error, if any.
    """

    message: str
    reason: str | None = None

    def __str__(self) -> str:
        if self.reason:
            return f"{self.message} ({self.reason})"
        return self.message
