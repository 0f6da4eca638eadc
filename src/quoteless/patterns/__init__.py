"""Pattern tables for quotation detection."""

from quoteless.patterns.forwards import is_forward_line, is_start_of_forwarded_message
from quoteless.patterns.links import has_enclosed_link, starts_with_enclosed_link
from quoteless.patterns.splitters import is_splitter_line, match_splitter

__all__ = [
    "has_enclosed_link",
    "is_forward_line",
    "is_splitter_line",
    "is_start_of_forwarded_message",
    "match_splitter",
    "starts_with_enclosed_link",
]
