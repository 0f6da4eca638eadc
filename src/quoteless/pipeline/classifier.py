"""Line classification for quotation detection.

Marks every line of a message body with a single-character marker:
- e: empty or whitespace-only line
- m: line starting with a quotation marker (>)
- f: forwarded-message header
- s: splitter line ("On <date>, <somebody> wrote:", "From: ..." blocks, ...)
- t: presumably a line of the latest message in the conversation

The marker sequence is kept as a string so the boundary rules can be
expressed as regular expressions over it.
"""

import re
from typing import Literal

from quoteless.patterns.forwards import is_forward_line
from quoteless.patterns.splitters import match_splitter

Marker = Literal["e", "m", "s", "f", "t"]

EMPTY: Marker = "e"
QUOTED: Marker = "m"
SPLITTER: Marker = "s"
FORWARD: Marker = "f"
TEXT: Marker = "t"

MARKERS: tuple[Marker, ...] = (EMPTY, QUOTED, SPLITTER, FORWARD, TEXT)

# Maximum number of lines a splitter may span
SPLITTER_MAX_LINES = 4

# One or more > at line start, optionally followed by a space
_QUOTE_MARKER_PATTERN = re.compile(r"^>+ ?")


class LineClassifier:
    """Marks message lines to distinguish quotation lines.

    Rules are evaluated per line in order; the splitter rule may consume
    several lines at once:
    1. Empty or whitespace-only line
    2. Line starting with a quotation marker
    3. Forwarded-message header
    4. Splitter spread over a window of up to SPLITTER_MAX_LINES lines
    5. Anything else is text
    """

    def __init__(self, splitter_max_lines: int = SPLITTER_MAX_LINES) -> None:
        """Initialize the classifier.

        Args:
            splitter_max_lines: Size of the window a splitter is matched against.
        """
        self._splitter_max_lines = splitter_max_lines

    def classify(self, lines: list[str]) -> str:
        """Mark each line with one marker.

        Args:
            lines: Message lines without line endings.

        Returns:
            Marker string, one character per line.

        Example:
            >>> LineClassifier().classify(["answer", "From: foo@bar.com", "Date: today", "", "> question"])
            'tssem'
        """
        # Headers are often indented; markers are computed on left-stripped lines
        stripped = [line.lstrip() for line in lines]
        markers: list[str] = [EMPTY] * len(stripped)

        index = 0
        while index < len(stripped):
            line = stripped[index]

            if not line.strip():
                markers[index] = EMPTY
            elif _QUOTE_MARKER_PATTERN.match(line):
                markers[index] = QUOTED
            elif is_forward_line(line):
                markers[index] = FORWARD
            else:
                span = self._splitter_span(stripped, index)
                if span:
                    for offset in range(span):
                        markers[index + offset] = SPLITTER
                    index += span
                    continue

                markers[index] = TEXT

            index += 1

        return "".join(markers)

    def _splitter_span(self, lines: list[str], index: int) -> int:
        """Count the lines covered by a splitter starting at index.

        Args:
            lines: Left-stripped message lines.
            index: Position of the first line of the window.

        Returns:
            Number of lines the splitter spans, 0 if there is no splitter.
        """
        window = lines[index : index + self._splitter_max_lines]
        match = match_splitter("\n".join(window))
        if match is None:
            return 0

        # A match ending right after a newline still only covers the lines it touched
        matched = match.group()
        span = len(matched.splitlines())
        return max(1, min(span, len(window)))
