"""Plain-text quotation extraction.

Steps:
1. Detect the line delimiter (\\r\\n or \\n)
2. Pre-process: protect wrapped links, split glued splitters onto their own line
3. Split into lines, classify, resolve the quotation boundary
4. Join the surviving lines and undo the pre-processing
"""

import logging
import re
from dataclasses import dataclass

from quoteless.exceptions import InvalidOptionError
from quoteless.patterns.links import BRACKET_LINK, NORMALIZED_LINK
from quoteless.patterns.splitters import ON_DATE_SOMEBODY_WROTE
from quoteless.pipeline.classifier import LineClassifier
from quoteless.pipeline.resolver import BoundaryResolver, Resolution

logger = logging.getLogger(__name__)

# Don't classify more lines than this
DEFAULT_MAX_LINES_COUNT = 1000

_DELIMITER_PATTERN = re.compile(r"\r?\n")


@dataclass(frozen=True, slots=True)
class PlainExtraction:
    """Result of plain-text extraction.

    Attributes:
        body: Message without the quoted part, or the original body.
        did_find_quote: Whether a quotation was removed.
    """

    body: str
    did_find_quote: bool


def find_delimiter(body: str) -> str:
    """Find the line delimiter used in a message body.

    Args:
        body: Message body.

    Returns:
        The first delimiter found, "\\n" if the body is a single line.
    """
    match = _DELIMITER_PATTERN.search(body)
    return match.group() if match else "\n"


def split_lines(body: str) -> list[str]:
    """Split a body on \\r\\n or \\n."""
    return _DELIMITER_PATTERN.split(body)


def replace_link_brackets(body: str) -> str:
    """Replace the angle brackets of links with "@@".

    Keeps a ">" that closes a link broken across lines from being taken
    for a quotation marker. Links whose closing bracket sits on a line
    that is already quotation-marked are left alone.

    Args:
        body: Message body.

    Returns:
        Body with "<http://...>" rewritten to "@@http://...@@".
    """

    def link_wrapper(link: re.Match[str]) -> str:
        closing = link.end() - 1
        line_start = body.rfind("\n", 0, closing) + 1
        if body[line_start:closing].lstrip().startswith(">"):
            return link.group()
        return f"@@{link.group(1)}@@"

    return BRACKET_LINK.sub(link_wrapper, body)


def wrap_splitter_with_newline(body: str, delimiter: str) -> str:
    """Move an "On <date> <somebody> wrote:" splitter to its own line.

    Clients sometimes glue the splitter to the last line of the reply,
    e.g. "reply On Wed, Apr 4, 2012 at 3:59 PM, bob@example.com wrote:".

    Args:
        body: Message body.
        delimiter: Line delimiter of the body.

    Returns:
        Body with a delimiter inserted before glued splitters.
    """

    def splitter_wrapper(splitter: re.Match[str]) -> str:
        if splitter.start() and body[splitter.start() - 1] != "\n":
            return f"{delimiter}{splitter.group()}"
        return splitter.group()

    return ON_DATE_SOMEBODY_WROTE.sub(splitter_wrapper, body)


def preprocess(body: str, delimiter: str) -> str:
    """Prepare a body for line classification."""
    body = replace_link_brackets(body)
    return wrap_splitter_with_newline(body, delimiter)


def postprocess(body: str) -> str:
    """Undo link normalization and strip surrounding whitespace."""
    return NORMALIZED_LINK.sub(r"<\1>", body).strip()


class PlainTextPipeline:
    """Extracts the latest message from a plain-text body.

    Only the first max_lines_count lines are classified. When a quotation
    is cut the lines past that limit are dropped; otherwise the body
    comes back whole.
    """

    def __init__(
        self,
        max_lines_count: int = DEFAULT_MAX_LINES_COUNT,
        classifier: LineClassifier | None = None,
        resolver: BoundaryResolver | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            max_lines_count: Maximum number of lines to classify.
            classifier: Line classifier, a default one if None.
            resolver: Boundary resolver, a default one if None.

        Raises:
            InvalidOptionError: If max_lines_count is not positive.
        """
        if max_lines_count <= 0:
            raise InvalidOptionError(message=f"max_lines_count must be positive, got {max_lines_count}")

        self._max_lines_count = max_lines_count
        self._classifier = classifier or LineClassifier()
        self._resolver = resolver or BoundaryResolver()

    @property
    def classifier(self) -> LineClassifier:
        return self._classifier

    @property
    def resolver(self) -> BoundaryResolver:
        return self._resolver

    def resolve_lines(self, lines: list[str]) -> Resolution:
        """Classify lines and resolve the quotation boundary."""
        markers = self._classifier.classify(lines)
        return self._resolver.resolve(lines, markers)

    def extract(self, body: str) -> PlainExtraction:
        """Extract the non-quoted part of a plain-text body.

        Args:
            body: Plain-text message body.

        Returns:
            PlainExtraction with the stripped body. The body is returned
            unmodified when no quotation is found.
        """
        if not body.strip():
            return PlainExtraction(body=body, did_find_quote=False)

        delimiter = find_delimiter(body)
        lines = split_lines(preprocess(body, delimiter))

        # Don't process too long messages
        head = lines[: self._max_lines_count]
        if len(lines) > len(head):
            logger.debug("Classifying %d of %d lines", len(head), len(lines))

        resolution = self.resolve_lines(head)
        if not resolution.was_cut:
            return PlainExtraction(body=body, did_find_quote=False)

        return PlainExtraction(body=postprocess(delimiter.join(resolution.lines)), did_find_quote=True)
