"""QuotationExtractor - Main public interface for quotation removal.

Provides three extraction methods:
- extract_from_plain(): Plain-text bodies
- extract_from_html(): Markup bodies, raises on unparseable markup
- extract(): Safe dispatch by content type, returns the body on failure
"""

import logging

from quoteless.pipeline.html import DEFAULT_NODE_LIMIT, HtmlExtraction, HtmlPipeline
from quoteless.pipeline.plain import DEFAULT_MAX_LINES_COUNT, PlainExtraction, PlainTextPipeline

logger = logging.getLogger(__name__)


class QuotationExtractor:
    """Main class for removing quoted messages from email bodies.

    Example:
        extractor = QuotationExtractor()

        # Plain text
        reply = extractor.extract_from_plain(body).body

        # Markup
        result = extractor.extract_from_html(html_body)
        if result.is_forwarded_message:
            ...

        # Any content type, never raises
        reply = extractor.extract(body, "text/html")
    """

    def __init__(
        self,
        max_lines_count: int = DEFAULT_MAX_LINES_COUNT,
        node_limit: int = DEFAULT_NODE_LIMIT,
    ) -> None:
        """Initialize the extractor.

        Args:
            max_lines_count: Maximum number of lines to classify.
            node_limit: Maximum number of checkpoints stamped into a markup tree.

        Raises:
            InvalidOptionError: If a limit is not positive.
        """
        self._plain = PlainTextPipeline(max_lines_count=max_lines_count)
        self._html = HtmlPipeline(
            node_limit=node_limit,
            max_lines_count=max_lines_count,
            plain_pipeline=self._plain,
        )

    def extract_from_plain(self, body: str) -> PlainExtraction:
        """Remove the quotation from a plain-text body.

        Args:
            body: Plain-text message body.

        Returns:
            PlainExtraction with the reply text.
        """
        return self._plain.extract(body)

    def extract_from_html(self, body: str) -> HtmlExtraction:
        """Remove the quotation from a markup body.

        Args:
            body: Markup message body.

        Returns:
            HtmlExtraction with the serialized reply.

        Raises:
            MarkupParseError: If the body can't be parsed.
        """
        return self._html.extract(body)

    def extract(self, body: str, content_type: str = "text/plain") -> str:
        """Remove the quotation from a body, returning the body on any failure.

        Args:
            body: Message body.
            content_type: MIME type of the body, "text/plain" or "text/html".
                Other types are returned unchanged.

        Returns:
            The reply, or the original body.
        """
        try:
            if content_type == "text/plain":
                return self.extract_from_plain(body).body
            if content_type == "text/html":
                return self.extract_from_html(body).body
        except Exception:
            logger.exception("Unexpected error during extraction")
        return body


def extract_from_plain(body: str, max_lines_count: int = DEFAULT_MAX_LINES_COUNT) -> PlainExtraction:
    """Remove the quotation from a plain-text body with default settings."""
    return QuotationExtractor(max_lines_count=max_lines_count).extract_from_plain(body)


def extract_from_html(
    body: str,
    node_limit: int = DEFAULT_NODE_LIMIT,
    max_lines_count: int = DEFAULT_MAX_LINES_COUNT,
) -> HtmlExtraction:
    """Remove the quotation from a markup body with default settings."""
    return QuotationExtractor(max_lines_count=max_lines_count, node_limit=node_limit).extract_from_html(body)


def extract_from(body: str, content_type: str = "text/plain") -> str:
    """Remove the quotation from a body of any content type, never raising."""
    return QuotationExtractor().extract(body, content_type)
