"""quoteless - Remove quoted messages from email replies."""

from quoteless.exceptions import (
    ExtractionError,
    InvalidOptionError,
    MarkupParseError,
)
from quoteless.extractor import (
    QuotationExtractor,
    extract_from,
    extract_from_html,
    extract_from_plain,
)
from quoteless.pipeline import (
    DEFAULT_MAX_LINES_COUNT,
    DEFAULT_NODE_LIMIT,
    MARKERS,
    BoundaryResolver,
    Checkpointer,
    FlatteningProjector,
    HeuristicTagCutter,
    HtmlExtraction,
    HtmlPipeline,
    LineClassifier,
    Marker,
    PlainExtraction,
    PlainTextPipeline,
    Resolution,
    TreePruner,
    html_to_text,
)

__version__ = "0.1.0"

__all__ = [
    "BoundaryResolver",
    "Checkpointer",
    "DEFAULT_MAX_LINES_COUNT",
    "DEFAULT_NODE_LIMIT",
    "ExtractionError",
    "FlatteningProjector",
    "HeuristicTagCutter",
    "HtmlExtraction",
    "HtmlPipeline",
    "InvalidOptionError",
    "LineClassifier",
    "Marker",
    "MARKERS",
    "MarkupParseError",
    "PlainExtraction",
    "PlainTextPipeline",
    "QuotationExtractor",
    "Resolution",
    "TreePruner",
    "extract_from",
    "extract_from_html",
    "extract_from_plain",
    "html_to_text",
]
