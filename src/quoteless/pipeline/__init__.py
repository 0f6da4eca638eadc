"""Pipeline components for quotation extraction."""

from quoteless.pipeline.checkpoints import Checkpointer
from quoteless.pipeline.classifier import MARKERS, LineClassifier, Marker
from quoteless.pipeline.heuristics import HeuristicTagCutter
from quoteless.pipeline.html import DEFAULT_NODE_LIMIT, HtmlExtraction, HtmlPipeline
from quoteless.pipeline.plain import DEFAULT_MAX_LINES_COUNT, PlainExtraction, PlainTextPipeline
from quoteless.pipeline.projector import FlatteningProjector, html_to_text
from quoteless.pipeline.pruner import TreePruner
from quoteless.pipeline.resolver import BoundaryResolver, Resolution

__all__ = [
    "BoundaryResolver",
    "Checkpointer",
    "DEFAULT_MAX_LINES_COUNT",
    "DEFAULT_NODE_LIMIT",
    "FlatteningProjector",
    "HeuristicTagCutter",
    "HtmlExtraction",
    "HtmlPipeline",
    "LineClassifier",
    "Marker",
    "MARKERS",
    "PlainExtraction",
    "PlainTextPipeline",
    "Resolution",
    "TreePruner",
    "html_to_text",
]
