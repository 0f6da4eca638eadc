"""Markup quotation extraction.

Steps:
1. Parse the body into a tree
2. Checkpoint attempt: stamp a scratch copy, flatten it, run the plain-text
   classifier and resolver, map the cut lines back to tree positions and
   prune a pristine copy
3. Fallback: heuristic removal of client-specific quote markup, then one
   more checkpoint attempt if the tree was too large the first time
"""

import logging
from dataclasses import dataclass
from typing import Literal

import lxml.html

from quoteless.exceptions import InvalidOptionError
from quoteless.pipeline.checkpoints import Checkpointer, find_checkpoints, strip_checkpoints
from quoteless.pipeline.heuristics import HeuristicTagCutter
from quoteless.pipeline.markup import clone, parse, serialize
from quoteless.pipeline.plain import DEFAULT_MAX_LINES_COUNT, PlainTextPipeline
from quoteless.pipeline.projector import FlatteningProjector
from quoteless.pipeline.pruner import TreePruner
from quoteless.pipeline.resolver import Resolution

logger = logging.getLogger(__name__)

# Don't stamp trees with more checkpoints than this
DEFAULT_NODE_LIMIT = 1000

AttemptStatus = Literal["success", "forwarded", "too_large", "not_found"]


@dataclass(frozen=True, slots=True)
class HtmlExtraction:
    """Result of markup extraction.

    Attributes:
        body: Serialized tree without the quoted part, or the original body.
        did_find_quote: Whether a quotation was removed.
        did_use_checkpoints: Whether the checkpoint method decided the outcome.
        is_forwarded_message: The body is a forwarded message, kept whole.
        is_too_long: The tree or its text exceeded the configured limits.
    """

    body: str
    did_find_quote: bool
    did_use_checkpoints: bool = False
    is_forwarded_message: bool = False
    is_too_long: bool = False


@dataclass(frozen=True, slots=True)
class CheckpointAttempt:
    """Outcome of one checkpoint attempt.

    Attributes:
        status: How the attempt ended.
        tree: Pruned tree on success, None otherwise.
        resolution: Boundary resolution of the flattened lines, if reached.
    """

    status: AttemptStatus
    tree: lxml.html.HtmlElement | None = None
    resolution: Resolution | None = None


class HtmlPipeline:
    """Extracts the latest message from a markup body.

    The checkpoint method runs first. Trees above node_limit checkpoints
    or projections above max_lines_count lines are too large for it and go
    straight to the heuristic cutter.
    """

    def __init__(
        self,
        node_limit: int = DEFAULT_NODE_LIMIT,
        max_lines_count: int = DEFAULT_MAX_LINES_COUNT,
        plain_pipeline: PlainTextPipeline | None = None,
        cutter: HeuristicTagCutter | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            node_limit: Maximum number of checkpoints to stamp.
            max_lines_count: Maximum number of flattened lines to classify.
            plain_pipeline: Pipeline whose classifier and resolver run on the
                flattened text, a default one if None.
            cutter: Heuristic tag cutter, a default one if None.

        Raises:
            InvalidOptionError: If a limit is not positive.
        """
        if node_limit <= 0:
            raise InvalidOptionError(message=f"node_limit must be positive, got {node_limit}")
        if max_lines_count <= 0:
            raise InvalidOptionError(message=f"max_lines_count must be positive, got {max_lines_count}")

        self._max_lines_count = max_lines_count
        self._checkpointer = Checkpointer(node_limit)
        self._projector = FlatteningProjector()
        self._pruner = TreePruner()
        self._plain = plain_pipeline or PlainTextPipeline(max_lines_count)
        self._cutter = cutter or HeuristicTagCutter()

    @property
    def node_limit(self) -> int:
        return self._checkpointer.node_limit

    @property
    def max_lines_count(self) -> int:
        return self._max_lines_count

    def extract(self, body: str) -> HtmlExtraction:
        """Extract the non-quoted part of a markup body.

        Args:
            body: Markup message body.

        Returns:
            HtmlExtraction with the serialized reply. The body is returned
            unmodified when no quotation is found.

        Raises:
            MarkupParseError: If the body can't be parsed.
        """
        if not body.strip():
            return HtmlExtraction(body=body, did_find_quote=False)

        tree = parse(body)

        attempt = self.attempt_checkpoints(tree)
        if attempt.status == "success":
            return HtmlExtraction(body=serialize(attempt.tree), did_find_quote=True, did_use_checkpoints=True)
        if attempt.status == "forwarded":
            return HtmlExtraction(
                body=serialize(tree),
                did_find_quote=False,
                did_use_checkpoints=True,
                is_forwarded_message=True,
            )

        is_too_long = attempt.status == "too_large"
        logger.debug("Checkpoint method skipped (%s), trying heuristics", attempt.status)

        cut_tree = clone(tree)
        if not self._cutter.cut(cut_tree):
            return HtmlExtraction(body=body, did_find_quote=False, is_too_long=is_too_long)

        if is_too_long:
            retry = self.attempt_checkpoints(cut_tree)
            if retry.status == "success":
                return HtmlExtraction(
                    body=serialize(retry.tree),
                    did_find_quote=True,
                    did_use_checkpoints=True,
                    is_too_long=True,
                )

        return HtmlExtraction(body=serialize(cut_tree), did_find_quote=True, is_too_long=is_too_long)

    def attempt_checkpoints(self, tree: lxml.html.HtmlElement) -> CheckpointAttempt:
        """Run the checkpoint method on a tree.

        The tree itself is never modified: stamping happens on a scratch
        copy and pruning on a pristine copy.

        Args:
            tree: Parsed document.

        Returns:
            CheckpointAttempt, carrying the pruned tree on success.
        """
        scratch = clone(tree)
        count = self._checkpointer.stamp(scratch)
        if count >= self._checkpointer.node_limit:
            logger.debug("Tree too large: %d checkpoints", count)
            return CheckpointAttempt(status="too_large")

        resolution: Resolution | None = None
        # Block tags can break lines in the middle of a splitter; retry without them
        for ignore_block_tags in (False, True):
            text = self._projector.project(clone(scratch), ignore_block_tags=ignore_block_tags)
            lines = text.splitlines()
            if len(lines) > self._max_lines_count:
                logger.debug("Projection too long: %d lines", len(lines))
                return CheckpointAttempt(status="too_large")

            line_checkpoints = [find_checkpoints(line) for line in lines]
            lines = [strip_checkpoints(line) for line in lines]

            resolution = self._plain.resolve_lines(lines)
            if resolution.is_forwarded:
                return CheckpointAttempt(status="forwarded", resolution=resolution)
            if resolution.was_cut:
                pruned = self._prune(tree, count, line_checkpoints, resolution)
                return CheckpointAttempt(status="success", tree=pruned, resolution=resolution)

        return CheckpointAttempt(status="not_found", resolution=resolution)

    def _prune(
        self,
        tree: lxml.html.HtmlElement,
        count: int,
        line_checkpoints: list[list[int]],
        resolution: Resolution,
    ) -> lxml.html.HtmlElement:
        """Remove the resolved quotation from a pristine copy of the tree."""
        quoted_checkpoints = [False] * count
        for index in range(resolution.first_cut, resolution.last_cut + 1):
            for checkpoint in line_checkpoints[index]:
                if checkpoint < count:
                    quoted_checkpoints[checkpoint] = True

        splitter_tags = {
            checkpoint for index in resolution.splitter_lines for checkpoint in line_checkpoints[index]
        }

        pristine = clone(tree)
        self._pruner.prune(pristine, quoted_checkpoints, splitter_tags)
        self._cutter.cut(pristine, only_if_empty=True)
        return pristine
