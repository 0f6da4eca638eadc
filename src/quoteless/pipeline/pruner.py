"""Removal of quoted subtrees from a markup tree.

The pruner walks a pristine copy of the tree in the same order the
Checkpointer stamped the scratch copy, so the n-th position visited is
checkpoint n. Text at quoted checkpoints is blanked, and subtrees whose
every checkpoint is quoted are detached by their closest partly-quoted
ancestor.
"""

import logging
from collections.abc import Iterable, Sequence

from lxml import etree

from quoteless.pipeline.markup import element_children, is_element

logger = logging.getLogger(__name__)


class QuoteStart:
    """Tracks where the quotation starts in the tree.

    Attributes:
        pending: Splitter checkpoints not visited yet.
        depth: Shallowest depth a splitter checkpoint was visited at, or None.
    """

    def __init__(self, splitter_tags: Iterable[int]) -> None:
        self.pending: set[int] = set(splitter_tags)
        self.depth: int | None = None

    def visit(self, checkpoint: int, depth: int) -> None:
        """Record a visit to a checkpoint at a tree depth."""
        if checkpoint not in self.pending:
            return

        self.pending.discard(checkpoint)
        if self.depth is None or depth < self.depth:
            self.depth = depth

    def skip(self, checkpoints: range) -> None:
        """Forget splitter checkpoints in a range that is not walked."""
        self.pending.difference_update(checkpoints)

    def is_above(self, depth: int) -> bool:
        """Whether depth is above the quotation once every splitter was met."""
        return self.depth is not None and depth < self.depth and not self.pending


class TreePruner:
    """Deletes quoted regions from a tree using a quotation checkpoint map.

    Rules per element, carrying (checkpoint, depth, quote start):
    - Above the quote start depth, once every splitter checkpoint has been
      met, nothing is treated as quoted anymore.
    - A quoted opening checkpoint blanks the element's text, a quoted
      closing checkpoint blanks its tail.
    - Children of a table whose opening is not quoted are left alone.
    - An element with any non-quoted checkpoint keeps itself and detaches
      the children that came back fully quoted.
    """

    def prune(
        self,
        tree: etree._Element,
        quoted_checkpoints: Sequence[bool],
        splitter_tags: Iterable[int] = (),
    ) -> None:
        """Remove quoted content from a tree, in place.

        Args:
            tree: Root of the pristine tree.
            quoted_checkpoints: True for every checkpoint inside the quotation.
            splitter_tags: Checkpoints found on splitter lines.
        """
        quote_start = QuoteStart(splitter_tags)
        self._prune(tree, 0, 0, quoted_checkpoints, quote_start, is_root=True)
        logger.debug("Quotation starts at depth %s", quote_start.depth)

    def _prune(
        self,
        node: etree._Element,
        counter: int,
        depth: int,
        quoted_checkpoints: Sequence[bool],
        quote_start: QuoteStart,
        *,
        is_root: bool = False,
    ) -> tuple[int, bool]:
        """Prune one subtree.

        Returns:
            Tuple of (next checkpoint, whether the subtree is fully quoted).
        """
        in_quotation = True

        if self._is_quoted(counter, depth, quoted_checkpoints, quote_start):
            node.text = ""
        else:
            in_quotation = False
        counter += 1

        quoted_children: list[etree._Element] = []
        if node.tag == "table" and not in_quotation:
            # Partly quoted tables keep their layout
            skipped = 2 * sum(1 for descendant in node.iterdescendants() if is_element(descendant))
            quote_start.skip(range(counter, counter + skipped))
            counter += skipped
        else:
            for child in element_children(node):
                counter, child_in_quotation = self._prune(
                    child, counter, depth + 1, quoted_checkpoints, quote_start
                )
                if child_in_quotation:
                    quoted_children.append(child)

        if self._is_quoted(counter, depth, quoted_checkpoints, quote_start):
            if not is_root:
                node.tail = ""
        else:
            in_quotation = False
        counter += 1

        if in_quotation:
            return counter, True

        for child in quoted_children:
            node.remove(child)
        return counter, False

    def _is_quoted(
        self,
        checkpoint: int,
        depth: int,
        quoted_checkpoints: Sequence[bool],
        quote_start: QuoteStart,
    ) -> bool:
        above_quotation = quote_start.is_above(depth)
        quote_start.visit(checkpoint, depth)

        if above_quotation or checkpoint >= len(quoted_checkpoints):
            return False
        return quoted_checkpoints[checkpoint]
