"""Checkpoint stamping of markup trees.

Every element is stamped twice with a sequential tag embedded in the
text content: once when it opens (appended to its text) and once when it
closes (appended to its tail). After the tree is flattened to plain text
the tags found on each line tell which tree positions the line covers.
"""

import logging
import re
from collections.abc import Iterator

from lxml import etree

from quoteless.pipeline.markup import element_children, is_element

logger = logging.getLogger(__name__)

CHECKPOINT_PREFIX = "#!%!"
CHECKPOINT_SUFFIX = "!%!#"
CHECKPOINT_PATTERN = re.compile(re.escape(CHECKPOINT_PREFIX) + r"(\d+)" + re.escape(CHECKPOINT_SUFFIX))


def checkpoint_tag(checkpoint: int) -> str:
    """Format the tag for one checkpoint ID."""
    return f"{CHECKPOINT_PREFIX}{checkpoint}{CHECKPOINT_SUFFIX}"


def find_checkpoints(line: str) -> list[int]:
    """Get the checkpoint IDs embedded in a line, in order."""
    return [int(match.group(1)) for match in CHECKPOINT_PATTERN.finditer(line)]


def strip_checkpoints(line: str) -> str:
    """Remove every checkpoint tag from a line."""
    return CHECKPOINT_PATTERN.sub("", line)


def _erase(text: str) -> str:
    # Removing one tag can join the text around it into another
    while CHECKPOINT_PATTERN.search(text):
        text = strip_checkpoints(text)
    return text


def _erase_tags(tree: etree._Element) -> None:
    """Remove checkpoint-like text that came with the markup itself."""
    for node in tree.iter():
        if is_element(node) and node.text:
            node.text = _erase(node.text)
        if node.tail:
            node.tail = _erase(node.tail)


def iter_positions(node: etree._Element, depth: int = 0) -> Iterator[tuple[etree._Element, int, bool]]:
    """Enumerate the stamped positions of a tree in checkpoint order.

    Yields (element, depth, is_closing) once when an element opens and once
    when it closes, so the n-th item corresponds to checkpoint n.
    """
    yield node, depth, False
    for child in element_children(node):
        yield from iter_positions(child, depth + 1)
    yield node, depth, True


class Checkpointer:
    """Stamps checkpoint tags into a scratch copy of a markup tree.

    Stamping stops descending once node_limit checkpoints have been
    issued. A count at or above the limit means the tree is too large for
    the checkpoint method: a partial stamp set would not line up with the
    flattened text.
    """

    def __init__(self, node_limit: int) -> None:
        """Initialize the checkpointer.

        Args:
            node_limit: Maximum number of checkpoints to issue.
        """
        self._node_limit = node_limit

    @property
    def node_limit(self) -> int:
        return self._node_limit

    def stamp(self, tree: etree._Element) -> int:
        """Stamp checkpoints into a tree, in place.

        Tags already present in the text are erased first so every tag
        found in the projection was issued here.

        Args:
            tree: Root of the scratch tree.

        Returns:
            Number of checkpoints issued.
        """
        _erase_tags(tree)
        count = self._stamp(tree, 0, is_root=True)
        logger.debug("Stamped %d checkpoints (limit %d)", count, self._node_limit)
        return count

    def _stamp(self, node: etree._Element, counter: int, *, is_root: bool = False) -> int:
        node.text = (node.text or "") + checkpoint_tag(counter)
        counter += 1

        children = element_children(node)
        for child in children:
            if counter >= self._node_limit:
                break
            counter = self._stamp(child, counter)

        closing = checkpoint_tag(counter)
        if not is_root:
            node.tail = (node.tail or "") + closing
        elif len(node):
            # The root has no tail; its closing stamp trails its last child
            node[-1].tail = (node[-1].tail or "") + closing
        else:
            node.text += closing
        counter += 1

        return counter
