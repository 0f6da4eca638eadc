"""Flattening of markup trees into plain text.

The projection is shaped so the plain-text line classifier can run on it
unchanged: block elements and hard breaks start new lines, list items get
a bullet, link targets are kept in parentheses.
"""

import re

from lxml import etree

from quoteless.pipeline.markup import detach, is_element, parse

_BLOCK_TAGS = frozenset({"div", "p", "ul", "li", "h1", "h2", "h3"})

_HARD_BREAK_TAGS = frozenset({"br", "hr", "tr"})

_INVISIBLE_TAGS = frozenset({"style", "script"})

_EXCESSIVE_NEWLINES_PATTERN = re.compile(r"\n{2,10}")


class FlatteningProjector:
    """Converts a (possibly checkpointed) tree into plain text.

    Elements are visited in document order and each contributes its own
    text together with its tail. Invisible nodes (style, script, comments)
    are removed from the tree first, keeping the text that follows them.
    """

    def project(self, tree: etree._Element, ignore_block_tags: bool = False) -> str:
        """Flatten a tree to text.

        Mutates the tree: invisible nodes are removed.

        Args:
            tree: Root of the tree.
            ignore_block_tags: Don't start a new line at block elements.
                Used as a fallback for trees where inline content sits in
                block tags and the extra line breaks hide the quotation.

        Returns:
            Plain-text projection, with runs of blank lines collapsed.
        """
        self._remove_invisible(tree)

        text = ""
        for element in tree.iter():
            if not is_element(element):
                continue

            element_text = (element.text or "") + (element.tail or "")
            if len(element_text) > 1:
                if element.tag in _HARD_BREAK_TAGS or (not ignore_block_tags and element.tag in _BLOCK_TAGS):
                    text += "\n"
                if element.tag == "li":
                    text += "  * "
                text += element_text.strip() + " "

                link = element.get("href") or element.get("src")
                if link:
                    text += f"({link}) "

            if element.tag in _HARD_BREAK_TAGS and text and not text.endswith("\n") and not element_text:
                text += "\n"

        return _EXCESSIVE_NEWLINES_PATTERN.sub("\n\n", text).strip()

    def _remove_invisible(self, tree: etree._Element) -> None:
        invisible = [
            node
            for node in tree.iter()
            if not is_element(node) or node.tag in _INVISIBLE_TAGS
        ]
        for node in invisible:
            detach(node)


def html_to_text(markup: str) -> str:
    """Render the visible text of a markup body.

    Args:
        markup: Raw markup.

    Returns:
        Plain-text projection of the body.
    """
    if not markup.strip():
        return ""
    return FlatteningProjector().project(parse(markup))
