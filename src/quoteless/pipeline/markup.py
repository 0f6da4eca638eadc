"""Markup tree primitives: parse, serialize, clone.

Wraps lxml.html. Trees use lxml's text/tail model:
- An element's `text` is the text before its first child.
- An element's `tail` is the text after its end tag, before the next sibling.

Mail body markup is routinely invalid, so parsing is permissive: the
libxml2 HTML parser recovers from broken markup, and declarations or
conditional comments it would render as text are stripped beforehand.
"""

import copy
import re

import lxml.html
from lxml import etree

from quoteless.exceptions import MarkupParseError

_XML_DECLARATION_PATTERN = re.compile(r"<\?xml[^>]*\?>", re.IGNORECASE)

_DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE[^>\[]*(\[[^\]]*\])?\s*>", re.IGNORECASE)

# Downlevel-revealed conditional comments: <![if !supportLists]> ... <![endif]>
_CONDITIONAL_COMMENT_PATTERN = re.compile(r"<!\[(?:if[^\]]*|endif)\]>", re.IGNORECASE)

_WRAPPER_TAG_PATTERN = re.compile(r"<(?:html|body)[\s>/]", re.IGNORECASE)


def normalize_markup(body: str) -> str:
    """Prepare a raw markup body for parsing.

    Without an enclosing html/body the parser wraps leading text in an
    implied paragraph, so bare fragments get an explicit wrapper.

    Args:
        body: Raw markup.

    Returns:
        Markup with a stable html/body root.
    """
    body = body.replace("\r\n", "\n")
    body = _XML_DECLARATION_PATTERN.sub("", body)
    body = _DOCTYPE_PATTERN.sub("", body)
    body = _CONDITIONAL_COMMENT_PATTERN.sub("", body)

    if not _WRAPPER_TAG_PATTERN.search(body):
        body = f"<html><body>{body}</body></html>"

    return body


def parse(body: str) -> lxml.html.HtmlElement:
    """Parse a markup body into a document tree.

    Args:
        body: Raw markup.

    Returns:
        The root html element.

    Raises:
        MarkupParseError: If no document could be built.
    """
    try:
        document = lxml.html.document_fromstring(normalize_markup(body))
    except (etree.ParserError, ValueError) as exc:
        raise MarkupParseError(message="Could not parse markup body", reason=str(exc)) from exc

    _drop_trailing_artifact(document)
    return document


def _drop_trailing_artifact(document: lxml.html.HtmlElement) -> None:
    """Remove whitespace the parser leaves after the last block of the document."""
    document.tail = None

    body = document.find("body")
    if body is None:
        return

    if body.tail is not None and not body.tail.strip():
        body.tail = None

    if len(body) and body[-1].tail is not None and not body[-1].tail.strip():
        body[-1].tail = None


def serialize(tree: lxml.html.HtmlElement) -> str:
    """Serialize a tree back to markup."""
    return lxml.html.tostring(tree, encoding="unicode")


def clone(tree: lxml.html.HtmlElement) -> lxml.html.HtmlElement:
    """Deep-copy a tree; mutations of the copy never show in the source."""
    return copy.deepcopy(tree)


def is_element(node: etree._Element) -> bool:
    """Check that a node is an element, not a comment or processing instruction."""
    return isinstance(node.tag, str)


def element_children(node: etree._Element) -> list[etree._Element]:
    """Get the element children of a node, skipping comments."""
    return [child for child in node if is_element(child)]


def detach(node: etree._Element, *, keep_tail: bool = True) -> None:
    """Remove a node (and its subtree) from its parent.

    Args:
        node: Node to remove.
        keep_tail: Move the node's tail text onto the previous sibling
            (or the parent's text) instead of dropping it.
    """
    parent = node.getparent()
    if parent is None:
        return

    tail = node.tail
    if keep_tail and tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + tail
        else:
            parent.text = (parent.text or "") + tail

    parent.remove(node)


def text_content(node: etree._Element) -> str:
    """Get the text of a node and all its descendants, without its tail."""
    return "".join(node.itertext())
