"""Heuristic removal of client-specific quote markup.

Used when the checkpoint method can't run or finds nothing, and as a
cleanup pass after pruning. Each matcher recognizes one markup idiom a
known mail client wraps quotations in and removes it from the tree.
"""

import logging
from collections.abc import Callable

from lxml import etree

from quoteless.patterns.forwards import is_start_of_forwarded_message
from quoteless.pipeline.markup import detach, element_children, text_content

logger = logging.getLogger(__name__)

Matcher = Callable[[etree._Element, bool], bool]

_EXSLT_NAMESPACES = {"re": "http://exslt.org/regular-expressions"}

QUOTE_CONTAINER_CLASS = "gmail_quote"

QUOTE_IDS = ("OLK_SRC_BODY_SECTION",)

_QUOTE_CONTAINER_XPATH = etree.XPath(
    f"//*[contains(concat(' ', normalize-space(@class), ' '), ' {QUOTE_CONTAINER_CLASS} ')]"
    "[not(ancestor::blockquote)]"
)

_ZIMBRA_DIVIDER_XPATH = etree.XPath('//hr[@data-marker="__DIVIDER__"]')

_BLOCKQUOTE_XPATH = etree.XPath(
    f'(.//blockquote)[not(@class="{QUOTE_CONTAINER_CLASS}") and not(ancestor::blockquote)][last()]'
)

_MICROSOFT_SPLITTER_XPATH = etree.XPath(
    # Outlook 2007, 2010, 2013 (international and American)
    "//div[re:test(@style, '^border:none; ?border-top:solid #(E1E1E1|B5C4DF) 1\\.0pt; ?"
    "padding:3\\.0pt 0(in|cm) 0(in|cm) 0(in|cm)', 'i')]"
    # Windows Mail
    "|//div[@style='padding-top: 5px; border-top-color: rgb(229, 229, 229); "
    "border-top-width: 1px; border-top-style: solid;']",
    namespaces=_EXSLT_NAMESPACES,
)

# Outlook 2003
_MICROSOFT_RULE_XPATH = etree.XPath(
    "//div/div[@class='MsoNormal' and @align='center' and @style='text-align:center']"
    "/font/span/hr[@size='3' and @width='100%' and @align='center' and @tabindex='-1']"
)

_QUOTE_ID_XPATH = etree.XPath("//*[@id=$quote_id]")

# Element whose text starts with a header field
_HEADER_BLOCK_XPATH = etree.XPath(
    "//*[starts-with(normalize-space(.), 'From:') or starts-with(normalize-space(.), 'Date:')]"
)

# Element whose tail starts with a header field
_HEADER_TAIL_XPATH = etree.XPath(
    "//*[following-sibling::node()[1][self::text()]"
    "[starts-with(normalize-space(.), 'From:') or starts-with(normalize-space(.), 'Date:')]]"
)


def _is_blank(node: etree._Element) -> bool:
    return not text_content(node).strip()


def _leading_text(node: etree._Element) -> str:
    """Get the first non-blank text chunk of a subtree."""
    for chunk in node.itertext():
        if chunk.strip():
            return chunk
    return ""


def cut_quote_container(tree: etree._Element, only_if_empty: bool = False) -> bool:
    """Cut the outermost quote container (class "gmail_quote").

    Containers nested in a blockquote are left alone, and so is a
    container whose text opens with a forwarded-message header.
    """
    containers = _QUOTE_CONTAINER_XPATH(tree)
    if not containers:
        return False

    container = containers[0]
    if is_start_of_forwarded_message(_leading_text(container)):
        return False
    if only_if_empty and not _is_blank(container):
        return False

    detach(container)
    return True


def cut_zimbra_quote(tree: etree._Element, only_if_empty: bool = False) -> bool:
    """Cut the Zimbra quotation divider."""
    dividers = _ZIMBRA_DIVIDER_XPATH(tree)
    if not dividers:
        return False

    divider = dividers[0]
    if only_if_empty and not _is_blank(divider):
        return False

    detach(divider)
    return True


def cut_blockquote(tree: etree._Element, only_if_empty: bool = False) -> bool:
    """Cut the last blockquote that is not nested in another blockquote."""
    quotes = _BLOCKQUOTE_XPATH(tree)
    if not quotes:
        return False

    quote = quotes[0]
    if only_if_empty and not _is_blank(quote):
        return False

    detach(quote)
    return True


def cut_microsoft_quote(tree: etree._Element, only_if_empty: bool = False) -> bool:
    """Cut the Outlook splitter block and everything following it."""
    splitters = _MICROSOFT_SPLITTER_XPATH(tree)
    if splitters:
        splitter = splitters[0]
        parent = splitter.getparent()
        # Outlook 2010 nests the splitter as the first child of the quotation block
        if parent is not None and element_children(parent)[0] is splitter:
            splitter = parent
    else:
        rules = _MICROSOFT_RULE_XPATH(tree)
        if not rules:
            return False

        splitter = rules[0]
        for _ in range(4):
            parent = splitter.getparent()
            if parent is None:
                return False
            splitter = parent

    if only_if_empty and not _is_blank(splitter):
        return False

    parent = splitter.getparent()
    if parent is None:
        return False

    for sibling in list(splitter.itersiblings()):
        parent.remove(sibling)
    detach(splitter, keep_tail=False)
    return True


def cut_by_id(tree: etree._Element, only_if_empty: bool = False) -> bool:
    """Cut every element carrying a known quotation ID."""
    found = False
    for quote_id in QUOTE_IDS:
        for quote in _QUOTE_ID_XPATH(tree, quote_id=quote_id):
            if only_if_empty and not _is_blank(quote):
                continue
            detach(quote)
            found = True
    return found


def cut_from_block(tree: etree._Element, only_if_empty: bool = False) -> bool:
    """Cut a quotation introduced by a "From:" or "Date:" header block.

    The closest div around the last element whose text opens with a
    header field is removed, unless that div is the whole body. Failing
    that, a header block sitting in an element's tail is removed with the
    element and every sibling after it, unless the parent text opens a
    forwarded message.
    """
    # A header block always has visible text
    if only_if_empty:
        return False

    blocks = _HEADER_BLOCK_XPATH(tree)
    if blocks:
        block = blocks[-1]
        while block.tag != "div":
            block = block.getparent()
            if block is None:
                return False

        parent = block.getparent()
        is_whole_body = parent is not None and parent.tag == "body" and len(element_children(parent)) == 1
        if not is_whole_body:
            detach(block)
            return True

    tails = _HEADER_TAIL_XPATH(tree)
    if not tails:
        return False

    block = tails[0]
    parent = block.getparent()
    if parent is None or is_start_of_forwarded_message(parent.text or ""):
        return False

    for sibling in list(block.itersiblings()):
        parent.remove(sibling)
    detach(block, keep_tail=False)
    return True


class HeuristicTagCutter:
    """Removes quotation markup recognized by fixed client idioms.

    Matchers are tried in order and the first one that cuts wins:
    1. Outermost quote container (Gmail)
    2. Quotation divider (Zimbra)
    3. Last top-level blockquote
    4. Splitter block and following siblings (Outlook, Windows Mail)
    5. Element with a known quotation ID (Outlook for Mac)
    6. Block opening with a "From:" or "Date:" header
    """

    def __init__(self, matchers: tuple[Matcher, ...] | None = None) -> None:
        """Initialize the cutter.

        Args:
            matchers: Matchers to try in order, the built-in chain if None.
        """
        self._matchers = matchers if matchers is not None else (
            cut_quote_container,
            cut_zimbra_quote,
            cut_blockquote,
            cut_microsoft_quote,
            cut_by_id,
            cut_from_block,
        )

    def cut(self, tree: etree._Element, only_if_empty: bool = False) -> bool:
        """Cut the first recognized quotation from a tree, in place.

        Args:
            tree: Root of the tree.
            only_if_empty: Only remove a candidate without visible text.
                Used to clear hollow containers left behind by pruning.

        Returns:
            True if a matcher removed something.
        """
        for matcher in self._matchers:
            if matcher(tree, only_if_empty):
                logger.debug("Heuristic cut by %s (only_if_empty=%s)", matcher.__name__, only_if_empty)
                return True
        return False
