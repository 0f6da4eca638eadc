"""Boundary resolution over marker sequences.

Decides, from the marker string produced by LineClassifier, whether the
message ends with (or contains) a quoted block, where that block starts
and ends, and whether the message is a forwarded message that must be
kept whole.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal

from quoteless.patterns.links import has_enclosed_link, starts_with_enclosed_link

logger = logging.getLogger(__name__)

Rule = Literal["forwarded", "inline_reply", "trailing_splitter", "quotation", "empty_quotation"]

# Three quotation marker lines, possibly separated by empty lines
_QUOTE_RUN_PATTERN = re.compile(r"(me*){3}")

# Forward header preceded only by text or empty lines
_FORWARDED_PATTERN = re.compile(r"[te]*f")

# Text between two quotation blocks. The lookbehind lets overlapping
# entries be found, e.g. both "t" in "mtmtm".
_INLINE_REPLY_PATTERN = re.compile(r"(?<=m)e*(t[te]*)m")

# Splitter followed only by text (or forward headers) up to the end
_TRAILING_SPLITTER_PATTERN = re.compile(r"(?:se*)+(?:[tf]+e*)+$")

_QUOTATION_PATTERN = re.compile(
    r"""
    (
        # quotation border: splitter line or a number of quotation marker lines
        (?:
            s
            |
            (?:me*){2,}
        )

        # quotation lines could be marked as splitter or text, etc.
        .*

        # but we expect it to end with a quotation marker line
        me*
    )

    # after quotations should be text only or nothing at all
    [te]*$
    """,
    re.VERBOSE,
)

_EMPTY_QUOTATION_PATTERN = re.compile(
    r"""
    (
        # quotation border: splitter line or a number of quotation marker lines
        (?:
            (?:se*)+
            |
            (?:me*){2,}
        )
    )
    e*
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Result of boundary resolution.

    Attributes:
        lines: Lines that survive the cut (all lines if nothing was cut).
        was_cut: Whether a quoted block was removed.
        first_cut: Index of the first removed line, or -1.
        last_cut: Index of the last removed line (inclusive), or -1.
        is_forwarded: The message is a forwarded message and was kept whole.
        splitter_lines: Indices of splitter lines inside the removed block.
        rule: Name of the rule that decided the outcome, or None.
    """

    lines: tuple[str, ...]
    was_cut: bool
    first_cut: int
    last_cut: int
    is_forwarded: bool
    splitter_lines: tuple[int, ...]
    rule: Rule | None


class BoundaryResolver:
    """Finds the quoted suffix of a message from its line markers.

    Rules, in order:
    1. Without a splitter or a run of 3+ quotation lines, quotation
       markers are not trusted and become text
    2. A forward header after leading text keeps the message whole
    3. Text sandwiched between quotation blocks is an inline reply and
       nothing is cut, unless a wrapped link explains the break
    4. A splitter followed only by text cuts everything from the splitter
    5. A quotation block (splitter- or marker-bordered) is cut out
    """

    def resolve(self, lines: list[str] | tuple[str, ...], markers: str) -> Resolution:
        """Resolve the quotation boundary.

        Args:
            lines: Message lines, same length as markers.
            markers: Marker string from LineClassifier.

        Returns:
            Resolution with the surviving lines and the cut range.
        """
        lines = tuple(lines)

        # If there is no splitter there should be no quotation markers
        if "s" not in markers and not _QUOTE_RUN_PATTERN.search(markers):
            markers = markers.replace("m", "t")

        if _FORWARDED_PATTERN.match(markers):
            logger.debug("Forwarded message detected: %s", markers)
            return self._uncut(lines, is_forwarded=True, rule="forwarded")

        for inline_reply in _INLINE_REPLY_PATTERN.finditer(markers):
            # Long links could break a sequence of quotation lines but
            # they don't make an inline reply
            start = inline_reply.start()
            if not (has_enclosed_link(lines[start - 1]) or starts_with_enclosed_link(lines[start])):
                logger.debug("Inline reply detected at line %d: %s", start, markers)
                return self._uncut(lines, is_forwarded=False, rule="inline_reply")

        # Cut out text lines coming after a splitter if there are no markers there
        trailing = _TRAILING_SPLITTER_PATTERN.search(markers)
        if trailing:
            return self._cut(lines, markers, trailing.start(), len(lines) - 1, "trailing_splitter")

        quotation = _QUOTATION_PATTERN.search(markers)
        if quotation:
            return self._cut(lines, markers, quotation.start(1), quotation.end(1) - 1, "quotation")

        quotation = _EMPTY_QUOTATION_PATTERN.search(markers)
        if quotation:
            return self._cut(lines, markers, quotation.start(1), quotation.end(1) - 1, "empty_quotation")

        return self._uncut(lines, is_forwarded=False, rule=None)

    def _cut(self, lines: tuple[str, ...], markers: str, first: int, last: int, rule: Rule) -> Resolution:
        """Remove lines first..last (inclusive)."""
        logger.debug("Rule %s cuts lines %d-%d: %s", rule, first, last, markers)
        return Resolution(
            lines=lines[:first] + lines[last + 1 :],
            was_cut=True,
            first_cut=first,
            last_cut=last,
            is_forwarded=False,
            splitter_lines=tuple(index for index in range(first, last + 1) if markers[index] == "s"),
            rule=rule,
        )

    def _uncut(self, lines: tuple[str, ...], *, is_forwarded: bool, rule: Rule | None) -> Resolution:
        return Resolution(
            lines=lines,
            was_cut=False,
            first_cut=-1,
            last_cut=-1,
            is_forwarded=is_forwarded,
            splitter_lines=(),
            rule=rule,
        )
