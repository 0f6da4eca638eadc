"""Splitter patterns: lines that announce the start of a quoted message.

A splitter may be spread across several lines ("On <date>, Bob <" on one
line, "bob@example.com> wrote:" on the next), so every pattern is matched
against a window of consecutive lines joined by newlines. Patterns are
tried in priority order and the first match wins.
"""

import re

from quoteless.patterns.locales import alternation

# On 11-Apr-2011, at 6:54 PM, Bob <bob@example.com> wrote:
ON_DATE_SOMEBODY_WROTE = re.compile(
    r"-{{0,100}}[>]?[ ]?({openings})[ ].{{0,100}}({separators})"
    r"(.*\n){{0,2}}.{{0,100}}({endings}):?-{{0,100}}".format(
        openings=alternation("on_date_somebody_wrote", "openings"),
        separators=alternation("on_date_somebody_wrote", "separators"),
        endings=alternation("on_date_somebody_wrote", "endings"),
    )
)

# Op 13-02-2014 3:18 schreef Julius Caesar <pantheon@rome.com>:
ON_DATE_WROTE_SOMEBODY = re.compile(
    r"-{{0,100}}[>]?[ ]?({openings})[ ].{{0,100}}(.*\n){{0,2}}"
    r".{{0,100}}({endings})[ ]*.{{0,100}}:".format(
        openings=alternation("on_date_wrote_somebody", "openings"),
        endings=alternation("on_date_wrote_somebody", "endings"),
    )
)

# -----Original Message----- or ---- Reply Message ----
ORIGINAL_MESSAGE = re.compile(
    r"[\s]*[-]+[ ]*({banners})[ ]*[-]+".format(banners=alternation("original_message")),
    re.IGNORECASE,
)

# Two or more header lines, each optionally followed by one wrapped line:
# From: Bob <bob@example.com>
# Date: Fri, 23 Mar 2012 12:35:31 -0600
FROM_COLON_OR_DATE_COLON = re.compile(
    r"((_+\r?\n)?[\s]*:?[*]?({fields})[\s]?:([^\n$]+\n){{1,2}}){{2,}}".format(
        fields=alternation("header_fields")
    ),
    re.IGNORECASE | re.MULTILINE,
)

# ---- John Smith wrote ----
ANDROID_WROTE = re.compile(
    r"[\s]*[-]+.*({endings})[ ]*[-]+".format(endings=alternation("android_wrote")),
    re.IGNORECASE,
)

SPLITTER_PATTERNS: tuple[re.Pattern[str], ...] = (
    ORIGINAL_MESSAGE,
    ON_DATE_SOMEBODY_WROTE,
    ON_DATE_WROTE_SOMEBODY,
    FROM_COLON_OR_DATE_COLON,
    # 02.04.2012 14:20 пользователь "bob@example.com" <
    # bob@xxx.mailgun.org> написал:
    re.compile(r"(\d+/\d+/\d+|\d+\.\d+\.\d+).*\s\S+@\S+", re.DOTALL),
    # 2014-10-17 11:28 GMT+03:00 Bob <
    # bob@example.com>:
    re.compile(r"\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}\s+GMT.*\s\S+@\S+", re.DOTALL),
    # Thu, 26 Jun 2014 14:00:51 +0400 Bob <bob@example.com>:
    re.compile(r"\S{3,10}, \d\d? \S{3,10} 20\d\d,? \d\d?:\d\d(:\d\d)?( \S+){3,6}@\S+:"),
    # Sent from Samsung MobileName <address@example.com> wrote:
    re.compile(r"Sent from Samsung.{0,100}@.{0,100}> wrote"),
    ANDROID_WROTE,
)


def match_splitter(text: str) -> re.Match[str] | None:
    """Match a splitter at the start of a window of lines.

    Args:
        text: One or more lines joined by newlines.

    Returns:
        The first matching splitter, or None.
    """
    for pattern in SPLITTER_PATTERNS:
        match = pattern.match(text)
        if match:
            return match
    return None


def is_splitter_line(text: str) -> bool:
    """Check whether a splitter starts at the beginning of the text."""
    return match_splitter(text) is not None
