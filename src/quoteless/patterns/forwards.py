"""Forwarded-message header detection.

A forwarded message is kept whole, so these patterns must only match the
banner a mail client writes above the forwarded copy, never prose that
merely mentions forwarding.
"""

import re

_FORWARD_PATTERNS: tuple[re.Pattern[str], ...] = (
    # ---------- Forwarded message ---------
    re.compile(r"^[-]+[ ]*Forwarded message[ ]*[-]+\s*$", re.IGNORECASE | re.MULTILINE),
    # Begin forwarded message:
    re.compile(r"^Begin forwarded message:?\s*$", re.IGNORECASE | re.MULTILINE),
)


def is_forward_line(line: str) -> bool:
    """Check if a line is a forwarded-message header.

    Args:
        line: A single line of text.

    Returns:
        True if the whole line is a forwarded-message banner.
    """
    stripped = line.strip()
    if not stripped:
        return False

    return any(pattern.match(stripped) for pattern in _FORWARD_PATTERNS)


def is_start_of_forwarded_message(text: str) -> bool:
    """Check if a block of text opens with a forwarded-message header.

    Examples of matches:
        ---------- Forwarded message ----------
        Begin forwarded message:

    Examples of non-matches:
        Sally forwarded this message
        See forwarded message below:

    Args:
        text: Text content of a block, possibly spanning several lines.

    Returns:
        True if the first non-blank line is a forwarded-message banner.
    """
    stripped = text.strip()
    if not stripped:
        return False

    return is_forward_line(stripped.splitlines()[0])
