"""Link patterns.

A link wrapped in angle brackets may be broken across lines by the
sending client so that its closing ">" starts a new line, where it would
be taken for a quotation marker. Such links are rewritten to a neutral
"@@...@@" form before line classification and restored afterwards.
"""

import re

BRACKET_LINK = re.compile(r"<(https?://[^>]*)>")

NORMALIZED_LINK = re.compile(r"@@(https?://[^>]*?)@@")

# A link opened by "(", "[", "<" or its normalized "@@" form.
ENCLOSED_LINK = re.compile(r"(?:\(|\[|<|@@)https?://")


def has_enclosed_link(line: str) -> bool:
    """Check if a line contains an enclosed link anywhere."""
    return ENCLOSED_LINK.search(line) is not None


def starts_with_enclosed_link(line: str) -> bool:
    """Check if a line, ignoring leading whitespace, opens with an enclosed link."""
    return ENCLOSED_LINK.match(line.strip()) is not None
