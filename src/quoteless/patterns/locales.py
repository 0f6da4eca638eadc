"""Per-language trigger words for splitter detection.

The word tables live in locales.yaml next to this module so they can be
extended without touching the pattern code.
"""

import re
from functools import lru_cache
from pathlib import Path

import yaml

_LOCALES_PATH = Path(__file__).parent / "locales.yaml"


@lru_cache(maxsize=1)
def load_locales() -> dict:
    """Load the trigger word tables.

    Returns:
        Mapping of table name to word list (or to a mapping of word lists).
    """
    with open(_LOCALES_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f)


def words(*path: str) -> tuple[str, ...]:
    """Get one word list from the tables.

    Args:
        path: Keys leading to the list, e.g. ("on_date_somebody_wrote", "endings").

    Returns:
        Tuple of words as strings.
    """
    node = load_locales()
    for key in path:
        node = node[key]
    return tuple(str(word) for word in node)


def alternation(*path: str) -> str:
    """Build a regex alternation from one word list."""
    return "|".join(re.escape(word) for word in words(*path))
