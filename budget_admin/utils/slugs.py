"""URL slug generation for budget names."""

from __future__ import annotations

import re
import unicodedata

_NON_WORD = re.compile(r"[^a-z0-9\-_]+")
_REPEATED_DASH = re.compile(r"-{2,}")


def parameterize(text: str) -> str:
    """Lowercase ASCII slug: accents stripped, separators collapsed to "-".

    >>> parameterize("M30 - Summer campaign")
    'm30-summer-campaign'
    """
    ascii_text = (
        unicodedata.normalize("NFKD", text)
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    slug = _NON_WORD.sub("-", ascii_text)
    slug = _REPEATED_DASH.sub("-", slug)
    return slug.strip("-")


def unique_slug(base: str, taken: set[str]) -> str:
    """Return ``base`` or the first ``base-N`` (N >= 2) not in ``taken``."""
    candidate = base
    suffix = 2
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate
