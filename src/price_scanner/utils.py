"""Text helpers shared by the parser, extractor and reporter."""

from __future__ import annotations

import re

_WS_RE = re.compile(r"\s+")


def collapse_whitespace(value: str | None) -> str:
    """Collapse runs of whitespace in already-decoded text and strip the ends.

    BeautifulSoup's ``get_text()`` and attribute values are decoded once
    already; decoding them again would turn ``&amp;amp;`` into ``&``.
    """
    if not value:
        return ""
    return _WS_RE.sub(" ", value).strip()


def truncate(value: str, limit: int, suffix: str = "") -> str:
    """Cut ``value`` to ``limit`` characters, appending ``suffix`` when cut."""
    if len(value) <= limit:
        return value
    return value[:limit] + suffix
