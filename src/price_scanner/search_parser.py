"""Search-results page parser.

Works on the markup of DuckDuckGo's HTML endpoint: each hit carries an
``a.result__a`` link and an ``a.result__snippet`` excerpt. Result links are
wrapped in a redirect (``//duckduckgo.com/l/?uddg=<encoded destination>``)
that is unwrapped here so downstream code fetches the real page.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup

from .models import SearchCandidate
from .utils import collapse_whitespace

logger = logging.getLogger(__name__)

RESULT_LINK_SELECTOR = "a.result__a"
SNIPPET_SELECTOR = "a.result__snippet"
DESTINATION_PARAM = "uddg"
DEFAULT_ENGINE_DOMAIN = "duckduckgo.com"


def resolve_result_url(href: str) -> str | None:
    """Unwrap a search-engine redirect link into its destination URL.

    Returns None when the href is empty or the embedded destination is blank.
    """
    href = (href or "").strip()
    if not href:
        return None

    query = urlsplit(href).query
    if DESTINATION_PARAM in query:
        params = parse_qs(query)
        if DESTINATION_PARAM in params:
            destination = params[DESTINATION_PARAM][0].strip()
            return destination or None

    if href.startswith("//"):
        return "https:" + href
    return href


def parse_search_results(
    html: str,
    search_term: str = "",
    engine_domain: str = DEFAULT_ENGINE_DOMAIN,
) -> list[SearchCandidate]:
    """Parse a search-results page into ranked candidates.

    Args:
        html: Raw search-results markup.
        search_term: Original query, used for logging only.
        engine_domain: Destinations still pointing here (ads, internal
            links) are dropped.

    Returns:
        Candidates in search-engine order.
    """
    soup = BeautifulSoup(html, "lxml")
    links = soup.select(RESULT_LINK_SELECTOR)
    snippets = [
        collapse_whitespace(a.get_text(" ")) for a in soup.select(SNIPPET_SELECTOR)
    ]

    candidates: list[SearchCandidate] = []
    # Pair by raw position so a dropped link never shifts later snippets
    for position, link in enumerate(links):
        url = resolve_result_url(link.get("href", ""))
        if not url or engine_domain in url:
            logger.debug("Skipping result link %r", link.get("href"))
            continue

        title = collapse_whitespace(link.get_text(" ")) or "Unknown"
        snippet = snippets[position] if position < len(snippets) else ""
        candidates.append(SearchCandidate(title=title, url=url, snippet=snippet))

    logger.info(
        "Parsed %d candidates for '%s' (%d raw links)",
        len(candidates),
        search_term,
        len(links),
    )
    return candidates
