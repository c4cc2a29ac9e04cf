"""Deep-scan orchestrator.

Searches for an item, then visits the top-ranked result pages one by one
and extracts prices from each. A page that fails to load or parse becomes a
ScanResult carrying the error; it never aborts the batch.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from urllib.parse import quote

from ..common.config import Settings
from .errors import NoCandidates, ScanError
from .extractor import MagnitudePolicy, PriceExtractor
from .fetcher import Fetcher
from .models import PriceSet, ScanResult, SearchCandidate
from .search_parser import parse_search_results
from .utils import truncate

logger = logging.getLogger(__name__)


@dataclass
class ScanContext:
    """State of one ``scan()`` call. Nothing in it outlives the call."""

    item: str
    query: str
    search_url: str
    max_pages: int
    candidates: list[SearchCandidate] = field(default_factory=list)
    results: list[ScanResult] = field(default_factory=list)


class PriceScanner:
    """Search for an item and scan the top result pages for prices.

    Usage:
        with PriceScanner(settings) as scanner:
            results = scanner.scan("wireless headphones")

    Pages are visited sequentially in rank order unless
    ``settings.scraper.max_workers`` is above 1, in which case they are
    fetched on a thread pool. Ranks and result order are the same in both
    modes.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: Fetcher | None = None,
        extractor: PriceExtractor | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._fetcher = fetcher or Fetcher(self.settings.scraper)
        self._extractor = extractor or PriceExtractor(
            MagnitudePolicy.from_settings(self.settings.heuristic)
        )

    def build_search_url(self, item: str) -> tuple[str, str]:
        """Return ``(query, url)`` for a purchase-intent search on ``item``."""
        scraper = self.settings.scraper
        query = f"{item} {scraper.query_suffix}".strip()
        return query, f"{scraper.search_url}?q={quote(query, safe='')}"

    def new_context(self, item: str) -> ScanContext:
        query, url = self.build_search_url(item)
        return ScanContext(
            item=item,
            query=query,
            search_url=url,
            max_pages=self.settings.scraper.max_pages,
        )

    def scan(self, item: str) -> list[ScanResult]:
        """Run a full search + deep scan for ``item``.

        Returns:
            One ScanResult per visited candidate, in rank order. Empty when
            the search page failed or yielded no candidates; callers fall
            back to offline data in that case.
        """
        ctx = self.new_context(item)
        logger.info("Looking for: '%s'", item)

        try:
            self.search(ctx)
        except NoCandidates:
            logger.warning("No results found in initial search for '%s'", item)
            return []
        except ScanError as exc:
            logger.warning("Search failed: %s", exc)
            return []

        self.visit_candidates(ctx)
        return ctx.results

    def search(self, ctx: ScanContext) -> list[SearchCandidate]:
        """Fetch and parse the search-results page into ``ctx.candidates``.

        Raises:
            ScanError: The search page could not be fetched.
            NoCandidates: The page parsed to zero usable entries.
        """
        logger.info("Fetching search results: %s", ctx.search_url)
        html = self._fetcher.fetch(ctx.search_url)
        ctx.candidates = parse_search_results(
            html,
            ctx.item,
            engine_domain=self.settings.scraper.search_engine_domain,
        )
        if not ctx.candidates:
            raise NoCandidates(ctx.item)

        logger.info(
            "Found %d initial results; scanning up to %d pages",
            len(ctx.candidates),
            ctx.max_pages,
        )
        return ctx.candidates

    def visit_candidates(self, ctx: ScanContext) -> list[ScanResult]:
        """Scan the first ``ctx.max_pages`` candidates into ``ctx.results``."""
        visited = ctx.candidates[: max(ctx.max_pages, 0)]
        ranked = list(enumerate(visited, start=1))
        workers = self.settings.scraper.max_workers

        if workers <= 1 or len(ranked) <= 1:
            for rank, candidate in ranked:
                ctx.results.append(self.scan_candidate(ctx, rank, candidate))
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                # map() yields in submission order, so ranks stay in order
                ctx.results.extend(
                    pool.map(lambda pair: self.scan_candidate(ctx, *pair), ranked)
                )

        return ctx.results

    def scan_candidate(
        self, ctx: ScanContext, rank: int, candidate: SearchCandidate
    ) -> ScanResult:
        """Fetch one candidate page and build its ScanResult.

        Any failure is recorded on the result instead of being raised.
        """
        total = min(len(ctx.candidates), ctx.max_pages)
        logger.info(
            "[%d/%d] Scanning: %s...", rank, total, truncate(candidate.url, 60)
        )

        try:
            html = self._fetcher.fetch(candidate.url)
            info = self._extractor.extract_product_info(html, candidate.url)
        except Exception as exc:
            if not isinstance(exc, ScanError):
                logger.debug("Unexpected error scanning %s", candidate.url, exc_info=True)
            logger.warning("[%d/%d] Failed to scan: %s", rank, total, exc)
            return ScanResult(
                rank=rank,
                title=candidate.title,
                url=candidate.url,
                description=candidate.snippet,
                prices=PriceSet().finalize(),
                error=str(exc) or type(exc).__name__,
                initial_snippet=candidate.snippet,
            )

        result = ScanResult(
            rank=rank,
            title=info.title or candidate.title,
            url=candidate.url,
            description=info.description or candidate.snippet,
            prices=info.prices,
            initial_snippet=candidate.snippet,
        )
        logger.info(
            "[%d/%d] Found %d USD prices, %d MXN prices",
            rank,
            total,
            len(result.prices.usd),
            len(result.prices.mxn),
        )
        return result

    def close(self) -> None:
        self._fetcher.close()

    def __enter__(self) -> PriceScanner:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
