"""Exceptions raised along the fetch → parse → extract pipeline."""

from __future__ import annotations


class ScanError(Exception):
    """Base class for every recoverable scan failure."""


class NetworkError(ScanError):
    """Raised when a connection could not be established or broke mid-request."""


class FetchTimeout(ScanError):
    """Raised when no complete response arrived within the fetch deadline."""


class TooManyRedirects(ScanError):
    """Raised when a redirect chain exhausts the redirect budget."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Too many redirects: {url}")
        self.url = url


class StructuredDataParseError(ScanError):
    """Raised when one JSON-LD block is malformed."""


class NoCandidates(ScanError):
    """Raised when a search page yields no usable result entries."""

    def __init__(self, search_term: str) -> None:
        super().__init__(f"No search results for '{search_term}'")
        self.search_term = search_term
