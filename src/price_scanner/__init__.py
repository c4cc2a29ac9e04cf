"""Price Scanner - search-driven USD/MXN price discovery."""

from .errors import (
    FetchTimeout,
    NetworkError,
    NoCandidates,
    ScanError,
    StructuredDataParseError,
    TooManyRedirects,
)
from .extractor import MagnitudePolicy, PriceExtractor, normalize_price
from .fetcher import Fetcher
from .models import (
    AggregateReport,
    Currency,
    CurrencyStats,
    PriceSet,
    ProductInfo,
    ScanResult,
    SearchCandidate,
)
from .reporter import ReportRenderer, aggregate, render_report
from .scanner import PriceScanner, ScanContext
from .search_parser import parse_search_results, resolve_result_url

__all__ = [
    "AggregateReport",
    "Currency",
    "CurrencyStats",
    "FetchTimeout",
    "Fetcher",
    "MagnitudePolicy",
    "NetworkError",
    "NoCandidates",
    "PriceExtractor",
    "PriceScanner",
    "PriceSet",
    "ProductInfo",
    "ReportRenderer",
    "ScanContext",
    "ScanError",
    "ScanResult",
    "SearchCandidate",
    "StructuredDataParseError",
    "TooManyRedirects",
    "aggregate",
    "normalize_price",
    "parse_search_results",
    "render_report",
    "resolve_result_url",
]
