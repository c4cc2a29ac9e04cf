"""Data models for price scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class Currency(str, Enum):
    """Currencies the extractor buckets prices into."""
    USD = "USD"  # primary
    MXN = "MXN"  # secondary


PRIMARY_CURRENCY = Currency.USD
SECONDARY_CURRENCY = Currency.MXN

# Sanity ceilings: anything at or above is extraction noise (phone numbers,
# SKUs, concatenated digits).
CURRENCY_CEILINGS: dict[Currency, Decimal] = {
    Currency.USD: Decimal("1000000"),
    Currency.MXN: Decimal("10000000"),
}


@dataclass
class PriceSet:
    """Prices found for one page (or one text fragment), keyed by currency.

    Values accumulate unordered during extraction; ``finalize()``
    deduplicates, sorts ascending and applies the currency ceilings.
    """

    values: dict[Currency, list[Decimal]] = field(
        default_factory=lambda: {currency: [] for currency in Currency}
    )

    def add(self, currency: Currency, value: Decimal) -> None:
        self.values[currency].append(value)

    def extend(self, other: PriceSet) -> None:
        for currency in Currency:
            self.values[currency].extend(other.values[currency])

    def get(self, currency: Currency) -> list[Decimal]:
        return self.values[currency]

    @property
    def usd(self) -> list[Decimal]:
        return self.values[PRIMARY_CURRENCY]

    @property
    def mxn(self) -> list[Decimal]:
        return self.values[SECONDARY_CURRENCY]

    def is_empty(self) -> bool:
        return not any(self.values.values())

    def finalize(self) -> PriceSet:
        """Deduplicate, sort ascending and drop out-of-range values in place."""
        for currency in Currency:
            ceiling = CURRENCY_CEILINGS[currency]
            kept = {v for v in self.values[currency] if 0 < v < ceiling}
            self.values[currency] = sorted(kept)
        return self

    @classmethod
    def from_values(
        cls,
        usd: list[Decimal | str | float] | None = None,
        mxn: list[Decimal | str | float] | None = None,
    ) -> PriceSet:
        """Build a finalized PriceSet from plain number lists."""
        prices = cls()
        for value in usd or []:
            prices.add(PRIMARY_CURRENCY, Decimal(str(value)))
        for value in mxn or []:
            prices.add(SECONDARY_CURRENCY, Decimal(str(value)))
        return prices.finalize()


@dataclass(frozen=True)
class SearchCandidate:
    """A single entry parsed from a search-results page."""

    title: str
    url: str
    snippet: str = ""


@dataclass
class ProductInfo:
    """Metadata and prices extracted from one fetched candidate page."""

    title: str
    description: str
    prices: PriceSet
    source_url: str


@dataclass
class ScanResult:
    """Outcome of visiting one candidate, successful or not."""

    rank: int
    title: str
    url: str
    description: str
    prices: PriceSet = field(default_factory=PriceSet)
    error: str | None = None
    initial_snippet: str = ""


@dataclass(frozen=True)
class CurrencyStats:
    """Summary statistics over every price seen in one currency."""

    currency: Currency
    count: int
    minimum: Decimal
    maximum: Decimal
    average: Decimal


@dataclass(frozen=True)
class AggregateReport:
    """Per-currency statistics across a batch. Empty currencies are absent."""

    stats: dict[Currency, CurrencyStats]
    pages_scanned: int

    def get(self, currency: Currency) -> CurrencyStats | None:
        return self.stats.get(currency)
