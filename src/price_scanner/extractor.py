"""Price extraction from arbitrary page markup.

Three independent strategies feed one PriceSet per page:

1. Pattern bank: regexes per currency for explicit markers ("$49.99 USD",
   "MXN $1,299", "US$ 20", "350 pesos"), plus a generic "$ amount" pattern
   whose matches are bucketed by ``MagnitudePolicy``.
2. Structured data: JSON-LD blocks are walked recursively for
   ``price``/``priceCurrency``, ``offers`` and ``lowPrice``/``highPrice``.
3. Markup heuristic: elements that look like price containers (class/id
   containing "price", ``itemprop="price"``, ``data-price``) have their text
   re-run through the pattern bank. This catches prices split across tags,
   e.g. ``<span class="price">$<b>49</b>.99</span>``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from bs4 import BeautifulSoup, Tag

from ..common.config import HeuristicSettings
from .errors import StructuredDataParseError
from .models import PRIMARY_CURRENCY, Currency, PriceSet, ProductInfo
from .utils import collapse_whitespace

logger = logging.getLogger(__name__)

# "$1,299.00" / "$ 49" style amount directly after a marker
_AMOUNT = r"(\d[\d,]*(?:\.\d{1,2})?)"
# Amount standing on its own before a suffix marker ("1,299.00 MXN")
_BARE_AMOUNT = r"(?<![\d.,])(\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"

PATTERN_BANK: dict[Currency, list[re.Pattern[str]]] = {
    Currency.USD: [
        re.compile(r"\$\s*" + _AMOUNT + r"\s*(?:USD|dollars?)\b", re.I),
        re.compile(r"\bUSD\s*\$?\s*" + _AMOUNT, re.I),
        re.compile(r"\bUS\$\s*" + _AMOUNT, re.I),
        re.compile(_BARE_AMOUNT + r"\s*(?:USD|dollars?)\b", re.I),
    ],
    Currency.MXN: [
        re.compile(r"\$\s*" + _AMOUNT + r"\s*(?:MXN|pesos?)\b", re.I),
        re.compile(r"\bMXN\s*\$?\s*" + _AMOUNT, re.I),
        re.compile(r"\bMX\$\s*" + _AMOUNT, re.I),
        re.compile(_BARE_AMOUNT + r"\s*(?:MXN|pesos?)\b", re.I),
    ],
}

GENERIC_PATTERN = re.compile(r"\$\s*" + _AMOUNT)

_STRIP_RE = re.compile(r"[,$\s]")
_JSON_LD_TYPE = re.compile(r"application/ld\+json", re.I)


@dataclass(frozen=True)
class MagnitudePolicy:
    """Guess the currency of a ``$`` amount that has no currency marker.

    This is an approximation, not currency detection: amounts between
    ``mxn_floor`` and ``mxn_ceiling`` (exclusive) are taken as MXN, otherwise
    amounts below ``usd_ceiling`` are taken as USD, and anything else is
    dropped. Items whose typical price falls outside these bands will be
    mis-bucketed.
    """

    mxn_floor: Decimal = Decimal("500")
    mxn_ceiling: Decimal = Decimal("100000")
    usd_ceiling: Decimal = Decimal("10000")

    def classify(self, value: Decimal) -> Currency | None:
        if self.mxn_floor < value < self.mxn_ceiling:
            return Currency.MXN
        if 0 < value < self.usd_ceiling:
            return Currency.USD
        return None

    @classmethod
    def from_settings(cls, heuristic: HeuristicSettings) -> MagnitudePolicy:
        return cls(
            mxn_floor=Decimal(str(heuristic.mxn_floor)),
            mxn_ceiling=Decimal(str(heuristic.mxn_ceiling)),
            usd_ceiling=Decimal(str(heuristic.usd_ceiling)),
        )


def normalize_price(raw: Any) -> Decimal | None:
    """Turn a price string or number into a Decimal.

    Thousands separators, ``$`` and whitespace are stripped. Anything that
    is still not a finite number yields None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    cleaned = _STRIP_RE.sub("", str(raw))
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_structured_block(raw: str | None) -> Any:
    """Decode one JSON-LD block.

    Raises:
        StructuredDataParseError: Block is empty, not valid JSON, or nested
            too deeply for the decoder.
    """
    if not raw or not raw.strip():
        raise StructuredDataParseError("Empty JSON-LD block")
    try:
        return json.loads(raw, strict=False)
    except (ValueError, RecursionError) as exc:
        raise StructuredDataParseError(f"Malformed JSON-LD block: {exc}") from exc


class PriceExtractor:
    """Extract USD and MXN prices from markup or plain text.

    Usage:
        extractor = PriceExtractor()
        info = extractor.extract_product_info(html, url)
        info.prices.usd  # [Decimal("44.99"), Decimal("49.99")]

    The extractor holds no per-page state; calling it twice on the same
    input yields identical results.
    """

    def __init__(self, policy: MagnitudePolicy | None = None) -> None:
        self.policy = policy or MagnitudePolicy()

    # --- Strategy 1: pattern bank ---

    def extract_prices(self, text: str) -> PriceSet:
        """Run the pattern bank over text and return a finalized PriceSet."""
        prices = PriceSet()
        self._scan_patterns(text, prices)
        return prices.finalize()

    def _scan_patterns(self, text: str, prices: PriceSet) -> None:
        explicit_spans: list[tuple[int, int]] = []

        for currency, patterns in PATTERN_BANK.items():
            for pattern in patterns:
                for match in pattern.finditer(text):
                    explicit_spans.append(match.span())
                    value = normalize_price(match.group(1))
                    if value is not None:
                        prices.add(currency, value)

        for match in GENERIC_PATTERN.finditer(text):
            start = match.start()
            if any(s <= start < e for s, e in explicit_spans):
                continue
            value = normalize_price(match.group(1))
            if value is None:
                continue
            currency = self.policy.classify(value)
            if currency is not None:
                prices.add(currency, value)

    # --- Strategy 2: structured data ---

    def extract_structured_prices(self, soup: BeautifulSoup, prices: PriceSet) -> None:
        """Walk every JSON-LD block; malformed blocks are skipped."""
        for script in soup.find_all("script", attrs={"type": _JSON_LD_TYPE}):
            try:
                data = parse_structured_block(script.string)
            except StructuredDataParseError as exc:
                logger.debug("Skipping JSON-LD block: %s", exc)
                continue
            self.walk_structured_data(data, prices)

    def walk_structured_data(self, data: Any, prices: PriceSet) -> None:
        """Collect prices from a decoded JSON-LD value into ``prices``.

        Walks with an explicit stack; nesting depth is unbounded.
        """
        stack = [data]
        while stack:
            node = stack.pop()
            if isinstance(node, list):
                stack.extend(node)
                continue
            if not isinstance(node, dict):
                continue

            if node.get("price") not in (None, ""):
                value = normalize_price(node["price"])
                currency = self._declared_currency(node.get("priceCurrency"))
                if value is not None and currency is not None:
                    prices.add(currency, value)

            # Range fields carry no currency of their own
            for key in ("lowPrice", "highPrice"):
                value = normalize_price(node.get(key))
                if value is not None:
                    prices.add(PRIMARY_CURRENCY, value)

            stack.extend(
                child for child in node.values() if isinstance(child, (dict, list))
            )

    @staticmethod
    def _declared_currency(raw: Any) -> Currency | None:
        code = str(raw or "").strip().upper()
        if not code:
            return PRIMARY_CURRENCY
        try:
            return Currency(code)
        except ValueError:
            logger.debug("Ignoring price in unsupported currency %s", code)
            return None

    # --- Strategy 3: markup heuristic ---

    def extract_markup_prices(self, soup: BeautifulSoup, prices: PriceSet) -> None:
        """Re-run the pattern bank over likely price containers."""
        for element in soup.find_all(_looks_like_price_element):
            self._scan_patterns(collapse_whitespace(element.get_text()), prices)
            for attr in ("data-price", "content"):
                value = element.get(attr)
                if isinstance(value, str) and value.strip():
                    self._scan_patterns(value, prices)

    # --- Page-level entry point ---

    def extract_product_info(self, html: str, url: str) -> ProductInfo:
        """Extract title, description and all prices from a product page."""
        soup = BeautifulSoup(html, "lxml")

        title = collapse_whitespace(soup.title.get_text()) if soup.title else ""

        description = ""
        meta = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
        if meta is not None:
            description = collapse_whitespace(meta.get("content", ""))

        prices = PriceSet()
        self._scan_patterns(html, prices)
        self.extract_structured_prices(soup, prices)
        self.extract_markup_prices(soup, prices)
        prices.finalize()

        return ProductInfo(
            title=title,
            description=description,
            prices=prices,
            source_url=url,
        )


def _looks_like_price_element(tag: Tag) -> bool:
    if tag.name in ("script", "style", "html", "body"):
        return False
    if tag.has_attr("data-price"):
        return True
    if str(tag.get("itemprop", "")).lower() == "price":
        return True
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    if any("price" in c.lower() for c in classes):
        return True
    return "price" in str(tag.get("id", "")).lower()
