"""Aggregation and text report rendering.

Live scan results and the offline demo dataset both go through
``aggregate()`` and ``render_report()``; there is no other statistics code.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .models import AggregateReport, Currency, CurrencyStats, ScanResult
from .utils import truncate

TITLE_LIMIT = 80
DESCRIPTION_LIMIT = 120
PRICES_PER_RESULT = 10
RULE_WIDTH = 60

_CENTS = Decimal("0.01")


def aggregate(results: list[ScanResult]) -> AggregateReport:
    """Compute per-currency statistics over every price in ``results``.

    Prices are pooled across pages without cross-page deduplication. A
    currency with no values at all is left out of the report.
    """
    stats: dict[Currency, CurrencyStats] = {}
    for currency in Currency:
        values = [v for r in results for v in r.prices.get(currency)]
        if not values:
            continue
        average = (sum(values, Decimal(0)) / len(values)).quantize(
            _CENTS, rounding=ROUND_HALF_UP
        )
        stats[currency] = CurrencyStats(
            currency=currency,
            count=len(values),
            minimum=min(values),
            maximum=max(values),
            average=average,
        )
    return AggregateReport(stats=stats, pages_scanned=len(results))


def format_amount(value: Decimal) -> str:
    """Format as ``$1234.50`` (two decimals, no grouping)."""
    return f"${value.quantize(_CENTS, rounding=ROUND_HALF_UP)}"


class ReportRenderer:
    """
    Renders scan results as a plain-text report using a Jinja2 template.

    Usage:
        renderer = ReportRenderer()
        text = renderer.render(results, "wireless headphones")
    """

    def __init__(self, templates_dir: Optional[Path] = None):
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, results: list[ScanResult], search_term: str) -> str:
        """Render the full report for one batch of results."""
        template = self.env.get_template("report.txt.jinja2")
        return template.render(**self.build_context(results, search_term))

    def build_context(
        self, results: list[ScanResult], search_term: str
    ) -> dict[str, Any]:
        """Pre-format every value the template prints."""
        report = aggregate(results)
        # Fixed currency order in the summary, absent currencies skipped
        present = [report.get(c) for c in Currency if report.get(c) is not None]
        return {
            "search_term": search_term,
            "rule": "=" * RULE_WIDTH,
            "thin_rule": "-" * RULE_WIDTH,
            "sections": [self._section(r) for r in results],
            "summary": [
                {
                    "code": stat.currency.value,
                    "count": stat.count,
                    "range": f"{format_amount(stat.minimum)} - {format_amount(stat.maximum)}",
                    "average": format_amount(stat.average),
                }
                for stat in present
            ],
            "pages_scanned": report.pages_scanned,
        }

    @staticmethod
    def _section(result: ScanResult) -> dict[str, Any]:
        currencies = []
        for currency in Currency:
            values = result.prices.get(currency)
            code = currency.value
            if values:
                listing = ", ".join(
                    f"{format_amount(v)} {code}" for v in values[:PRICES_PER_RESULT]
                )
            else:
                listing = "No prices found"
            price_range = None
            if len(values) > 1:
                price_range = f"{format_amount(min(values))} - {format_amount(max(values))}"
            currencies.append({"code": code, "listing": listing, "range": price_range})

        return {
            "rank": result.rank,
            "title": truncate(result.title, TITLE_LIMIT),
            "url": result.url,
            "description": truncate(result.description, DESCRIPTION_LIMIT, "..."),
            "currencies": currencies,
            "error": result.error,
        }


def render_report(results: list[ScanResult], search_term: str) -> str:
    """Convenience wrapper around ``ReportRenderer().render``."""
    return ReportRenderer().render(results, search_term)
