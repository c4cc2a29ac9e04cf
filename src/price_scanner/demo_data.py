"""
Canned scan results for offline/demo mode.
Same shape as live ScanResults so they render through the same report.
"""

from .models import PriceSet, ScanResult

_DEMO_ROWS = [
    (
        "{item} - Premium Quality - Best Electronics Store",
        "https://electronics-store.com/product/12345",
        "High quality {item} with warranty. Fast shipping available.",
        ["49.99", "59.99", "44.99"],
        ["899.00", "1099.00"],
    ),
    (
        "Buy {item} - Official Retailer",
        "https://official-shop.com/items/premium",
        "Authorized dealer for {item}. Original products guaranteed.",
        ["79.99", "89.99"],
        ["1499.00", "1699.00"],
    ),
    (
        "{item} - Budget Option - Value Store",
        "https://value-store.com/budget-items",
        "Affordable {item} options. Great quality at low prices.",
        ["24.99", "29.99", "19.99"],
        ["449.00", "549.00", "399.00"],
    ),
    (
        "{item} Bundle with Accessories",
        "https://bundle-deals.com/complete-package",
        "Complete {item} bundle. Includes carrying case and extras.",
        ["99.99", "119.99"],
        ["1899.00", "2199.00"],
    ),
    (
        "Refurbished {item} - Certified",
        "https://refurb-center.com/certified",
        "Certified refurbished {item}. Like new condition with warranty.",
        ["34.99", "39.99"],
        ["649.00", "749.00"],
    ),
    (
        "{item} Pro Edition - Premium Features",
        "https://pro-gear.com/premium-edition",
        "Professional grade {item} with advanced features.",
        ["149.99", "179.99"],
        ["2799.00", "3299.00"],
    ),
    (
        "{item} - Marketplace Deals",
        "https://marketplace.com/deals/electronics",
        "Multiple sellers offering {item} at competitive prices.",
        ["42.50", "55.00", "38.99"],
        ["799.00", "999.00", "699.00"],
    ),
    (
        "Import {item} - International Shop",
        "https://global-import.com/products",
        "Imported {item} with international warranty.",
        ["65.00", "72.00"],
        ["1199.00", "1349.00"],
    ),
]


def demo_results(item: str) -> list[ScanResult]:
    """Build the fixed offline dataset, with ``item`` woven into the text."""
    return [
        ScanResult(
            rank=rank,
            title=title.format(item=item),
            url=url,
            description=description.format(item=item),
            prices=PriceSet.from_values(usd=usd, mxn=mxn),
        )
        for rank, (title, url, description, usd, mxn) in enumerate(_DEMO_ROWS, start=1)
    ]
