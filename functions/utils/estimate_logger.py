"""Console Estimate Logger for RenoQuote.

Provides highly visible, formatted console output for estimates,
contractor pricing and quotes, with banners that stand out in a terminal.
"""

import json
import structlog
from typing import Dict, Any, Iterable, Mapping, Optional
from datetime import datetime, timezone

from models.estimate import ContractorPricing, Estimate
from models.quote import Quote

logger = structlog.get_logger(__name__)

# Visual markers for different log types
BANNER_WIDTH = 80
ESTIMATE_BANNER_CHAR = "═"
PRICING_BANNER_CHAR = "─"
QUOTE_BANNER_CHAR = "░"


def _create_banner(char: str, text: str, width: int = BANNER_WIDTH) -> str:
    """Create a centered banner with given character."""
    text_with_spaces = f" {text} "
    padding = (width - len(text_with_spaces)) // 2
    return char * padding + text_with_spaces + char * (width - padding - len(text_with_spaces))


def _format_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format dictionary as pretty JSON string."""
    try:
        return json.dumps(data, indent=indent, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(data)


def _money(value: float) -> str:
    return f"${value:,.0f}"


def log_estimate(estimate: Estimate, form_data: Optional[Dict[str, Any]] = None) -> None:
    """Print an estimate with its materials table."""
    timestamp = datetime.now(timezone.utc).isoformat()
    status = "ZERO ESTIMATE" if estimate.is_zero else "ESTIMATE"

    print("\n")
    print(ESTIMATE_BANNER_CHAR * BANNER_WIDTH)
    print(_create_banner(ESTIMATE_BANNER_CHAR, f"{status}: {estimate.template_id.upper()}"))
    print(ESTIMATE_BANNER_CHAR * BANNER_WIDTH)
    print(f"║ Timestamp      : {timestamp}")
    print(f"║ Complexity     : {estimate.complexity or 'n/a'}")
    print(f"║ Estimated Time : {estimate.estimated_time or 'n/a'}")
    print(ESTIMATE_BANNER_CHAR * BANNER_WIDTH)

    if estimate.materials:
        print("║ MATERIALS:")
        for line in estimate.materials:
            print(f"║   • {line.item:<40} {line.quantity:>12}  {_money(line.total_price):>10}")
        print(ESTIMATE_BANNER_CHAR * BANNER_WIDTH)

    print(f"║ Material Cost  : {_money(estimate.material_cost)}")
    print(f"║ Labor Hours    : {estimate.labor_hours}")
    print(f"║ Transportation : {_money(estimate.transportation)}")
    print(f"║ Disposal       : {_money(estimate.disposal)}")
    print(f"║ TOTAL          : {_money(estimate.total)} (before labor)")

    if form_data:
        print(ESTIMATE_BANNER_CHAR * BANNER_WIDTH)
        print("║ FORM DATA:")
        for line in _format_json(form_data).split('\n'):
            print(f"  {line}")

    print(ESTIMATE_BANNER_CHAR * BANNER_WIDTH)
    print("\n")

    logger.info(
        "estimate_logged",
        template_id=estimate.template_id,
        total=estimate.total,
        labor_hours=estimate.labor_hours
    )


def log_contractor_pricing(pricing: Mapping[str, ContractorPricing], names: Optional[Mapping[str, str]] = None) -> None:
    """Print per-contractor totals side by side."""
    names = names or {}

    print(PRICING_BANNER_CHAR * BANNER_WIDTH)
    print(_create_banner(PRICING_BANNER_CHAR, "CONTRACTOR PRICING"))
    print(PRICING_BANNER_CHAR * BANNER_WIDTH)
    for contractor_id, p in pricing.items():
        name = names.get(contractor_id, contractor_id)
        print(f"│ {name:<20} ${p.hourly_rate:g}/hr")
        print(f"│   Labor {_money(p.labor_cost)}  Subtotal {_money(p.subtotal)}  "
              f"Fee {_money(p.platform_fee)}  GST {_money(p.gst)}  Total {_money(p.total)}")
    print(PRICING_BANNER_CHAR * BANNER_WIDTH)
    print("\n")

    logger.info("contractor_pricing_logged", contractors=list(pricing.keys()))


def log_quotes(quotes: Iterable[Quote]) -> None:
    """Print received quotes with the price range."""
    quotes = list(quotes)

    print(QUOTE_BANNER_CHAR * BANNER_WIDTH)
    print(_create_banner(QUOTE_BANNER_CHAR, f"{len(quotes)} QUOTE(S) RECEIVED"))
    print(QUOTE_BANNER_CHAR * BANNER_WIDTH)
    for quote in quotes:
        print(f"░ {quote.contractor_id:<16} {_money(quote.total):>10}  \"{quote.message}\"")
    if quotes:
        totals = [q.total for q in quotes]
        print(QUOTE_BANNER_CHAR * BANNER_WIDTH)
        print(f"░ Price range  : {_money(min(totals))} - {_money(max(totals))}")
    print(QUOTE_BANNER_CHAR * BANNER_WIDTH)
    print("\n")

    logger.info("quotes_logged", count=len(quotes))
