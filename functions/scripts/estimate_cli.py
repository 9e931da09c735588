"""
Command-line estimate tool for RenoQuote.

Runs the estimate engine locally (no Firebase needed) and prints estimates,
per-contractor pricing, simulated quotes and technician payouts.

Usage:
  python scripts/estimate_cli.py templates
  python scripts/estimate_cli.py estimate deck-refresh -f deckLength=20 -f deckWidth=12 \\
      -f deckCondition=good -f stainType=semi-transparent --pricing
  python scripts/estimate_cli.py estimate firepit --form-file firepit.json --json
  python scripts/estimate_cli.py quotes deck-refresh --form-file deck.json -c contractor-1 -c contractor-3 --seed 7
  python scripts/estimate_cli.py payout 1000 --tier bronze
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from typing import Any, Dict, List

# Make `functions/` importable as the top-level module root
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import numpy as np  # noqa: E402

from config.errors import RenoQuoteError  # noqa: E402
from services.activity_sink import InMemoryActivitySink  # noqa: E402
from services.contractor_directory import list_contractors  # noqa: E402
from services.estimate_calculator import EstimateCalculator  # noqa: E402
from services.fee_service import calculate_contractor_total, calculate_technician_payout  # noqa: E402
from services.quote_simulation import QuoteSession  # noqa: E402
from services.technician_service import commission_rate_for_tier  # noqa: E402
from services.template_registry import registry  # noqa: E402
from utils.estimate_logger import log_contractor_pricing, log_estimate, log_quotes  # noqa: E402
from utils.logging_config import configure_logging  # noqa: E402
from validators.form_validator import validate_form_data  # noqa: E402


def _parse_value(raw: str) -> Any:
    """Interpret a -f value as JSON when possible (numbers, booleans, lists)."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _load_form(args: argparse.Namespace) -> Dict[str, Any]:
    form: Dict[str, Any] = {}
    if args.form_file:
        with open(args.form_file, "r", encoding="utf-8") as f:
            form.update(json.load(f))
    for item in args.field or []:
        if "=" not in item:
            raise SystemExit(f"Invalid field '{item}', expected key=value")
        key, raw = item.split("=", 1)
        form[key] = _parse_value(raw)
    return form


def _estimate(args: argparse.Namespace, sink: InMemoryActivitySink):
    template = registry.get_template(args.template_id)
    form = _load_form(args)

    result = validate_form_data(template, form)
    if not result.is_valid:
        for message in result.errors:
            print(f"  ✗ {message}", file=sys.stderr)
        if args.strict:
            raise SystemExit(2)

    calculator = EstimateCalculator(activity_sink=sink)
    return calculator.calculate(args.template_id, result.cleaned if result.is_valid else form), form


def cmd_templates(args: argparse.Namespace) -> int:
    for template in registry.list_templates():
        print(f"{template.icon}  {template.id:<18} {template.title:<24} "
              f"{template.complexity:<7} {template.estimated_time}")
    return 0


def cmd_estimate(args: argparse.Namespace) -> int:
    sink = InMemoryActivitySink()
    estimate, form = _estimate(args, sink)

    if args.json:
        payload: Dict[str, Any] = {"estimate": estimate.to_dict()}
        if args.pricing:
            payload["pricing"] = {
                c.id: calculate_contractor_total(estimate, c.hourly_rate).to_dict() for c in list_contractors()
            }
        print(json.dumps(payload, indent=2))
        return 0

    log_estimate(estimate, form)
    if args.pricing:
        contractors = list_contractors()
        log_contractor_pricing(
            {c.id: calculate_contractor_total(estimate, c.hourly_rate) for c in contractors},
            names={c.id: c.name for c in contractors},
        )
    return 0


def cmd_quotes(args: argparse.Namespace) -> int:
    sink = InMemoryActivitySink()
    estimate, _ = _estimate(args, sink)

    session = QuoteSession(
        project_id="cli",
        estimate=estimate,
        activity_sink=sink,
        rng=np.random.default_rng(args.seed),
        delay_seconds=args.delay,
    )

    async def run() -> int:
        result = await session.request_quotes(args.contractor or [])
        if not result.accepted:
            print(result.message, file=sys.stderr)
            return 2
        quotes = await session.wait_for_quotes()
        log_quotes(quotes.values())
        return 0

    return asyncio.run(run())


def cmd_payout(args: argparse.Namespace) -> int:
    rate = commission_rate_for_tier(args.tier) if args.tier else args.commission_rate
    payout = calculate_technician_payout(args.project_total, rate)
    print(json.dumps({"commissionRate": rate, **payout.model_dump(by_alias=True)}, indent=2))
    return 0


def _add_form_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("template_id", help="Template id (see `templates`)")
    parser.add_argument("-f", "--field", action="append", help="Form value as key=value (repeatable)")
    parser.add_argument("--form-file", help="JSON file with form data")
    parser.add_argument("--strict", action="store_true", help="Exit on form validation errors")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RenoQuote estimate engine")
    parser.add_argument("--log-level", default=None, help="Log level (defaults to LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("templates", help="List project templates").set_defaults(func=cmd_templates)

    p_estimate = sub.add_parser("estimate", help="Calculate an estimate")
    _add_form_args(p_estimate)
    p_estimate.add_argument("--pricing", action="store_true", help="Include per-contractor pricing")
    p_estimate.add_argument("--json", action="store_true", help="Print JSON instead of banners")
    p_estimate.set_defaults(func=cmd_estimate)

    p_quotes = sub.add_parser("quotes", help="Simulate contractor quotes")
    _add_form_args(p_quotes)
    p_quotes.add_argument("-c", "--contractor", action="append", help="Contractor id (repeatable)")
    p_quotes.add_argument("--seed", type=int, default=None, help="Random seed for reproducible quotes")
    p_quotes.add_argument("--delay", type=float, default=0.0, help="Simulated response delay in seconds")
    p_quotes.set_defaults(func=cmd_quotes)

    p_payout = sub.add_parser("payout", help="Technician payout for a project total")
    p_payout.add_argument("project_total", type=float)
    group = p_payout.add_mutually_exclusive_group(required=True)
    group.add_argument("--commission-rate", type=float, help="Commission percent (0-100)")
    group.add_argument("--tier", choices=["gold", "silver", "bronze", "new"])
    p_payout.set_defaults(func=cmd_payout)

    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except RenoQuoteError as e:
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
