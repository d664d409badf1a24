"""
Command-line interface for taxwizard-calc.

Usage:
    taxwizard-calc compute values.json --profile passive_owner
    taxwizard-calc calc calculateAGI values.json
    taxwizard-calc brackets --status married_filing_jointly
    taxwizard-calc estimate 42000 --rate 0.12
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path

import structlog

from . import __version__
from .calculators import bracket_breakdown, bracket_tax, quarterly_schedule, schedule_c_taxes
from .constants import DEFAULT_TAX_YEAR, FilingStatus, get_tax_constants
from .registry import calculate, calculation_names, compute_derived_fields
from .ssdi import check_ssdi_safeguards

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False):
    """Send structlog output to stderr so stdout stays parseable."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def load_values(path: Path) -> dict:
    """Read a JSON object of field id -> value."""
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object of field values")
    return data


def _emit(text: str, output: Path = None):
    if output:
        output.write_text(text + "\n")
        print(f"Wrote {output}", file=sys.stderr)
    else:
        print(text)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="taxwizard-calc",
        description="Compute tax return lines and SSDI risk from entered field values",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compute command
    compute_parser = subparsers.add_parser(
        "compute",
        help="Compute every derived line and the SSDI risk assessment",
    )
    compute_parser.add_argument("input", type=Path, help="JSON file of field values")
    compute_parser.add_argument(
        "--profile",
        default=None,
        help="Filer profile (SSDI checks run only for 'passive_owner')",
    )
    compute_parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    compute_parser.add_argument(
        "--year",
        type=int,
        default=DEFAULT_TAX_YEAR,
        help=f"Tax year (default: {DEFAULT_TAX_YEAR})",
    )

    # Single calculation
    calc_parser = subparsers.add_parser(
        "calc",
        help="Run one calculation by catalog name",
    )
    calc_parser.add_argument("name", help="Calculation name, e.g. calculateAGI")
    calc_parser.add_argument("input", type=Path, help="JSON file of field values")
    calc_parser.add_argument("--year", type=int, default=DEFAULT_TAX_YEAR)

    # Bracket table
    brackets_parser = subparsers.add_parser(
        "brackets",
        help="Show the bracket table, optionally with the tax on an income",
    )
    brackets_parser.add_argument(
        "--status",
        default=FilingStatus.SINGLE.value,
        help="Filing status (default: single)",
    )
    brackets_parser.add_argument("--income", type=float, help="Taxable income to break down")
    brackets_parser.add_argument("--year", type=int, default=DEFAULT_TAX_YEAR)

    # Quarterly estimate
    estimate_parser = subparsers.add_parser(
        "estimate",
        help="Estimate tax and quarterly payments on Schedule C profit",
    )
    estimate_parser.add_argument("net_profit", type=float, help="Schedule C net profit")
    estimate_parser.add_argument(
        "--rate",
        type=float,
        default=0.22,
        help="Marginal income tax rate (default: 0.22)",
    )
    estimate_parser.add_argument(
        "--no-qbi",
        action="store_true",
        help="Business is not eligible for the QBI deduction",
    )
    estimate_parser.add_argument("--year", type=int, default=DEFAULT_TAX_YEAR)

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        constants = get_tax_constants(args.year)
        if args.command in ("compute", "calc"):
            if not args.input.exists():
                print(f"Error: {args.input} not found", file=sys.stderr)
                sys.exit(1)
            values = load_values(args.input)
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "compute":
        fields = compute_derived_fields(values, constants)
        ssdi = check_ssdi_safeguards(values, args.profile, constants)
        logger.debug("computed", fields=len(fields), risk_level=ssdi.risk_level.value)
        result = {"fields": fields, "ssdi": ssdi.to_dict()}
        _emit(json.dumps(result, indent=2), args.output)

    elif args.command == "calc":
        value = calculate(args.name, values, constants)
        if value is None:
            print(
                f"Error: unknown calculation {args.name!r} "
                f"(known: {', '.join(calculation_names())})",
                file=sys.stderr,
            )
            sys.exit(1)
        print(f"{value:.2f}")

    elif args.command == "brackets":
        lower = 0.0
        for upper, rate in constants.brackets_for(args.status):
            upper_text = "and up" if math.isinf(upper) else f"{upper:>12,.0f}"
            print(f"{lower:>12,.0f} - {upper_text}  {rate:.0%}")
            lower = upper
        if args.income is not None:
            print()
            for amount, rate, tax in bracket_breakdown(args.income, args.status, constants):
                print(f"{amount:>12,.2f} at {rate:.0%} = {tax:>12,.2f}")
            print(f"Total tax: {bracket_tax(args.income, args.status, constants):,.2f}")

    elif args.command == "estimate":
        estimate = schedule_c_taxes(
            args.net_profit,
            marginal_tax_rate=args.rate,
            qbi_eligible=not args.no_qbi,
            constants=constants,
        )
        print(f"Self-employment tax:  {estimate.self_employment_tax:>12,.2f}")
        print(f"QBI deduction:        {estimate.qbi_deduction:>12,.2f}")
        print(f"Income tax:           {estimate.estimated_income_tax:>12,.2f}")
        print(f"Total estimated tax:  {estimate.total_estimated_tax:>12,.2f}")
        for due, payment in quarterly_schedule(estimate.total_estimated_tax).items():
            print(f"  {due:<24}{payment:>12,.2f}")


if __name__ == "__main__":
    main()
