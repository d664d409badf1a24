"""
CLI for running the validation pipeline.

Usage:
    python -m taxwizard_calc.validation.cli --csv-path filings.csv
    taxwizard-validate --csv-path filings.csv  # if installed

Examples:
    # Compare against prepared returns, $1 tolerance on line 16
    taxwizard-validate --csv-path filings.csv --field-tolerance line_16_tax=1
"""

import argparse
import sys

from ..cli import configure_logging
from ..constants import DEFAULT_TAX_YEAR, get_tax_constants
from .comparator import ComparisonConfig, validate


def _field_tolerance(text: str) -> tuple:
    field_id, sep, amount = text.partition("=")
    if not sep or not field_id:
        raise argparse.ArgumentTypeError(f"expected FIELD=AMOUNT, got {text!r}")
    try:
        return field_id, float(amount)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid tolerance amount in {text!r}")


def main():
    parser = argparse.ArgumentParser(
        prog="taxwizard-validate",
        description="Validate taxwizard-calc line values against expected values from a CSV",
    )

    parser.add_argument(
        "--csv-path",
        type=str,
        required=True,
        help="CSV of filings: filing_id, field columns, expected_<field> columns",
    )

    parser.add_argument(
        "--year",
        type=int,
        default=DEFAULT_TAX_YEAR,
        help=f"Tax year (default: {DEFAULT_TAX_YEAR})",
    )

    parser.add_argument(
        "--sample-size",
        type=int,
        help="Sample size (default: all filings)",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Directory to save results",
    )

    parser.add_argument(
        "--tolerance",
        type=float,
        default=0.01,
        help="Tolerance in dollars (default: 0.01)",
    )

    parser.add_argument(
        "--field-tolerance",
        type=_field_tolerance,
        action="append",
        default=[],
        metavar="FIELD=AMOUNT",
        help="Per-field tolerance override (repeatable)",
    )

    parser.add_argument(
        "--min-match-rate",
        type=float,
        default=100.0,
        help="Exit 1 if any field matches below this percent (default: 100)",
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    config = ComparisonConfig(
        tolerance=args.tolerance,
        field_tolerances=dict(args.field_tolerance),
    )

    try:
        results = validate(
            csv_path=args.csv_path,
            constants=get_tax_constants(args.year),
            sample_size=args.sample_size,
            output_dir=args.output_dir,
            config=config,
            show_progress=not args.no_progress,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    min_match_rate = results.min_match_rate()
    if min_match_rate < args.min_match_rate:
        print(f"\nWarning: Lowest match rate is {min_match_rate:.1f}%", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
