"""
Comparator: compare engine output against expected line values.

Tolerance-based matching per field with detailed mismatch reporting, plus
an exact comparison of SSDI risk levels.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import structlog

from ..constants import TaxConstants
from .loader import EXPECTED_PREFIX, expected_fields
from .runners import CALC_PREFIX

logger = structlog.get_logger(__name__)

RISK_LEVEL = "risk_level"


@dataclass
class ComparisonConfig:
    """Configuration for validation comparison."""

    # Absolute tolerance in dollars
    tolerance: float = 0.01
    # Per-field overrides, e.g. {"line_16_tax": 1.0}
    field_tolerances: Dict[str, float] = field(default_factory=dict)
    # Restrict comparison to these fields (default: every expected_ column)
    fields: Optional[List[str]] = None

    id_col: str = "filing_id"

    def tolerance_for(self, field_id: str) -> float:
        return self.field_tolerances.get(field_id, self.tolerance)


@dataclass
class MismatchRecord:
    """Record of a calculation mismatch."""

    filing_id: Any
    field_id: str
    calculated: Any
    expected: Any
    difference: Optional[float] = None
    pct_difference: Optional[float] = None


@dataclass
class ComparisonResults:
    """Results from comparing engine output with expected values."""

    total_filings: int
    fields_compared: List[str]
    matches: Dict[str, int]
    mismatches: Dict[str, List[MismatchRecord]]
    match_rates: Dict[str, float]
    config: ComparisonConfig
    full_data: Optional[pd.DataFrame] = None

    def summary(self) -> Dict[str, Any]:
        """Generate summary statistics."""
        return {
            "total_filings": self.total_filings,
            "fields": {
                name: {
                    "matches": self.matches[name],
                    "mismatches": len(self.mismatches[name]),
                    "match_rate": self.match_rates[name],
                }
                for name in self.fields_compared
            },
        }

    def min_match_rate(self) -> float:
        """Lowest match rate among fields that had data, 100 if none did."""
        rates = [
            rate for name, rate in self.match_rates.items()
            if self.matches[name] + len(self.mismatches[name]) > 0
        ]
        return min(rates) if rates else 100.0

    def detailed_report(self) -> str:
        """Generate detailed text report."""
        lines = [
            "=" * 70,
            "taxwizard-calc Validation Report",
            "=" * 70,
            f"Total Filings: {self.total_filings:,}",
            "",
        ]

        for name in self.fields_compared:
            total_compared = self.matches[name] + len(self.mismatches[name])
            if total_compared == 0:
                lines.extend([
                    f"{name}:",
                    "-" * 40,
                    "  Skipped (no expected values)",
                    "",
                ])
                continue

            lines.extend([
                f"{name}:",
                "-" * 40,
                f"  Matches:     {self.matches[name]:,} ({self.match_rates[name]:.2f}%)",
                f"  Mismatches:  {len(self.mismatches[name]):,}",
            ])
            if name != RISK_LEVEL:
                lines.append(f"  Tolerance:   ±${self.config.tolerance_for(name):.2f}")
            lines.append("")

            if self.mismatches[name]:
                lines.append("  Worst mismatches:")
                for m in _worst(self.mismatches[name]):
                    if m.difference is None:
                        lines.append(
                            f"    Filing {m.filing_id}: calc={m.calculated}, expected={m.expected}"
                        )
                    else:
                        lines.append(
                            f"    Filing {m.filing_id}: calc=${m.calculated:,.2f}, "
                            f"expected=${m.expected:,.2f}, diff=${m.difference:,.2f}"
                        )
                lines.append("")

        lines.append("=" * 70)
        return "\n".join(lines)

    def save_report(self, output_dir: Path):
        """Save comparison results to files."""
        output_dir = Path(output_dir)
        output_dir.mkdir(exist_ok=True, parents=True)

        report_path = output_dir / "validation_report.txt"
        report_path.write_text(self.detailed_report())
        logger.info("report_saved", path=str(report_path))

        if self.full_data is not None:
            data_path = output_dir / "validation_data.csv"
            self.full_data.to_csv(data_path, index=False)
            logger.info("data_saved", path=str(data_path))

        for name in self.fields_compared:
            if self.mismatches[name]:
                mismatch_df = pd.DataFrame([
                    {
                        "filing_id": m.filing_id,
                        "calculated": m.calculated,
                        "expected": m.expected,
                        "difference": m.difference,
                        "pct_difference": m.pct_difference,
                    }
                    for m in self.mismatches[name]
                ])
                mismatch_path = output_dir / f"{name}_mismatches.csv"
                mismatch_df.to_csv(mismatch_path, index=False)
                logger.info("mismatches_saved", field_id=name, path=str(mismatch_path))


def _worst(records: List[MismatchRecord], n: int = 5) -> List[MismatchRecord]:
    return sorted(
        records,
        key=lambda m: abs(m.difference) if m.difference is not None else 0.0,
        reverse=True,
    )[:n]


class Comparator:
    """Compare engine output (calc_*) with expected values (expected_*)."""

    def __init__(self, config: Optional[ComparisonConfig] = None):
        self.config = config or ComparisonConfig()

    def compare(self, df: pd.DataFrame) -> ComparisonResults:
        """
        Compare calculated and expected columns.

        Args:
            df: DataFrame with calc_ and expected_ columns
                (output from runners.run_both)

        Returns:
            ComparisonResults with match statistics and mismatches
        """
        matches = {}
        mismatches = {}
        match_rates = {}

        for field_id in self._fields(df):
            calc_col = f"{CALC_PREFIX}{field_id}"
            expected_col = f"{EXPECTED_PREFIX}{field_id}"
            if calc_col not in df.columns or expected_col not in df.columns:
                continue

            if field_id == RISK_LEVEL:
                field_matches, field_mismatches = self._compare_labels(df, calc_col, expected_col)
            else:
                field_matches, field_mismatches = self._compare_amounts(
                    df, field_id, calc_col, expected_col, self.config.tolerance_for(field_id)
                )
            matches[field_id] = field_matches
            mismatches[field_id] = field_mismatches
            valid_count = field_matches + len(field_mismatches)
            match_rates[field_id] = (field_matches / valid_count * 100) if valid_count > 0 else 0

        return ComparisonResults(
            total_filings=len(df),
            fields_compared=list(matches.keys()),
            matches=matches,
            mismatches=mismatches,
            match_rates=match_rates,
            config=self.config,
            full_data=df,
        )

    def _fields(self, df: pd.DataFrame) -> List[str]:
        if self.config.fields is not None:
            return list(self.config.fields)
        fields = expected_fields(df)
        if f"{EXPECTED_PREFIX}{RISK_LEVEL}" in df.columns:
            fields.append(RISK_LEVEL)
        return fields

    def _compare_amounts(
        self,
        df: pd.DataFrame,
        field_id: str,
        calc_col: str,
        expected_col: str,
        tolerance: float,
    ) -> tuple:
        """Compare a single monetary field."""
        mismatches = []
        id_col = self.config.id_col

        # Blank expected values are not compared
        df_valid = df[~df[expected_col].isna()]
        if len(df_valid) == 0:
            return 0, []

        calculated = df_valid[calc_col].astype(float)
        expected = df_valid[expected_col].astype(float)
        is_match = np.isclose(calculated, expected, rtol=0, atol=tolerance + 1e-9)
        match_count = int(is_match.sum())

        for _, row in df_valid[~is_match].iterrows():
            calc_val = float(row[calc_col])
            expected_val = float(row[expected_col])
            diff = calc_val - expected_val

            pct_diff = None
            if expected_val != 0:
                pct_diff = (diff / expected_val) * 100

            mismatches.append(MismatchRecord(
                filing_id=row[id_col],
                field_id=field_id,
                calculated=calc_val,
                expected=expected_val,
                difference=diff,
                pct_difference=pct_diff,
            ))

        return match_count, mismatches

    def _compare_labels(self, df: pd.DataFrame, calc_col: str, expected_col: str) -> tuple:
        """Compare risk levels exactly."""
        id_col = self.config.id_col
        df_valid = df[~df[expected_col].isna()]
        if len(df_valid) == 0:
            return 0, []

        expected = df_valid[expected_col].astype(str).str.strip().str.lower()
        is_match = (df_valid[calc_col].astype(str) == expected).to_numpy()

        mismatches = [
            MismatchRecord(
                filing_id=row[id_col],
                field_id=RISK_LEVEL,
                calculated=row[calc_col],
                expected=row[expected_col],
            )
            for _, row in df_valid[~is_match].iterrows()
        ]
        return int(is_match.sum()), mismatches


def validate(
    csv_path: str,
    constants: Optional[TaxConstants] = None,
    sample_size: Optional[int] = None,
    output_dir: Optional[str] = None,
    config: Optional[ComparisonConfig] = None,
    show_progress: bool = True,
) -> ComparisonResults:
    """
    Run the validation pipeline on a CSV of filings.

    Args:
        csv_path: Path to CSV of filings with expected_ columns
        constants: Constants table for the tax year
        sample_size: Optional sample size for faster validation
        output_dir: Directory to save results
        config: Comparison configuration
        show_progress: Show progress bar

    Returns:
        ComparisonResults
    """
    from .loader import load_filings
    from .runners import run_both

    config = config or ComparisonConfig()
    df = load_filings(csv_path, sample_size=sample_size, id_col=config.id_col)
    logger.info("filings_loaded", count=len(df), path=str(csv_path))

    results_df = run_both(df, constants, id_col=config.id_col, show_progress=show_progress)

    comparator = Comparator(config)
    results = comparator.compare(results_df)

    print(results.detailed_report())

    if output_dir:
        results.save_report(Path(output_dir))

    return results
