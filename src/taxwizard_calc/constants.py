"""
Tax constants table - year-versioned, immutable.

Source: IRS Rev. Proc. 2023-34 (brackets, standard deduction, QBI, Section 179),
SSA 2024 wage base and SGA/TWP amounts.

The catalog labels this table "2026"; its figures are the TY2024 published
values carried forward until the indexed amounts are entered.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class FilingStatus(str, Enum):
    """Filing status tokens as stored in the value map."""

    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOW = "qualifying_widow"

    @classmethod
    def parse(cls, value: Any) -> "FilingStatus":
        """Parse a stored token; anything unrecognized is SINGLE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip())
            except ValueError:
                pass
        return cls.SINGLE


def is_joint(filing_status: Any) -> bool:
    """
    True only for married filing jointly.

    Every other status (including head of household and married filing
    separately) uses the single bracket table and single thresholds.
    """
    return FilingStatus.parse(filing_status) is FilingStatus.MARRIED_FILING_JOINTLY


# (upper bound, rate) pairs, ascending; last bound is unbounded
Brackets = Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class TaxConstants:
    """One tax year's worth of numeric constants."""

    year: int

    # 26 USC 63(c) - standard deduction
    standard_deduction_single: float
    standard_deduction_mfj: float
    standard_deduction_hoh: float

    # 26 USC 1(j) - ordinary income brackets
    brackets_single: Brackets
    brackets_mfj: Brackets
    # Marginal-rate lookup only; bracket tax uses the single table for HOH
    brackets_hoh: Brackets

    # 26 USC 199A - qualified business income deduction
    qbi_deduction_rate: float
    qbi_threshold_single: float
    qbi_threshold_mfj: float
    qbi_phase_out_range_single: float
    qbi_phase_out_range_mfj: float

    # 26 USC 179(b) - expensing limit and investment phase-out
    section_179_limit: float
    section_179_phase_out: float

    # 20 CFR 404.1574 - SGA and trial work period (monthly)
    sga_monthly_limit: float
    twp_monthly_limit: float

    # 26 USC 86 - taxable Social Security benefits
    ss_base_threshold_single: float
    ss_base_threshold_mfj: float
    ss_adjusted_threshold_single: float
    ss_adjusted_threshold_mfj: float
    ss_max_taxable_share: float

    # 26 USC 1401/1402 - self-employment tax
    social_security_wage_base: float
    se_earnings_factor: float
    se_minimum_earnings: float
    se_social_security_rate: float
    se_medicare_rate: float
    additional_medicare_rate: float
    additional_medicare_threshold: float

    # Schedule C helpers
    mileage_rate: float
    home_office_rate: float
    home_office_max_sq_ft: float
    meals_deduction_rate: float

    def brackets_for(self, filing_status: Any) -> Brackets:
        return self.brackets_mfj if is_joint(filing_status) else self.brackets_single

    def qbi_threshold(self, filing_status: Any) -> float:
        return self.qbi_threshold_mfj if is_joint(filing_status) else self.qbi_threshold_single

    def qbi_phase_out_range(self, filing_status: Any) -> float:
        if is_joint(filing_status):
            return self.qbi_phase_out_range_mfj
        return self.qbi_phase_out_range_single

    def ss_thresholds(self, filing_status: Any) -> Tuple[float, float]:
        if is_joint(filing_status):
            return self.ss_base_threshold_mfj, self.ss_adjusted_threshold_mfj
        return self.ss_base_threshold_single, self.ss_adjusted_threshold_single


TAX_YEAR_2026 = TaxConstants(
    year=2026,
    standard_deduction_single=14600,
    standard_deduction_mfj=29200,
    standard_deduction_hoh=21900,
    brackets_single=(
        (11600, 0.10),
        (47150, 0.12),
        (100525, 0.22),
        (191950, 0.24),
        (243725, 0.32),
        (609350, 0.35),
        (math.inf, 0.37),
    ),
    brackets_mfj=(
        (23200, 0.10),
        (94300, 0.12),
        (201050, 0.22),
        (383900, 0.24),
        (487450, 0.32),
        (731200, 0.35),
        (math.inf, 0.37),
    ),
    brackets_hoh=(
        (16550, 0.10),
        (63100, 0.12),
        (100500, 0.22),
        (191950, 0.24),
        (243700, 0.32),
        (609350, 0.35),
        (math.inf, 0.37),
    ),
    qbi_deduction_rate=0.20,
    qbi_threshold_single=191950,
    qbi_threshold_mfj=383900,
    qbi_phase_out_range_single=50000,
    qbi_phase_out_range_mfj=100000,
    section_179_limit=1290000,
    section_179_phase_out=3220000,
    sga_monthly_limit=1620,
    twp_monthly_limit=1110,
    ss_base_threshold_single=25000,
    ss_base_threshold_mfj=32000,
    ss_adjusted_threshold_single=34000,
    ss_adjusted_threshold_mfj=44000,
    ss_max_taxable_share=0.85,
    social_security_wage_base=168600,
    se_earnings_factor=0.9235,
    se_minimum_earnings=400,
    se_social_security_rate=0.124,
    se_medicare_rate=0.029,
    additional_medicare_rate=0.009,
    # Not adjusted for filing status (joint filers are 250000 in statute)
    additional_medicare_threshold=200000,
    mileage_rate=0.67,
    home_office_rate=5,
    home_office_max_sq_ft=300,
    meals_deduction_rate=0.50,
)

TAX_CONSTANTS: Dict[int, TaxConstants] = {
    TAX_YEAR_2026.year: TAX_YEAR_2026,
}

DEFAULT_TAX_YEAR = 2026
DEFAULT_TAX_CONSTANTS = TAX_CONSTANTS[DEFAULT_TAX_YEAR]


def get_tax_constants(year: int = DEFAULT_TAX_YEAR) -> TaxConstants:
    """
    Look up the constants table for a tax year.

    Raises:
        ValueError: if no table is registered for the year
    """
    try:
        return TAX_CONSTANTS[year]
    except KeyError:
        known = ", ".join(str(y) for y in sorted(TAX_CONSTANTS))
        raise ValueError(f"No tax constants for year {year} (available: {known})")
