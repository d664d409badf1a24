"""
Progressive bracket tax - Form 1040 line 16.

Source: 26 USC 1(j), Rev. Proc. 2023-34
"""

from typing import Any, List, Optional, Tuple

from ..constants import DEFAULT_TAX_CONSTANTS, FilingStatus, TaxConstants
from ..values import FieldValueMap, FieldValues, round_cents


def bracket_breakdown(
    taxable_income: float,
    filing_status: Any = "single",
    constants: Optional[TaxConstants] = None,
) -> List[Tuple[float, float, float]]:
    """
    Split taxable income across the marginal brackets.

    Returns:
        (amount taxed in bracket, rate, tax for bracket) for each bracket
        that received income, lowest first
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    remaining = max(0.0, taxable_income)
    lower = 0.0
    parts = []

    for upper, rate in constants.brackets_for(filing_status):
        if remaining <= 0:
            break
        taxable_in_bracket = min(remaining, upper - lower)
        parts.append((taxable_in_bracket, rate, taxable_in_bracket * rate))
        remaining -= taxable_in_bracket
        lower = upper

    return parts


def bracket_tax(
    taxable_income: float,
    filing_status: Any = "single",
    constants: Optional[TaxConstants] = None,
) -> float:
    """
    Tax on taxable income using the progressive bracket table.

    Only married_filing_jointly selects the joint table; every other
    filing status is taxed on the single table.

    Args:
        taxable_income: Form 1040 line 15 (negative is treated as 0)
        filing_status: Filing status token
        constants: Constants table (defaults to the current year)

    Returns:
        Tax rounded to the cent
    """
    parts = bracket_breakdown(taxable_income, filing_status, constants)
    return round_cents(sum(tax for _, _, tax in parts))


def marginal_rate(
    taxable_income: float,
    filing_status: Any = "single",
    constants: Optional[TaxConstants] = None,
) -> float:
    """
    Rate of the bracket the next dollar of income falls in.

    Unlike bracket_tax, head_of_household has its own table here.
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    if FilingStatus.parse(filing_status) is FilingStatus.HEAD_OF_HOUSEHOLD:
        brackets = constants.brackets_hoh
    else:
        brackets = constants.brackets_for(filing_status)
    for upper, rate in brackets:
        if taxable_income <= upper:
            return rate
    return brackets[-1][1]


def calculate_tax(
    data: FieldValueMap,
    constants: Optional[TaxConstants] = None,
) -> float:
    """Line 16: bracket tax on line 15 taxable income."""
    values = FieldValues.wrap(data, constants)
    taxable_income = values.resolve("line_15_taxable_income")
    return bracket_tax(taxable_income, values.filing_status, values.constants)
