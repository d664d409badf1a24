"""
Threshold and phase-out formulas.

Each formula is full value below a threshold, shrinks across a phase-out
range, and bottoms out at zero. The pure functions take explicit amounts;
the calculate_* wrappers read them from a value map.

Sources: 26 USC 199A (QBI), 26 USC 179 (expensing), 26 USC 86 (Social
Security benefits), 26 USC 1401/1402 and 164(f) (self-employment tax).
"""

from typing import Any, Optional

from ..constants import DEFAULT_TAX_CONSTANTS, TaxConstants
from ..values import FieldValueMap, FieldValues, round_cents


def qbi_deduction(
    qbi: float,
    taxable_income: float,
    filing_status: Any = "single",
    constants: Optional[TaxConstants] = None,
) -> float:
    """
    Qualified business income deduction per 26 USC 199A.

    Args:
        qbi: Qualified business income (K-1 line 17 code V)
        taxable_income: Taxable income before the deduction
        filing_status: Filing status token (joint or single thresholds)
        constants: Constants table

    Returns:
        Deduction rounded to the cent
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    if qbi <= 0:
        return 0.0

    rate = constants.qbi_deduction_rate
    threshold = constants.qbi_threshold(filing_status)
    phase_out_range = constants.qbi_phase_out_range(filing_status)

    if taxable_income <= threshold:
        return round_cents(qbi * rate)

    excess = taxable_income - threshold
    if excess >= phase_out_range:
        return 0.0

    reduced_rate = rate * (1 - excess / phase_out_range)
    return round_cents(qbi * reduced_rate)


def section_179_deduction(
    total_cost: float,
    constants: Optional[TaxConstants] = None,
) -> float:
    """
    Section 179 expensing (Form 4562 line 5).

    The limit is reduced dollar-for-dollar by cost above the phase-out
    threshold.
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    if total_cost <= 0:
        return 0.0

    phase_out_reduction = max(0.0, total_cost - constants.section_179_phase_out)
    tentative = min(total_cost, constants.section_179_limit) - phase_out_reduction
    return round_cents(max(0.0, tentative))


def taxable_social_security(
    benefits: float,
    agi: float,
    filing_status: Any = "single",
    nontaxable_interest: float = 0,
    constants: Optional[TaxConstants] = None,
) -> float:
    """
    Taxable portion of Social Security benefits per 26 USC 86.

    Args:
        benefits: Net benefits (SSA-1099 box 5)
        agi: Adjusted gross income excluding the benefits
        filing_status: Filing status token
        nontaxable_interest: Tax-exempt interest (line 2a)
        constants: Constants table

    Returns:
        Taxable benefits, 0 to 85% of benefits, rounded to the cent
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    if benefits == 0:
        return 0.0

    combined_income = agi + nontaxable_interest + benefits / 2
    base_threshold, adjusted_threshold = constants.ss_thresholds(filing_status)
    max_share = constants.ss_max_taxable_share

    if combined_income <= base_threshold:
        return 0.0

    if combined_income <= adjusted_threshold:
        taxable = min(0.5 * (combined_income - base_threshold), 0.5 * benefits)
        return round_cents(taxable)

    base = min(0.5 * (adjusted_threshold - base_threshold), 0.5 * benefits)
    additional = max_share * (combined_income - adjusted_threshold)
    return round_cents(min(base + additional, max_share * benefits))


def self_employment_base(
    net_profit: float,
    constants: Optional[TaxConstants] = None,
) -> float:
    """Net earnings from self-employment: 92.35% of net profit."""
    constants = constants or DEFAULT_TAX_CONSTANTS
    return round_cents(net_profit * constants.se_earnings_factor)


def self_employment_tax(
    se_base: float,
    constants: Optional[TaxConstants] = None,
) -> float:
    """
    Self-employment tax on net SE earnings (Schedule SE line 12).

    No tax below $400 of earnings. The 12.4% Social Security portion stops
    at the wage base; Medicare is uncapped; the 0.9% additional Medicare
    applies above a single fixed threshold for every filing status.
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    if se_base < constants.se_minimum_earnings:
        return 0.0

    ss_portion = min(se_base, constants.social_security_wage_base) * constants.se_social_security_rate
    medicare = se_base * constants.se_medicare_rate
    additional_medicare = (
        max(0.0, se_base - constants.additional_medicare_threshold)
        * constants.additional_medicare_rate
    )
    return round_cents(ss_portion + medicare + additional_medicare)


def deductible_se_tax(se_tax: float) -> float:
    """Half of SE tax, deductible on Schedule 1 (Schedule SE line 13)."""
    return round_cents(se_tax * 0.5)


# Value-map wrappers


def calculate_qbi(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """Line 14 QBI deduction.

    Reads stored line 15 rather than resolving it: taxable income itself
    subtracts this deduction.
    """
    values = FieldValues.wrap(data, constants)
    return qbi_deduction(
        qbi=values.number("line_17_v_qbi"),
        taxable_income=values.number("line_15_taxable_income"),
        filing_status=values.filing_status,
        constants=values.constants,
    )


def calculate_section_179(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    values = FieldValues.wrap(data, constants)
    return section_179_deduction(values.number("line_2_total_cost"), values.constants)


def calculate_taxable_ss(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """Line 6b taxable Social Security.

    Reads stored line 11 AGI rather than resolving it: AGI includes line 6b.
    """
    values = FieldValues.wrap(data, constants)
    return taxable_social_security(
        benefits=values.number("line_6a_ss_benefits"),
        agi=values.number("line_11_agi"),
        filing_status=values.filing_status,
        nontaxable_interest=0,
        constants=values.constants,
    )


def calculate_se_base(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """Schedule SE line 4: 92.35% of combined profit (or line 2 profit)."""
    values = FieldValues.wrap(data, constants)
    net_profit = values.resolve("line_3_combined_profit") or values.number("line_2_se_profit")
    return self_employment_base(net_profit, values.constants)


def calculate_se_tax(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    values = FieldValues.wrap(data, constants)
    return self_employment_tax(values.resolve("line_4_se_earnings"), values.constants)


def calculate_deductible_se(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    values = FieldValues.wrap(data, constants)
    return deductible_se_tax(values.resolve("line_12_se_tax"))
