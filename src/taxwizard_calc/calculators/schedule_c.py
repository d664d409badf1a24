"""
Schedule C helpers for product-review (Amazon Vine) income.

Source: IRS Pub. 525 (fair market value of property received), Pub. 463
(standard mileage), Rev. Proc. 2013-13 (simplified home office).
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..constants import DEFAULT_TAX_CONSTANTS, TaxConstants
from ..values import round_cents
from .phaseouts import self_employment_base

# 50/20/0 method: share of estimated tax value that remains taxable
VALUE_RETENTION = {
    "brand": 0.50,
    "non_brand": 0.20,
    "broken": 0.00,
}

# Quarterly 1040-ES due dates
QUARTERLY_DUE_DATES = {
    "Q1": "April 15",
    "Q2": "June 15",
    "Q3": "September 15",
    "Q4": "January 15 (next year)",
}


@dataclass
class VineValueResult:
    """Value reduction of review items under the 50/20/0 method."""

    total_etv: float
    brand_reduction: float
    non_brand_reduction: float
    broken_reduction: float
    total_reduction: float
    net_taxable_value: float


@dataclass
class ScheduleCTaxResult:
    """Estimated tax on Schedule C net profit at a flat marginal rate."""

    net_profit: float
    se_earnings: float
    self_employment_tax: float
    social_security_tax: float
    medicare_tax: float
    qbi_deduction: float
    taxable_income_after_qbi: float
    estimated_income_tax: float
    total_estimated_tax: float


def vine_value_reduction(
    brand_etv: float = 0,
    non_brand_etv: float = 0,
    broken_etv: float = 0,
) -> VineValueResult:
    """
    Reduce estimated tax value (ETV) by item category.

    Brand-name items keep 50% of ETV, non-brand items 20%, broken or
    useless items nothing.
    """
    total_etv = brand_etv + non_brand_etv + broken_etv
    brand_reduction = brand_etv * (1 - VALUE_RETENTION["brand"])
    non_brand_reduction = non_brand_etv * (1 - VALUE_RETENTION["non_brand"])
    broken_reduction = broken_etv * (1 - VALUE_RETENTION["broken"])
    total_reduction = brand_reduction + non_brand_reduction + broken_reduction

    return VineValueResult(
        total_etv=round_cents(total_etv),
        brand_reduction=round_cents(brand_reduction),
        non_brand_reduction=round_cents(non_brand_reduction),
        broken_reduction=round_cents(broken_reduction),
        total_reduction=round_cents(total_reduction),
        net_taxable_value=round_cents(total_etv - total_reduction),
    )


def mileage_deduction(business_miles: float, constants: Optional[TaxConstants] = None) -> float:
    constants = constants or DEFAULT_TAX_CONSTANTS
    return round_cents(max(0.0, business_miles) * constants.mileage_rate)


def home_office_deduction(square_feet: float, constants: Optional[TaxConstants] = None) -> float:
    """Simplified method: flat rate per square foot, capped at 300 sq ft."""
    constants = constants or DEFAULT_TAX_CONSTANTS
    capped = min(max(0.0, square_feet), constants.home_office_max_sq_ft)
    return round_cents(capped * constants.home_office_rate)


def meals_deduction(meal_expenses: float, constants: Optional[TaxConstants] = None) -> float:
    constants = constants or DEFAULT_TAX_CONSTANTS
    return round_cents(max(0.0, meal_expenses) * constants.meals_deduction_rate)


def quarterly_payment(annual_estimated_tax: float) -> float:
    return round_cents(annual_estimated_tax / 4)


def quarterly_schedule(annual_estimated_tax: float) -> Dict[str, float]:
    """Equal 1040-ES installments keyed by due date."""
    payment = quarterly_payment(annual_estimated_tax)
    return {due: payment for due in QUARTERLY_DUE_DATES.values()}


def schedule_c_taxes(
    net_profit: float,
    marginal_tax_rate: float = 0.22,
    qbi_eligible: bool = True,
    constants: Optional[TaxConstants] = None,
) -> ScheduleCTaxResult:
    """
    Rough estimate of tax on Schedule C profit.

    Applies the full 15.3% SE rate to 92.35% of profit (no wage base cap,
    no $400 floor) and a flat 20% QBI deduction, then taxes the remainder
    at a single marginal rate. For quarterly planning, not for the return.
    """
    constants = constants or DEFAULT_TAX_CONSTANTS
    se_earnings = self_employment_base(net_profit, constants)
    social_security_tax = max(0.0, se_earnings * constants.se_social_security_rate)
    medicare_tax = max(0.0, se_earnings * constants.se_medicare_rate)
    se_tax = social_security_tax + medicare_tax

    qbi = max(0.0, net_profit * constants.qbi_deduction_rate) if qbi_eligible else 0.0
    taxable = max(0.0, net_profit - qbi)
    income_tax = taxable * marginal_tax_rate

    return ScheduleCTaxResult(
        net_profit=round_cents(net_profit),
        se_earnings=se_earnings,
        self_employment_tax=round_cents(se_tax),
        social_security_tax=round_cents(social_security_tax),
        medicare_tax=round_cents(medicare_tax),
        qbi_deduction=round_cents(qbi),
        taxable_income_after_qbi=round_cents(taxable),
        estimated_income_tax=round_cents(income_tax),
        total_estimated_tax=round_cents(se_tax + income_tax),
    )
