"""
Tax line calculators.

Pure functions over explicit amounts (bracket_tax, qbi_deduction, ...) and
value-map wrappers (calculate_*) that the registry exposes by name.
"""

from .aggregates import (
    calculate_agi,
    calculate_combined_se,
    calculate_gross_profit,
    calculate_ordinary_income,
    calculate_refund_owed,
    calculate_schedule_e_total,
    calculate_taxable_income,
    calculate_total_tax,
)
from .brackets import bracket_breakdown, bracket_tax, calculate_tax, marginal_rate
from .phaseouts import (
    calculate_deductible_se,
    calculate_qbi,
    calculate_se_base,
    calculate_se_tax,
    calculate_section_179,
    calculate_taxable_ss,
    deductible_se_tax,
    qbi_deduction,
    section_179_deduction,
    self_employment_base,
    self_employment_tax,
    taxable_social_security,
)
from .schedule_c import (
    home_office_deduction,
    meals_deduction,
    mileage_deduction,
    quarterly_payment,
    quarterly_schedule,
    schedule_c_taxes,
    vine_value_reduction,
)

__all__ = [
    "bracket_tax",
    "bracket_breakdown",
    "marginal_rate",
    "qbi_deduction",
    "section_179_deduction",
    "taxable_social_security",
    "self_employment_base",
    "self_employment_tax",
    "deductible_se_tax",
    "calculate_agi",
    "calculate_taxable_income",
    "calculate_tax",
    "calculate_total_tax",
    "calculate_refund_owed",
    "calculate_gross_profit",
    "calculate_ordinary_income",
    "calculate_schedule_e_total",
    "calculate_combined_se",
    "calculate_qbi",
    "calculate_section_179",
    "calculate_taxable_ss",
    "calculate_se_base",
    "calculate_se_tax",
    "calculate_deductible_se",
    "vine_value_reduction",
    "mileage_deduction",
    "home_office_deduction",
    "meals_deduction",
    "quarterly_payment",
    "quarterly_schedule",
    "schedule_c_taxes",
]
