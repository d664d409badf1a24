"""
taxwizard-calc: tax line calculations and SSDI risk checks.

Derives Form 1040 / 1065 / 4562 / Schedule E / Schedule SE line values from
a sparse map of entered figures, and flags entries that put disability
benefits at risk for passive business owners.
"""

from .calculators import (
    bracket_tax,
    deductible_se_tax,
    marginal_rate,
    qbi_deduction,
    section_179_deduction,
    self_employment_base,
    self_employment_tax,
    taxable_social_security,
)
from .constants import (
    DEFAULT_TAX_CONSTANTS,
    TAX_CONSTANTS,
    TAX_YEAR_2026,
    FilingStatus,
    TaxConstants,
    get_tax_constants,
)
from .registry import (
    DEFAULT_FIELD_CALCULATIONS,
    CalculationName,
    bindings_from_catalog,
    calculate,
    calculation_names,
    compute_derived_fields,
    get_calculation_fn,
    resolve_field,
)
from .ssdi import (
    CountableIncome,
    IRWEExpense,
    MonthlyActivity,
    RiskAssessmentResult,
    RiskLevel,
    RiskWarning,
    Severity,
    SSDIAlert,
    check_ssdi_safeguards,
    countable_income,
    is_trial_work_month,
    sga_risk,
    ssdi_alerts,
    total_irwe,
)
from .values import FieldValues, round_cents, to_number

__version__ = "0.1.0"
__all__ = [
    "TaxConstants",
    "TAX_YEAR_2026",
    "TAX_CONSTANTS",
    "DEFAULT_TAX_CONSTANTS",
    "FilingStatus",
    "get_tax_constants",
    "FieldValues",
    "round_cents",
    "to_number",
    "bracket_tax",
    "marginal_rate",
    "qbi_deduction",
    "section_179_deduction",
    "taxable_social_security",
    "self_employment_base",
    "self_employment_tax",
    "deductible_se_tax",
    "CalculationName",
    "DEFAULT_FIELD_CALCULATIONS",
    "get_calculation_fn",
    "calculation_names",
    "calculate",
    "resolve_field",
    "bindings_from_catalog",
    "compute_derived_fields",
    "check_ssdi_safeguards",
    "IRWEExpense",
    "CountableIncome",
    "MonthlyActivity",
    "SSDIAlert",
    "total_irwe",
    "countable_income",
    "sga_risk",
    "is_trial_work_month",
    "ssdi_alerts",
    "RiskAssessmentResult",
    "RiskWarning",
    "RiskLevel",
    "Severity",
]
