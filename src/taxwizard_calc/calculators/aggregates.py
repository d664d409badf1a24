"""
Aggregate line formulas - flat sums and differences over named fields.

Derived inputs are resolved (stored value first, otherwise computed), so
these compose without a dependency scheduler.
"""

from typing import Optional

from ..constants import TaxConstants
from ..values import FieldValueMap, FieldValues, round_cents

# Form 1040 lines 1-8, stored directly
AGI_INCOME_FIELDS = (
    "line_1_wages",
    "line_2b_taxable_interest",
    "line_3b_dividends",
    "line_4b_ira_taxable",
    "line_5b_pensions_taxable",
    "line_7_capital_gains",
    "line_8_other_income",
)

# Form 1065 lines 9-20
ORDINARY_INCOME_DEDUCTION_FIELDS = (
    "line_9_salaries",
    "line_10_guaranteed_payments",
    "line_12_repairs",
    "line_13_bad_debts",
    "line_14_rent",
    "line_15_taxes",
    "line_16a_depreciation",
    "line_18_employee_benefits",
    "line_20_other_deductions",
)

SCHEDULE_E_FIELDS = (
    "line_28_passive_income",
    "line_28_nonpassive_income",
    "line_28_rental",
)


def calculate_agi(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """
    Form 1040 line 11: adjusted gross income.

    Income lines 1-8 and the Schedule E total, less the deductible half of
    SE tax.
    """
    values = FieldValues.wrap(data, constants)
    agi = (
        values.total(*AGI_INCOME_FIELDS)
        + values.resolve("line_6b_ss_taxable")
        + values.resolve("schedule_e_total")
        - values.resolve("line_13_deductible_se")
    )
    return round_cents(agi)


def calculate_taxable_income(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """
    Form 1040 line 15: AGI less standard deduction and QBI deduction.

    Without a stored line 12, the single standard deduction applies
    whatever the filing status.
    """
    values = FieldValues.wrap(data, constants)
    standard_deduction = values.override("line_12_standard_deduction")
    if standard_deduction is None:
        standard_deduction = values.constants.standard_deduction_single

    agi = values.resolve("line_11_agi")
    qbi = values.resolve("line_14_qbi_deduction")
    return round_cents(max(0.0, agi - standard_deduction - qbi))


def calculate_total_tax(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """Line 24: income tax plus self-employment tax."""
    values = FieldValues.wrap(data, constants)
    return round_cents(values.resolve("line_16_tax") + values.resolve("line_12_se_tax"))


def calculate_refund_owed(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """Withholding less total tax. Positive is a refund, negative is owed."""
    values = FieldValues.wrap(data, constants)
    return round_cents(values.number("line_25_withheld") - values.resolve("line_24_total_tax"))


def calculate_gross_profit(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    values = FieldValues.wrap(data, constants)
    return round_cents(values.number("line_1a_gross_receipts") - values.number("line_2_cost_of_goods"))


def calculate_ordinary_income(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    """Form 1065 line 22: ordinary business income (loss)."""
    values = FieldValues.wrap(data, constants)
    income = values.resolve("line_3_gross_profit") + values.number("line_4_ordinary_income")
    return round_cents(income - values.total(*ORDINARY_INCOME_DEDUCTION_FIELDS))


def calculate_schedule_e_total(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    values = FieldValues.wrap(data, constants)
    return round_cents(values.total(*SCHEDULE_E_FIELDS))


def calculate_combined_se(data: FieldValueMap, constants: Optional[TaxConstants] = None) -> float:
    # Schedule C profit is not collected, so line 3 is line 2
    values = FieldValues.wrap(data, constants)
    return round_cents(values.number("line_2_se_profit"))
