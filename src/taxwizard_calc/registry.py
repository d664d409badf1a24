"""
Calculation registry: string keys used by the field catalog -> formulas.

The catalog names a calculation by string (e.g. "calculateAGI") so it never
imports the formulas. The keys are a closed set; lookups of anything else
return None.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import structlog

from .calculators import (
    calculate_agi,
    calculate_combined_se,
    calculate_deductible_se,
    calculate_gross_profit,
    calculate_ordinary_income,
    calculate_qbi,
    calculate_refund_owed,
    calculate_schedule_e_total,
    calculate_se_base,
    calculate_se_tax,
    calculate_section_179,
    calculate_tax,
    calculate_taxable_income,
    calculate_taxable_ss,
    calculate_total_tax,
)
from .constants import TaxConstants
from .values import FieldValueMap, FieldValues, round_cents

logger = structlog.get_logger(__name__)

CalculationFunction = Callable[..., float]


class CalculationName(str, Enum):
    """Catalog keys. Values must not change: stored catalogs reference them."""

    TAXABLE_SS = "calculateTaxableSS"
    AGI = "calculateAGI"
    QBI = "calculateQBI"
    TAXABLE_INCOME = "calculateTaxableIncome"
    TAX = "calculateTax"
    TOTAL_TAX = "calculateTotalTax"
    REFUND_OWED = "calculateRefundOwed"
    GROSS_PROFIT = "calculateGrossProfit"
    ORDINARY_INCOME = "calculateOrdinaryIncome"
    SECTION_179 = "calculateSection179"
    SCHEDULE_E_TOTAL = "calculateScheduleETotal"
    SE_BASE = "calculateSEBase"
    SE_TAX = "calculateSETax"
    DEDUCTIBLE_SE = "calculateDeductibleSE"
    COMBINED_SE = "calculateCombinedSE"


_CALCULATIONS: Dict[CalculationName, CalculationFunction] = {
    CalculationName.TAXABLE_SS: calculate_taxable_ss,
    CalculationName.AGI: calculate_agi,
    CalculationName.QBI: calculate_qbi,
    CalculationName.TAXABLE_INCOME: calculate_taxable_income,
    CalculationName.TAX: calculate_tax,
    CalculationName.TOTAL_TAX: calculate_total_tax,
    CalculationName.REFUND_OWED: calculate_refund_owed,
    CalculationName.GROSS_PROFIT: calculate_gross_profit,
    CalculationName.ORDINARY_INCOME: calculate_ordinary_income,
    CalculationName.SECTION_179: calculate_section_179,
    CalculationName.SCHEDULE_E_TOTAL: calculate_schedule_e_total,
    CalculationName.SE_BASE: calculate_se_base,
    CalculationName.SE_TAX: calculate_se_tax,
    CalculationName.DEDUCTIBLE_SE: calculate_deductible_se,
    CalculationName.COMBINED_SE: calculate_combined_se,
}

# Field id -> calculation, as declared by the form catalog
DEFAULT_FIELD_CALCULATIONS: Dict[str, str] = {
    # Form 1040
    "line_6b_ss_taxable": CalculationName.TAXABLE_SS.value,
    "line_11_agi": CalculationName.AGI.value,
    "line_14_qbi_deduction": CalculationName.QBI.value,
    "line_15_taxable_income": CalculationName.TAXABLE_INCOME.value,
    "line_16_tax": CalculationName.TAX.value,
    "line_24_total_tax": CalculationName.TOTAL_TAX.value,
    "line_33_refund_owed": CalculationName.REFUND_OWED.value,
    # Form 1065
    "line_3_gross_profit": CalculationName.GROSS_PROFIT.value,
    "line_22_ordinary_income_loss": CalculationName.ORDINARY_INCOME.value,
    # Form 4562
    "line_5_tentative_deduction": CalculationName.SECTION_179.value,
    # Schedule E
    "line_41_total_partnership": CalculationName.SCHEDULE_E_TOTAL.value,
    "line_43_total_estate_trust": CalculationName.SCHEDULE_E_TOTAL.value,
    "schedule_e_total": CalculationName.SCHEDULE_E_TOTAL.value,
    # Schedule SE
    "line_3_combined_profit": CalculationName.COMBINED_SE.value,
    "line_4_se_earnings": CalculationName.SE_BASE.value,
    "line_12_se_tax": CalculationName.SE_TAX.value,
    "line_13_deductible_se": CalculationName.DEDUCTIBLE_SE.value,
}


def get_calculation_fn(name: Any) -> Optional[CalculationFunction]:
    """
    Look up a calculation by catalog key.

    Returns:
        The calculation function, or None if the name is not a known key
    """
    if not isinstance(name, str):
        return None
    try:
        key = CalculationName(name)
    except ValueError:
        logger.debug("unknown_calculation", name=name)
        return None
    return _CALCULATIONS[key]


def calculation_names() -> List[str]:
    return [name.value for name in CalculationName]


def calculate(
    name: Any,
    data: FieldValueMap,
    constants: Optional[TaxConstants] = None,
) -> Optional[float]:
    """Run a calculation by catalog key; None if the key is unknown."""
    fn = get_calculation_fn(name)
    if fn is None:
        return None
    return round_cents(fn(FieldValues.wrap(data, constants)))


def resolve_field(
    data: FieldValueMap,
    field_id: str,
    constants: Optional[TaxConstants] = None,
    field_calculations: Optional[Mapping[str, str]] = None,
) -> float:
    """
    Value of a field: stored number first, then its calculation, then 0.

    A stored numeric value always wins, so a hand-corrected line is never
    recomputed over.
    """
    return FieldValues(data, constants, field_calculations).resolve(field_id)


def bindings_from_catalog(fields: Iterable[Any]) -> Dict[str, str]:
    """
    Build field -> calculation bindings from catalog field definitions.

    Each entry is a mapping or object with an ``id`` and an optional
    ``calculationFn``; every other attribute is ignored.
    """
    bindings = {}
    for field in fields:
        if isinstance(field, Mapping):
            field_id = field.get("id")
            calculation = field.get("calculationFn")
        else:
            field_id = getattr(field, "id", None)
            calculation = getattr(field, "calculationFn", None)
        if isinstance(field_id, str) and isinstance(calculation, str):
            bindings[field_id] = calculation
    return bindings


def compute_derived_fields(
    data: FieldValueMap,
    constants: Optional[TaxConstants] = None,
    field_calculations: Optional[Mapping[str, str]] = None,
) -> Dict[str, float]:
    """
    Resolve every bound field.

    Returns a new dict; ``data`` is not modified. Callers decide whether to
    cache the results back into their store.
    """
    bindings = DEFAULT_FIELD_CALCULATIONS if field_calculations is None else field_calculations
    values = FieldValues(data, constants, bindings)
    return {field_id: values.resolve(field_id) for field_id in bindings}
