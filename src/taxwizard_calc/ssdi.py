"""
SSDI safeguard checks for passive business owners.

Flags entries that suggest work activity or material participation, either
of which can put Social Security Disability Insurance benefits at risk, and
tracks monthly activity (IRWE, countable income, trial work period months)
against the SGA limit.

Source: 20 CFR 404.1574-1575 (SGA, self-employment activity),
SSA POMS DI 10510.000.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .constants import DEFAULT_TAX_CONSTANTS, TaxConstants
from .values import FieldValueMap, FieldValues, round_cents

PASSIVE_OWNER_PROFILE = "passive_owner"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RiskWarning:
    """A single triggered check."""

    severity: Severity
    message: str
    field_id: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "field": self.field_id,
        }


@dataclass(frozen=True)
class RiskAssessmentResult:
    """Outcome of the SSDI checks. Warnings are in check order."""

    is_at_risk: bool = False
    warnings: List[RiskWarning] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isAtRisk": self.is_at_risk,
            "warnings": [w.to_dict() for w in self.warnings],
            "riskLevel": self.risk_level.value,
        }


def is_passive_owner_flag(flag: Any) -> bool:
    """Only True or the "passive_owner" profile token enable the checks."""
    if isinstance(flag, bool):
        return flag
    if isinstance(flag, str):
        return flag.strip() == PASSIVE_OWNER_PROFILE
    return False


def aggregate_risk_level(warnings: List[RiskWarning]) -> RiskLevel:
    """
    Highest severity present wins.

    One HIGH warning makes the whole assessment HIGH no matter how many
    lower ones there are.
    """
    severities = {w.severity for w in warnings}
    if Severity.HIGH in severities:
        return RiskLevel.HIGH
    if Severity.MEDIUM in severities:
        return RiskLevel.MEDIUM
    if warnings:
        return RiskLevel.LOW
    return RiskLevel.NONE


def check_ssdi_safeguards(
    data: FieldValueMap,
    is_passive_owner: Any,
    constants: Optional[TaxConstants] = None,
) -> RiskAssessmentResult:
    """
    Run the SSDI checks against entered values.

    Args:
        data: Field id -> value map
        is_passive_owner: True (or the "passive_owner" profile token) when
            the filer is a passive owner; the checks do not apply otherwise
        constants: Constants table (SGA limit)

    Returns:
        RiskAssessmentResult; never raises
    """
    if not is_passive_owner_flag(is_passive_owner):
        return RiskAssessmentResult()

    values = FieldValues.wrap(data, constants)
    sga_limit = values.constants.sga_monthly_limit
    warnings = []

    monthly_wages = values.number("line_1_wages") / 12
    if monthly_wages > sga_limit:
        warnings.append(RiskWarning(
            Severity.MEDIUM,
            f"Monthly wages (${monthly_wages:,.2f}) exceed the SGA limit "
            f"(${sga_limit:,.2f}). This may affect your SSDI benefits.",
            "line_1_wages",
        ))

    guaranteed_services = values.number("line_4a_guaranteed_services")
    if guaranteed_services > 0:
        warnings.append(RiskWarning(
            Severity.HIGH,
            f"Guaranteed payments for services (${guaranteed_services:,.2f}) "
            "indicate active work and likely count toward SGA.",
            "line_4a_guaranteed_services",
        ))

    nonpassive_income = values.number("line_28_nonpassive_income")
    if nonpassive_income > 0:
        warnings.append(RiskWarning(
            Severity.HIGH,
            f"Nonpassive Schedule E income (${nonpassive_income:,.2f}) "
            "indicates material participation.",
            "line_28_nonpassive_income",
        ))

    se_earnings = values.number("line_14_se_earnings")
    if se_earnings > 0:
        warnings.append(RiskWarning(
            Severity.HIGH,
            f"Self-employment earnings (${se_earnings:,.2f}) should be $0.00 "
            "for a passive owner.",
            "line_14_se_earnings",
        ))

    if values.text("is_passive") == "no":
        warnings.append(RiskWarning(
            Severity.HIGH,
            "Marked as an active partner. SSDI recipients should maintain "
            "passive status.",
            "is_passive",
        ))

    return RiskAssessmentResult(
        is_at_risk=bool(warnings),
        warnings=warnings,
        risk_level=aggregate_risk_level(warnings),
    )


# Monthly SGA tracking

TRIAL_WORK_PERIOD_MONTHS = 9

# 20 CFR 404.1574(a) hours guide for self-employed work activity
HOURS_MEDIUM = 40
HOURS_HIGH = 80
SGA_WARNING_SHARE = 0.80


@dataclass(frozen=True)
class IRWEExpense:
    """An impairment-related work expense, per month."""

    monthly_amount: float
    is_recurring: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def is_active(self, on: date) -> bool:
        if self.start_date and on < self.start_date:
            return False
        if self.end_date and on > self.end_date:
            return False
        return True


@dataclass(frozen=True)
class CountableIncome:
    """Monthly earnings as SSA counts them against SGA."""

    countable_income: float
    is_under_sga: bool
    remaining_buffer: float
    max_allowed_income: float


@dataclass(frozen=True)
class MonthlyActivity:
    """One month of work activity and income for SGA tracking."""

    earned_income: float = 0
    hours_worked: float = 0
    material_participation_test: str = "none"
    is_substantial_services: bool = False
    passive_income: float = 0
    k1_distributions: float = 0
    rental_income: float = 0
    # None: decide from earned_income and the trial work period amount
    is_twp_month: Optional[bool] = None


@dataclass(frozen=True)
class SSDIAlert:
    kind: str  # danger | warning | info
    title: str
    message: str


def total_irwe(expenses: Iterable[IRWEExpense], on: Optional[date] = None) -> float:
    """
    Monthly IRWE total: recurring expenses plus one-off expenses active on
    the given day (default today).
    """
    on = on or date.today()
    return round_cents(sum(
        expense.monthly_amount
        for expense in expenses
        if expense.is_recurring or expense.is_active(on)
    ))


def countable_income(
    gross_income: float,
    irwe_total: float,
    constants: Optional[TaxConstants] = None,
) -> CountableIncome:
    """
    Countable earnings after IRWE, and the room left under the SGA limit.

    Source: 20 CFR 404.1576 (IRWE are deducted from earnings)
    """
    sga_limit = (constants or DEFAULT_TAX_CONSTANTS).sga_monthly_limit
    countable = max(0.0, gross_income - irwe_total)
    return CountableIncome(
        countable_income=round_cents(countable),
        is_under_sga=countable < sga_limit,
        remaining_buffer=round_cents(sga_limit - countable),
        max_allowed_income=round_cents(sga_limit + irwe_total),
    )


def sga_risk(activity: MonthlyActivity, constants: Optional[TaxConstants] = None) -> Severity:
    """
    SGA risk for one month: the highest of the hours, income and material
    participation risks.
    """
    sga_limit = (constants or DEFAULT_TAX_CONSTANTS).sga_monthly_limit

    if activity.hours_worked > HOURS_HIGH:
        hours_risk = Severity.HIGH
    elif activity.hours_worked > HOURS_MEDIUM:
        hours_risk = Severity.MEDIUM
    else:
        hours_risk = Severity.LOW

    if activity.earned_income >= sga_limit:
        income_risk = Severity.HIGH
    elif activity.earned_income >= sga_limit * SGA_WARNING_SHARE:
        income_risk = Severity.MEDIUM
    else:
        income_risk = Severity.LOW

    if activity.is_substantial_services:
        material_risk = Severity.HIGH
    elif activity.material_participation_test != "none":
        material_risk = Severity.MEDIUM
    else:
        material_risk = Severity.LOW

    risks = {hours_risk, income_risk, material_risk}
    if Severity.HIGH in risks:
        return Severity.HIGH
    if Severity.MEDIUM in risks:
        return Severity.MEDIUM
    return Severity.LOW


def is_trial_work_month(activity: MonthlyActivity, constants: Optional[TaxConstants] = None) -> bool:
    """A month counts toward the trial work period when earnings exceed the TWP amount."""
    if activity.is_twp_month is not None:
        return activity.is_twp_month
    return activity.earned_income > (constants or DEFAULT_TAX_CONSTANTS).twp_monthly_limit


def ssdi_alerts(
    months: Iterable[MonthlyActivity],
    constants: Optional[TaxConstants] = None,
) -> List[SSDIAlert]:
    """
    Alerts for one year of monthly activity.

    Trial work period usage, high-risk months, material participation, and
    a note on passive income that does not count toward SGA.
    """
    months = list(months)
    alerts = []

    twp_months = sum(1 for month in months if is_trial_work_month(month, constants))
    if twp_months >= 7:
        alerts.append(SSDIAlert(
            "danger",
            "TWP Exhausted",
            f"You have used {twp_months}/{TRIAL_WORK_PERIOD_MONTHS} Trial Work Period "
            "months. Benefits may be affected.",
        ))
    elif twp_months >= 5:
        alerts.append(SSDIAlert(
            "warning",
            "TWP Usage High",
            f"{twp_months}/{TRIAL_WORK_PERIOD_MONTHS} Trial Work Period months used. "
            "Plan carefully.",
        ))

    high_risk = sum(1 for month in months if sga_risk(month, constants) is Severity.HIGH)
    if high_risk:
        alerts.append(SSDIAlert(
            "danger",
            "High SGA Risk Detected",
            f"{high_risk} month(s) show activity that may impact SSDI benefits.",
        ))

    if any(month.material_participation_test != "none" for month in months):
        alerts.append(SSDIAlert(
            "warning",
            "Material Participation Concern",
            "Some months show material participation indicators. Review your "
            "passive role documentation.",
        ))

    total_passive = sum(
        month.passive_income + month.k1_distributions + month.rental_income
        for month in months
    )
    if total_passive > 0:
        alerts.append(SSDIAlert(
            "info",
            "Passive Income Protected",
            f"${total_passive:,.2f} in passive income does NOT count toward SGA.",
        ))

    return alerts
