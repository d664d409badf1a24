"""Tests for the SSDI safeguard checks."""

import dataclasses

import pytest

from taxwizard_calc.constants import TAX_YEAR_2026
from taxwizard_calc.ssdi import (
    RiskAssessmentResult,
    RiskLevel,
    RiskWarning,
    Severity,
    aggregate_risk_level,
    check_ssdi_safeguards,
    is_passive_owner_flag,
)

ALL_SIGNALS = {
    "line_1_wages": 60000,
    "line_4a_guaranteed_services": 5000,
    "line_28_nonpassive_income": 3000,
    "line_14_se_earnings": 2000,
    "is_passive": "no",
}


class TestProfileGate:
    """Checks only run for passive owners."""

    def test_not_passive_owner_returns_clean_result(self):
        result = check_ssdi_safeguards(ALL_SIGNALS, False)
        assert result.is_at_risk is False
        assert result.warnings == []
        assert result.risk_level is RiskLevel.NONE
        assert result.to_dict() == {"isAtRisk": False, "warnings": [], "riskLevel": "none"}

    @pytest.mark.parametrize("flag", [None, "active_manager", "joint_business", "", 1, "true", "yes"])
    def test_unrecognized_flags_treated_as_not_passive(self, flag):
        result = check_ssdi_safeguards(ALL_SIGNALS, flag)
        assert result == RiskAssessmentResult()

    def test_profile_token_enables_checks(self):
        result = check_ssdi_safeguards(ALL_SIGNALS, "passive_owner")
        assert result.risk_level is RiskLevel.HIGH

    def test_flag_parsing(self):
        assert is_passive_owner_flag(True) is True
        assert is_passive_owner_flag("passive_owner") is True
        assert is_passive_owner_flag(" passive_owner ") is True
        assert is_passive_owner_flag(False) is False
        assert is_passive_owner_flag(0) is False


class TestRules:
    """Each rule fires independently."""

    def test_clean_passive_owner(self):
        data = {"line_1_wages": 12000, "is_passive": "yes", "line_28_passive_income": 8000}
        result = check_ssdi_safeguards(data, True)
        assert result == RiskAssessmentResult()

    def test_wages_at_sga_limit_do_not_fire(self):
        """1,620 a month exactly is not over the limit."""
        result = check_ssdi_safeguards({"line_1_wages": 1620 * 12}, True)
        assert result.warnings == []

    def test_wages_over_sga_limit_medium(self):
        result = check_ssdi_safeguards({"line_1_wages": 1621 * 12}, True)
        assert result.is_at_risk is True
        assert [w.severity for w in result.warnings] == [Severity.MEDIUM]
        assert result.risk_level is RiskLevel.MEDIUM
        assert result.warnings[0].field_id == "line_1_wages"
        assert "$1,621.00" in result.warnings[0].message

    def test_guaranteed_payments_high(self):
        """A single $1 guaranteed payment for services is high risk."""
        result = check_ssdi_safeguards({"line_4a_guaranteed_services": 1}, True)
        assert result.is_at_risk is True
        assert result.risk_level is RiskLevel.HIGH
        assert len(result.warnings) == 1

    def test_nonpassive_income_high(self):
        result = check_ssdi_safeguards({"line_28_nonpassive_income": 50}, True)
        assert result.risk_level is RiskLevel.HIGH
        assert result.warnings[0].field_id == "line_28_nonpassive_income"

    def test_se_earnings_high(self):
        result = check_ssdi_safeguards({"line_14_se_earnings": "250"}, True)
        assert result.risk_level is RiskLevel.HIGH
        assert result.warnings[0].field_id == "line_14_se_earnings"

    def test_active_declaration_high(self):
        result = check_ssdi_safeguards({"is_passive": "no"}, True)
        assert result.risk_level is RiskLevel.HIGH
        assert result.warnings[0].field_id == "is_passive"

    def test_zero_and_negative_amounts_do_not_fire(self):
        data = {
            "line_4a_guaranteed_services": 0,
            "line_28_nonpassive_income": -500,
            "line_14_se_earnings": "abc",
        }
        assert check_ssdi_safeguards(data, True).warnings == []


class TestAggregation:
    """Risk level is the highest severity present, never an average."""

    def test_all_rules_fire_in_order(self):
        result = check_ssdi_safeguards(ALL_SIGNALS, True)
        assert [w.field_id for w in result.warnings] == [
            "line_1_wages",
            "line_4a_guaranteed_services",
            "line_28_nonpassive_income",
            "line_14_se_earnings",
            "is_passive",
        ]
        assert [w.severity for w in result.warnings] == [
            Severity.MEDIUM,
            Severity.HIGH,
            Severity.HIGH,
            Severity.HIGH,
            Severity.HIGH,
        ]
        assert result.risk_level is RiskLevel.HIGH

    def test_high_dominates_medium(self):
        data = {"line_1_wages": 60000, "line_14_se_earnings": 1}
        assert check_ssdi_safeguards(data, True).risk_level is RiskLevel.HIGH

    def test_low_only(self):
        warnings = [RiskWarning(Severity.LOW, "note", "x")]
        assert aggregate_risk_level(warnings) is RiskLevel.LOW

    def test_no_warnings(self):
        assert aggregate_risk_level([]) is RiskLevel.NONE

    def test_custom_sga_limit(self):
        constants = dataclasses.replace(TAX_YEAR_2026, sga_monthly_limit=1000)
        data = {"line_1_wages": 13200}
        assert check_ssdi_safeguards(data, True).warnings == []
        assert check_ssdi_safeguards(data, True, constants).risk_level is RiskLevel.MEDIUM

    def test_to_dict(self):
        result = check_ssdi_safeguards({"line_4a_guaranteed_services": 1}, True)
        payload = result.to_dict()
        assert payload["isAtRisk"] is True
        assert payload["riskLevel"] == "high"
        assert payload["warnings"][0]["severity"] == "high"
        assert payload["warnings"][0]["field"] == "line_4a_guaranteed_services"

    def test_does_not_modify_store(self):
        data = dict(ALL_SIGNALS)
        check_ssdi_safeguards(data, True)
        assert data == ALL_SIGNALS
