"""Tests for the threshold and phase-out formulas."""

import pytest

from taxwizard_calc.calculators.phaseouts import (
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


class TestQBIDeduction:
    """Tests for qbi_deduction (26 USC 199A)."""

    def test_full_deduction_below_threshold(self):
        assert qbi_deduction(10000, 100000, "single") == 2000.00

    def test_full_deduction_at_threshold(self):
        assert qbi_deduction(10000, 191950, "single") == 2000.00

    def test_partial_phase_out(self):
        """Excess 8,050 of a 50,000 range: rate 0.1678."""
        assert qbi_deduction(12000, 200000, "single") == 2013.60

    def test_fully_phased_out_at_range_end(self):
        assert qbi_deduction(12000, 191950 + 50000, "single") == 0

    def test_fully_phased_out_beyond_range(self):
        assert qbi_deduction(12000, 500000, "single") == 0

    def test_joint_threshold_and_range(self):
        """Joint: halfway through the 100,000 range halves the rate."""
        assert qbi_deduction(10000, 383900, "married_filing_jointly") == 2000.00
        assert qbi_deduction(10000, 433900, "married_filing_jointly") == 1000.00

    def test_non_positive_qbi(self):
        assert qbi_deduction(0, 50000) == 0
        assert qbi_deduction(-5000, 50000) == 0

    def test_head_of_household_uses_single_threshold(self):
        assert qbi_deduction(12000, 200000, "head_of_household") == 2013.60


class TestSection179:
    """Tests for section_179_deduction."""

    def test_below_limit(self):
        assert section_179_deduction(100000) == 100000

    def test_capped_at_limit(self):
        assert section_179_deduction(2_000_000) == 1_290_000

    def test_dollar_for_dollar_phase_out(self):
        """80,000 over the 3,220,000 threshold reduces the limit by 80,000."""
        assert section_179_deduction(3_300_000) == 1_210_000

    def test_fully_phased_out(self):
        assert section_179_deduction(3_220_000 + 1_290_000) == 0
        assert section_179_deduction(6_000_000) == 0

    def test_no_cost(self):
        assert section_179_deduction(0) == 0
        assert section_179_deduction(-100) == 0


class TestTaxableSocialSecurity:
    """Tests for taxable_social_security (26 USC 86)."""

    def test_no_benefits(self):
        assert taxable_social_security(0, 100000) == 0

    def test_below_base_threshold(self):
        assert taxable_social_security(20000, 10000, "single") == 0

    def test_between_thresholds(self):
        """Combined 30,000: half of 5,000 over the base threshold."""
        assert taxable_social_security(20000, 20000, "single") == 2500.00

    def test_above_adjusted_threshold_capped_at_85_percent(self):
        assert taxable_social_security(20000, 50000, "single") == 17000.00

    def test_joint_above_adjusted_threshold(self):
        """MFJ, benefits 40,800, AGI 30,000: combined 50,400."""
        assert taxable_social_security(40800, 30000, "married_filing_jointly") == 11440.00

    def test_joint_at_adjusted_threshold(self):
        assert taxable_social_security(40000, 24000, "married_filing_jointly") == 6000.00

    def test_nontaxable_interest_counts_toward_combined_income(self):
        assert taxable_social_security(20000, 15000, "single", nontaxable_interest=5000) == 2500.00

    def test_other_statuses_use_single_thresholds(self):
        assert taxable_social_security(40800, 30000, "married_filing_separately") == (
            taxable_social_security(40800, 30000, "single")
        )


class TestSelfEmploymentTax:
    """Tests for self_employment_base and self_employment_tax."""

    def test_base_is_9235_percent(self):
        assert self_employment_base(500) == 461.75

    def test_small_profit(self):
        """500 profit: 57.257 + 13.39075 rounds to 70.65."""
        assert self_employment_tax(self_employment_base(500)) == 70.65

    def test_below_minimum(self):
        assert self_employment_tax(399.99) == 0

    def test_at_minimum(self):
        assert self_employment_tax(400) == pytest.approx(61.20)

    def test_wage_base_cap_and_additional_medicare(self):
        """250,000 base: SS capped at 168,600; 0.9% on 50,000 over 200,000."""
        assert self_employment_tax(250000) == pytest.approx(20906.40 + 7250.00 + 450.00)

    def test_additional_medicare_threshold_ignores_filing_status(self):
        """The 200,000 threshold applies to joint filers too."""
        data = {"line_4_se_earnings": 250000, "filing_status": "married_filing_jointly"}
        assert calculate_se_tax(data) == pytest.approx(28606.40)


class TestDeductibleSETax:
    """Tests for deductible_se_tax."""

    def test_half_rounded_half_up(self):
        assert deductible_se_tax(70.65) == 35.33

    def test_zero(self):
        assert deductible_se_tax(0) == 0


class TestValueMapWrappers:
    """Tests for the calculate_* wrappers."""

    def test_calculate_qbi_reads_stored_taxable_income(self):
        data = {"line_17_v_qbi": 12000, "line_15_taxable_income": 200000}
        assert calculate_qbi(data) == 2013.60

    def test_calculate_qbi_without_taxable_income(self):
        """Unstored taxable income reads as 0, so the full 20% applies."""
        assert calculate_qbi({"line_17_v_qbi": 12000, "line_1_wages": 900000}) == 2400.00

    def test_calculate_section_179_parses_text(self):
        assert calculate_section_179({"line_2_total_cost": "50000"}) == 50000

    def test_calculate_taxable_ss(self):
        data = {
            "line_6a_ss_benefits": 40800,
            "line_11_agi": 30000,
            "filing_status": "married_filing_jointly",
        }
        assert calculate_taxable_ss(data) == 11440.00

    def test_calculate_taxable_ss_reads_stored_agi_only(self):
        """Wages alone do not feed the combined-income test."""
        data = {"line_6a_ss_benefits": 20000, "line_1_wages": 50000}
        assert calculate_taxable_ss(data) == 0

    def test_calculate_se_base_from_line_2(self):
        assert calculate_se_base({"line_2_se_profit": 500}) == 461.75

    def test_calculate_se_base_prefers_combined_profit(self):
        data = {"line_2_se_profit": 500, "line_3_combined_profit": 1000}
        assert calculate_se_base(data) == 923.50

    def test_calculate_se_tax_from_profit(self):
        assert calculate_se_tax({"line_2_se_profit": 500}) == 70.65

    def test_calculate_se_tax_uses_stored_base(self):
        assert calculate_se_tax({"line_2_se_profit": 500, "line_4_se_earnings": 300}) == 0

    def test_calculate_deductible_se(self):
        assert calculate_deductible_se({"line_2_se_profit": 500}) == 35.33

    def test_missing_inputs_are_zero(self):
        for fn in (
            calculate_qbi,
            calculate_section_179,
            calculate_taxable_ss,
            calculate_se_base,
            calculate_se_tax,
            calculate_deductible_se,
        ):
            assert fn({}) == 0
            assert fn({"line_2_se_profit": "n/a", "line_17_v_qbi": None}) == 0
