"""Tests for the value store accessor and constants table."""

import dataclasses
import math
from decimal import Decimal

import pytest

from taxwizard_calc.constants import (
    DEFAULT_TAX_CONSTANTS,
    TAX_YEAR_2026,
    FilingStatus,
    get_tax_constants,
    is_joint,
)
from taxwizard_calc.values import FieldValues, round_cents, to_number


class TestToNumber:
    """Tests for to_number coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (5, 5.0),
            (12.5, 12.5),
            ("12.5", 12.5),
            (" 7 ", 7.0),
            ("-300", -300.0),
            ("1e3", 1000.0),
            (Decimal("1.50"), 1.5),
        ],
    )
    def test_numeric(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize(
        "value",
        [
            "", "  ", "abc", "$100", None, True, False,
            float("nan"), float("inf"), "NaN", "Infinity", [1], {},
            10**400, -(10**400), "1e400", Decimal("1e400"),
        ],
    )
    def test_not_numeric(self, value):
        assert to_number(value) is None


class TestRoundCents:
    """Tests for round_cents (half up, away from zero)."""

    def test_rounds_half_up(self):
        assert round_cents(70.64775) == 70.65
        assert round_cents(35.325) == 35.33
        assert round_cents(2.675) == 2.68
        assert round_cents(1.005) == 1.01

    def test_rounds_half_away_from_zero(self):
        assert round_cents(-2.675) == -2.68
        assert round_cents(-0.005) == -0.01

    def test_rounds_down(self):
        assert round_cents(2013.6000000000001) == 2013.60
        assert round_cents(10.004) == 10.00

    def test_no_negative_zero(self):
        assert math.copysign(1, round_cents(-0.001)) == 1

    def test_non_finite(self):
        assert round_cents(float("nan")) == 0
        assert round_cents(float("inf")) == 0

    def test_very_large_amounts(self):
        assert round_cents(1e27) == 1e27
        assert round_cents(-1.5e300) == -1.5e300
        assert round_cents(123456789012345678901234567.0) == 123456789012345678901234567.0

    def test_int_too_large_for_float(self):
        assert round_cents(10**400) == 0


class TestFieldValues:
    """Tests for FieldValues."""

    def test_number_and_override(self):
        values = FieldValues({"a": "10", "b": "x"})
        assert values.number("a") == 10
        assert values.number("b") == 0
        assert values.number("missing") == 0
        assert values.override("a") == 10
        assert values.override("b") is None

    def test_total(self):
        values = FieldValues({"a": 1, "b": "2.5", "c": None})
        assert values.total("a", "b", "c", "d") == 3.5

    def test_text(self):
        values = FieldValues({"is_passive": " no ", "n": 5})
        assert values.text("is_passive") == "no"
        assert values.text("n") is None
        assert values.text("missing") is None

    def test_contains_and_raw(self):
        values = FieldValues({"a": "x"})
        assert "a" in values
        assert "b" not in values
        assert values.raw("a") == "x"

    def test_filing_status(self):
        assert FieldValues({}).filing_status is FilingStatus.SINGLE
        joint = FieldValues({"filing_status": "married_filing_jointly"})
        assert joint.filing_status is FilingStatus.MARRIED_FILING_JOINTLY

    def test_missing_or_invalid_data(self):
        assert FieldValues(None).number("a") == 0
        assert FieldValues(["not", "a", "map"]).number("a") == 0

    def test_default_constants(self):
        assert FieldValues({}).constants is DEFAULT_TAX_CONSTANTS

    def test_wrap_reuses_view(self):
        values = FieldValues({"a": 1})
        assert FieldValues.wrap(values) is values
        assert FieldValues.wrap(values, values.constants) is values

    def test_wrap_with_other_constants(self):
        other = dataclasses.replace(TAX_YEAR_2026, sga_monthly_limit=1)
        values = FieldValues({"a": 1})
        wrapped = FieldValues.wrap(values, other)
        assert wrapped is not values
        assert wrapped.constants is other
        assert wrapped.number("a") == 1


class TestConstants:
    """Tests for the constants table."""

    def test_lookup_by_year(self):
        assert get_tax_constants(2026) is TAX_YEAR_2026

    def test_unknown_year(self):
        with pytest.raises(ValueError, match="1999"):
            get_tax_constants(1999)

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            TAX_YEAR_2026.sga_monthly_limit = 0

    @pytest.mark.parametrize(
        "brackets",
        [TAX_YEAR_2026.brackets_single, TAX_YEAR_2026.brackets_mfj, TAX_YEAR_2026.brackets_hoh],
    )
    def test_bracket_tables(self, brackets):
        assert len(brackets) == 7
        uppers = [upper for upper, _ in brackets]
        assert uppers == sorted(uppers)
        assert math.isinf(uppers[-1])
        assert [rate for _, rate in brackets] == [0.10, 0.12, 0.22, 0.24, 0.32, 0.35, 0.37]

    def test_contract_values(self):
        c = TAX_YEAR_2026
        assert (c.standard_deduction_single, c.standard_deduction_mfj, c.standard_deduction_hoh) == (
            14600, 29200, 21900,
        )
        assert (c.qbi_threshold_single, c.qbi_threshold_mfj) == (191950, 383900)
        assert (c.qbi_phase_out_range_single, c.qbi_phase_out_range_mfj) == (50000, 100000)
        assert (c.section_179_limit, c.section_179_phase_out) == (1290000, 3220000)
        assert c.sga_monthly_limit == 1620
        assert c.social_security_wage_base == 168600
        assert c.ss_thresholds("single") == (25000, 34000)
        assert c.ss_thresholds("married_filing_jointly") == (32000, 44000)
        assert (c.se_social_security_rate, c.se_medicare_rate, c.additional_medicare_rate) == (
            0.124, 0.029, 0.009,
        )

    def test_filing_status_parse(self):
        assert FilingStatus.parse("head_of_household") is FilingStatus.HEAD_OF_HOUSEHOLD
        assert FilingStatus.parse(" single ") is FilingStatus.SINGLE
        assert FilingStatus.parse("MFJ") is FilingStatus.SINGLE
        assert FilingStatus.parse(None) is FilingStatus.SINGLE
        assert FilingStatus.parse(FilingStatus.QUALIFYING_WIDOW) is FilingStatus.QUALIFYING_WIDOW

    def test_only_joint_is_joint(self):
        assert is_joint("married_filing_jointly")
        for status in FilingStatus:
            if status is not FilingStatus.MARRIED_FILING_JOINTLY:
                assert not is_joint(status)
