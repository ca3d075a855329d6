"""
Tests for federal income tax estimation.

This module tests bracket tables, progressive tax arithmetic, deduction
selection, credits and the full tax estimate.
"""

import json

import pytest
from pydantic import ValidationError

from fincalc.models.income_tax import (
    IncomeTaxCalculator,
    ProgressiveTaxEngine,
    TaxProfile,
)
from fincalc.models.tax_tables import (
    DEFAULT_TAX_TABLES_PATH,
    FILING_STATUSES,
    Bracket,
    BracketTable,
    CreditParameters,
    load_tax_tables,
    supported_tax_years,
)


@pytest.fixture
def tables_2024():
    """Bundled 2024 tax tables."""
    return load_tax_tables()[2024]


class TestBracketTable:
    """Test cases for bracket table validation."""

    def test_bundled_tables_load(self):
        """Test that the bundled tables cover 2024 and 2025."""
        assert supported_tax_years() == [2024, 2025]
        tables = load_tax_tables()
        assert tables[2025].standard_deduction["married_joint"] == 30000
        assert tables[2024].brackets["single"].rates == [
            0.10, 0.12, 0.22, 0.24, 0.32, 0.35, 0.37
        ]

    def test_gap_between_brackets_rejected(self):
        """Test that a gap between brackets is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BracketTable(
                brackets=[
                    {"lower_bound": 0, "upper_bound": 1000, "rate": 0.1},
                    {"lower_bound": 2000, "upper_bound": None, "rate": 0.2},
                ]
            )

        assert "does not continue" in str(exc_info.value)

    def test_first_bracket_must_start_at_zero(self):
        """Test that the table must start at zero income."""
        with pytest.raises(ValidationError):
            BracketTable(brackets=[{"lower_bound": 100, "upper_bound": None, "rate": 0.1}])

    def test_last_bracket_must_be_unbounded(self):
        """Test that the table must extend to infinity."""
        with pytest.raises(ValidationError):
            BracketTable(brackets=[{"lower_bound": 0, "upper_bound": 1000, "rate": 0.1}])

    def test_only_last_bracket_unbounded(self):
        """Test that an unbounded bracket cannot be followed by another."""
        with pytest.raises(ValidationError):
            BracketTable(
                brackets=[
                    {"lower_bound": 0, "upper_bound": None, "rate": 0.1},
                    {"lower_bound": 1000, "upper_bound": None, "rate": 0.2},
                ]
            )

    def test_bracket_bounds_and_rate(self):
        """Test single bracket validation."""
        with pytest.raises(ValidationError):
            Bracket(lower_bound=1000, upper_bound=500, rate=0.1)
        with pytest.raises(ValidationError):
            Bracket(lower_bound=0, upper_bound=None, rate=1.5)

    def test_custom_tables_file(self, tmp_path):
        """Test loading tables for another year from a file."""
        with open(DEFAULT_TAX_TABLES_PATH, "r", encoding="utf-8") as f:
            raw = json.load(f)
        path = tmp_path / "tax_tables.json"
        path.write_text(json.dumps({"2030": raw["2025"]}), encoding="utf-8")

        assert supported_tax_years(str(path)) == [2030]


class TestProgressiveTaxEngine:
    """Test cases for ProgressiveTaxEngine."""

    def test_compute_tax_single_80000_wages(self, tables_2024):
        """Test tax on $65,400 of taxable income for a single filer."""
        result = ProgressiveTaxEngine.compute_tax(65400, tables_2024.brackets["single"])

        assert abs(result.tax - 9441) < 0.01
        assert result.marginal_rate == 0.22

    def test_compute_tax_zero_income(self, tables_2024):
        """Test that zero income has no tax and a zero marginal rate."""
        result = ProgressiveTaxEngine.compute_tax(0, tables_2024.brackets["single"])

        assert result.tax == 0
        assert result.marginal_rate == 0

    def test_compute_tax_top_bracket(self, tables_2024):
        """Test that income above the last threshold uses the top rate."""
        result = ProgressiveTaxEngine.compute_tax(1_000_000, tables_2024.brackets["single"])

        assert result.marginal_rate == 0.37
        assert result.tax > 0.35 * 1_000_000 * 0.5

    def test_tax_is_monotonic(self, tables_2024):
        """Test that more income never lowers the tax."""
        table = tables_2024.brackets["head_of_household"]
        taxes = [
            ProgressiveTaxEngine.compute_tax(income, table).tax
            for income in range(0, 800_000, 5_000)
        ]

        assert taxes == sorted(taxes)

    @pytest.mark.parametrize("year", [2024, 2025])
    @pytest.mark.parametrize("status", FILING_STATUSES)
    def test_marginal_rate_non_decreasing_table_rate(self, year, status):
        """Test that the marginal rate never falls and is always a bracket rate."""
        table = load_tax_tables()[year].brackets[status]
        rates = [
            ProgressiveTaxEngine.compute_tax(income, table).marginal_rate
            for income in range(1, 1_000_000, 2_500)
        ]

        assert rates == sorted(rates)
        assert set(rates) <= set(table.rates)

    def test_select_deduction(self):
        """Test that the larger deduction is used."""
        assert ProgressiveTaxEngine.select_deduction(14600, 20000) == 20000
        assert ProgressiveTaxEngine.select_deduction(14600, 5000) == 14600

    def test_compute_credits(self):
        """Test child tax, dependent care and education credits."""
        credits = ProgressiveTaxEngine.compute_credits(
            young_dependents=2,
            child_care_expense=5000,
            education_expenses=12000,
            credits=CreditParameters(),
        )

        # 2 * 2000 + min(1000, 1200) + min(3000, 2500)
        assert abs(credits - 7500) < 0.01

    def test_dependent_care_credit_capped_per_child(self):
        """Test that care expenses above the per-child limit earn no credit."""
        credits = ProgressiveTaxEngine.compute_credits(
            young_dependents=1,
            child_care_expense=10000,
            education_expenses=0,
            credits=CreditParameters(),
        )

        # 2000 + min(2000, 600)
        assert abs(credits - 2600) < 0.01


class TestIncomeTaxCalculator:
    """Test cases for IncomeTaxCalculator."""

    def test_single_wage_earner(self):
        """Test a single filer with $80,000 wages and $9,000 withheld."""
        profile = TaxProfile(
            filing_status="single", tax_year=2024, wages=80000, federal_withheld=9000
        )
        result = IncomeTaxCalculator.calculate(profile)

        assert result.total_income == 80000
        assert result.adjusted_gross_income == 80000
        assert result.used_deduction == 14600
        assert result.taxable_income == 65400
        assert abs(result.federal_tax_owed - 9441) < 0.01
        assert abs(result.marginal_tax_rate - 22) < 1e-9
        assert abs(result.effective_tax_rate - 11.80125) < 1e-6
        assert abs(result.refund_or_owed - (-441)) < 0.01

    def test_married_with_children_and_education(self):
        """Test above-line deductions, credits and the standard deduction together."""
        profile = TaxProfile(
            filing_status="married_joint",
            tax_year=2024,
            wages=150000,
            ira_contributions=5000,
            student_loan_interest=3000,
            child_care_expense=5000,
            education_expenses=[4000, 8000],
            young_dependents=2,
        )
        result = IncomeTaxCalculator.calculate(profile)

        assert result.adjusted_gross_income == 142500
        assert result.itemized_deductions == 17000
        assert result.used_deduction == 29200
        assert result.taxable_income == 113300
        assert abs(result.federal_tax_before_credits - 15032) < 0.01
        assert abs(result.total_credits - 7500) < 0.01
        assert abs(result.federal_tax_owed - 7532) < 0.01
        assert result.breakdown.total_deductions == 29200 + 7500

    def test_itemized_deductions_used_when_larger(self):
        """Test that large itemized deductions replace the standard deduction."""
        profile = TaxProfile(
            wages=120000, mortgage_interest=15000, real_estate_tax=6000, charitable_donations=2000
        )
        result = IncomeTaxCalculator.calculate(profile)

        assert result.used_deduction == 23000
        assert result.taxable_income == 97000

    def test_credits_cannot_make_liability_negative(self):
        """Test that credits beyond the tax only reduce it to zero."""
        profile = TaxProfile(wages=20000, young_dependents=3, federal_withheld=1000)
        result = IncomeTaxCalculator.calculate(profile)

        assert abs(result.federal_tax_before_credits - 540) < 0.01
        assert result.federal_tax_owed == 0
        assert result.refund_or_owed == 1000

    def test_zero_income(self):
        """Test that an empty profile owes nothing."""
        result = IncomeTaxCalculator.calculate(TaxProfile())

        assert result.taxable_income == 0
        assert result.federal_tax_owed == 0
        assert result.effective_tax_rate == 0
        assert result.marginal_tax_rate == 0

    def test_other_income_in_breakdown(self):
        """Test that non-wage income is summed separately."""
        profile = TaxProfile(wages=50000, interest_income=1000, long_term_capital_gain=4000)
        result = IncomeTaxCalculator.calculate(profile)

        assert result.total_income == 55000
        assert result.breakdown.total_other_income == 5000

    def test_unsupported_year(self):
        """Test that a year without tables gives no result."""
        assert IncomeTaxCalculator.calculate(TaxProfile(tax_year=2019, wages=50000)) is None

    def test_too_many_education_expenses(self):
        """Test that at most four education expenses are accepted."""
        with pytest.raises(ValidationError):
            TaxProfile(education_expenses=[1000, 1000, 1000, 1000, 1000])
