"""Tests for debt-to-income ratio calculations."""

import pytest
from pydantic import ValidationError

from fincalc.models.debt_to_income import (
    DebtToIncomeCalculator,
    DebtToIncomeInputs,
    MoneyFlow,
    ratio_status,
)


class TestMoneyFlow:
    """Test cases for MoneyFlow."""

    def test_yearly_amount_is_spread_monthly(self):
        assert MoneyFlow(amount=12000, frequency="year").monthly == 1000

    def test_monthly_amount_unchanged(self):
        assert MoneyFlow(amount=850, frequency="month").monthly == 850

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            MoneyFlow(amount=-1)

    def test_default_frequencies(self):
        """Test that income and property costs default to yearly amounts."""
        inputs = DebtToIncomeInputs()

        assert inputs.salary.frequency == "year"
        assert inputs.property_tax.frequency == "year"
        assert inputs.rental.frequency == "month"
        assert inputs.credit_cards.frequency == "month"


class TestRatioStatus:
    """Test cases for ratio_status."""

    @pytest.mark.parametrize(
        "ratio,expected",
        [
            (0, "Excellent"),
            (28, "Excellent"),
            (28.5, "Good"),
            (36, "Good"),
            (40, "Fair"),
            (43, "Fair"),
            (43.1, "High Risk"),
        ],
    )
    def test_ratio_status(self, ratio, expected):
        assert ratio_status(ratio) == expected


class TestDebtToIncomeCalculator:
    """Test cases for DebtToIncomeCalculator."""

    def test_renter_with_car_loan(self):
        """Test $60,000 salary, $1,200 rent, $200 cards and $250 auto loan."""
        inputs = DebtToIncomeInputs(
            salary=MoneyFlow(amount=60000, frequency="year"),
            rental=MoneyFlow(amount=1200),
            credit_cards=MoneyFlow(amount=200),
            auto_loan=MoneyFlow(amount=250),
        )
        result = DebtToIncomeCalculator.calculate(inputs)

        assert result.monthly_income == 5000
        assert result.monthly_housing == 1200
        assert result.monthly_debt == 1650
        assert abs(result.front_end_ratio - 24) < 1e-9
        assert abs(result.back_end_ratio - 33) < 1e-9
        assert result.front_end_status == "Excellent"
        assert result.back_end_status == "Good"
        assert result.annual_income == 60000
        assert result.annual_debt == 19800

    def test_homeowner_costs(self):
        """Test that yearly property costs count towards housing."""
        inputs = DebtToIncomeInputs(
            salary=MoneyFlow(amount=8000, frequency="month"),
            mortgage=MoneyFlow(amount=2000),
            property_tax=MoneyFlow(amount=6000, frequency="year"),
            home_insurance=MoneyFlow(amount=1200, frequency="year"),
            hoa_fees=MoneyFlow(amount=100),
            student_loan=MoneyFlow(amount=400),
        )
        result = DebtToIncomeCalculator.calculate(inputs)

        assert result.monthly_housing == 2700
        assert result.monthly_debt == 3100
        assert abs(result.front_end_ratio - 33.75) < 1e-9
        assert result.back_end_status == "Fair"

    def test_no_income(self):
        """Test that ratios are zero without income."""
        inputs = DebtToIncomeInputs(credit_cards=MoneyFlow(amount=500))
        result = DebtToIncomeCalculator.calculate(inputs)

        assert result.front_end_ratio == 0
        assert result.back_end_ratio == 0
        assert result.monthly_debt == 500
