"""
Debt-to-income ratio calculations.

Income and debt line items may be entered monthly or yearly; everything is
normalized to monthly amounts before computing the front-end (housing) and
back-end (all debt) ratios lenders use.
"""

from typing import Literal

from pydantic import BaseModel, Field

MONTHS_PER_YEAR = 12

Frequency = Literal["month", "year"]
RatioStatus = Literal["Excellent", "Good", "Fair", "High Risk"]


class MoneyFlow(BaseModel):
    """An amount paid or received at a given frequency."""

    amount: float = Field(default=0.0, ge=0, description="Amount per period")
    frequency: Frequency = Field(default="month", description="Period of the amount")

    @property
    def monthly(self) -> float:
        if self.frequency == "year":
            return self.amount / MONTHS_PER_YEAR
        return self.amount


def _yearly(amount: float = 0.0) -> MoneyFlow:
    return MoneyFlow(amount=amount, frequency="year")


def _monthly(amount: float = 0.0) -> MoneyFlow:
    return MoneyFlow(amount=amount, frequency="month")


class DebtToIncomeInputs(BaseModel):
    """Income sources and recurring debt payments."""

    # Income
    salary: MoneyFlow = Field(default_factory=_yearly)
    pension: MoneyFlow = Field(default_factory=_yearly)
    investment: MoneyFlow = Field(default_factory=_yearly)
    other_income: MoneyFlow = Field(default_factory=_yearly)

    # Housing
    rental: MoneyFlow = Field(default_factory=_monthly)
    mortgage: MoneyFlow = Field(default_factory=_monthly)
    property_tax: MoneyFlow = Field(default_factory=_yearly)
    hoa_fees: MoneyFlow = Field(default_factory=_monthly)
    home_insurance: MoneyFlow = Field(default_factory=_yearly)

    # Other debt
    credit_cards: MoneyFlow = Field(default_factory=_monthly)
    student_loan: MoneyFlow = Field(default_factory=_monthly)
    auto_loan: MoneyFlow = Field(default_factory=_monthly)
    other_loans: MoneyFlow = Field(default_factory=_monthly)

    @property
    def monthly_income(self) -> float:
        return sum(
            flow.monthly
            for flow in (self.salary, self.pension, self.investment, self.other_income)
        )

    @property
    def monthly_housing(self) -> float:
        return sum(
            flow.monthly
            for flow in (
                self.rental,
                self.mortgage,
                self.property_tax,
                self.hoa_fees,
                self.home_insurance,
            )
        )

    @property
    def monthly_debt(self) -> float:
        return self.monthly_housing + sum(
            flow.monthly
            for flow in (
                self.credit_cards,
                self.student_loan,
                self.auto_loan,
                self.other_loans,
            )
        )


class DebtToIncomeResult(BaseModel):
    """Monthly and annual totals with both DTI ratios."""

    monthly_income: float
    monthly_debt: float
    monthly_housing: float
    front_end_ratio: float = Field(..., description="Housing / income in percent")
    back_end_ratio: float = Field(..., description="All debt / income in percent")
    annual_income: float
    annual_debt: float
    front_end_status: RatioStatus
    back_end_status: RatioStatus


def ratio_status(ratio: float) -> RatioStatus:
    """Lender-style rating of a DTI ratio in percent."""
    if ratio <= 28:
        return "Excellent"
    if ratio <= 36:
        return "Good"
    if ratio <= 43:
        return "Fair"
    return "High Risk"


class DebtToIncomeCalculator:
    """Debt-to-income ratio calculator."""

    @staticmethod
    def calculate(inputs: DebtToIncomeInputs) -> DebtToIncomeResult:
        income = inputs.monthly_income
        housing = inputs.monthly_housing
        debt = inputs.monthly_debt

        front_end = housing / income * 100 if income > 0 else 0.0
        back_end = debt / income * 100 if income > 0 else 0.0

        return DebtToIncomeResult(
            monthly_income=income,
            monthly_debt=debt,
            monthly_housing=housing,
            front_end_ratio=front_end,
            back_end_ratio=back_end,
            annual_income=income * MONTHS_PER_YEAR,
            annual_debt=debt * MONTHS_PER_YEAR,
            front_end_status=ratio_status(front_end),
            back_end_status=ratio_status(back_end),
        )
