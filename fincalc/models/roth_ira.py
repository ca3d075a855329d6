"""
Roth IRA growth projection.

Projects a balance year by year with annual contributions, either growing
tax-free (Roth) or with investment growth taxed every year (taxable
brokerage account), and compares the two.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ContributionLimits(BaseModel):
    """Annual contribution limits with an age-based catch-up tier."""

    base_limit: float = Field(default=7000.0, ge=0, description="Limit before catch-up age")
    catch_up_limit: float = Field(default=8000.0, ge=0, description="Limit from catch-up age")
    catch_up_age: int = Field(default=50, ge=0, le=120, description="Catch-up age")

    def limit_for_age(self, age: int) -> float:
        return self.catch_up_limit if age >= self.catch_up_age else self.base_limit


class GrowthRow(BaseModel):
    """One projected year."""

    age: int = Field(..., description="Age during the year")
    principal_start: float = Field(..., description="Total contributed at start of year")
    principal_end: float = Field(..., description="Total contributed at end of year")
    balance_start: float = Field(..., description="Balance at start of year")
    balance_end: float = Field(..., description="Balance at end of year")
    tax_paid: float = Field(default=0.0, description="Tax on growth paid this year")


class GrowthSchedule(BaseModel):
    """Year-by-year projection with totals."""

    rows: List[GrowthRow] = Field(default_factory=list)
    ending_balance: float = Field(..., description="Balance after the last year")
    total_principal: float = Field(..., description="Starting balance plus contributions")
    total_growth: float = Field(..., description="Ending balance minus principal")
    total_tax_paid: float = Field(default=0.0, description="Tax paid on growth")


class RothIraInputs(BaseModel):
    """Inputs of the Roth IRA vs. taxable account comparison."""

    current_balance: float = Field(default=20000, ge=0, le=10_000_000)
    annual_contribution: float = Field(default=7000, ge=0, le=100_000)
    maximize_contributions: bool = Field(default=False)
    expected_return: float = Field(default=6, ge=0, le=30, description="Percent per year")
    current_age: int = Field(default=30, ge=0, le=100)
    retirement_age: int = Field(default=65, ge=0, le=120)
    marginal_tax_rate: float = Field(default=25, ge=0, le=50, description="Percent")


class RothIraYear(BaseModel):
    """Side-by-side balances for one year."""

    age: int
    principal_start: float
    principal_end: float
    roth_start: float
    roth_end: float
    taxable_start: float
    taxable_end: float


class RothIraComparison(BaseModel):
    """Roth IRA vs. taxable account outcome, in whole dollars."""

    roth_balance: float = 0.0
    taxable_balance: float = 0.0
    total_principal: float = 0.0
    roth_interest: float = 0.0
    taxable_interest: float = Field(default=0.0, description="Growth before tax")
    total_tax: float = 0.0
    difference: float = Field(default=0.0, description="Roth minus taxable balance")
    schedule: List[RothIraYear] = Field(default_factory=list)


class GrowthProjector:
    """Compound growth with annual contributions."""

    @staticmethod
    def contribution_for_age(
        age: int,
        annual_contribution: float,
        maximize_contributions: bool = False,
        limits: Optional[ContributionLimits] = None,
    ) -> float:
        """Contribution for a given age, switching to the limits when maximizing."""
        if not maximize_contributions:
            return annual_contribution
        return (limits or ContributionLimits()).limit_for_age(age)

    @staticmethod
    def project(
        start_balance: float,
        annual_contribution: float,
        annual_return_rate: float,
        years: int,
        annual_tax_rate_on_growth: Optional[float] = None,
        start_age: int = 0,
        maximize_contributions: bool = False,
        limits: Optional[ContributionLimits] = None,
    ) -> GrowthSchedule:
        """
        Project a balance forward year by year.

        Contributions are added at the end of each year. With
        ``annual_tax_rate_on_growth`` set, each year's growth is taxed
        immediately and only the net amount compounds.

        Args:
            start_balance: Balance at the start of the first year
            annual_contribution: Contribution per year (ignored when maximizing)
            annual_return_rate: Annual return as decimal
            years: Number of years to project
            annual_tax_rate_on_growth: Tax rate on growth as decimal, None for tax-free
            start_age: Age during the first year
            maximize_contributions: Contribute the annual limit for each age
            limits: Contribution limits used when maximizing

        Returns:
            Projection rows and totals
        """
        rows = []
        balance = start_balance
        principal = start_balance
        total_tax = 0.0

        for year in range(max(0, years)):
            age = start_age + year
            contribution = GrowthProjector.contribution_for_age(
                age, annual_contribution, maximize_contributions, limits
            )
            balance_start = balance
            principal_start = principal

            if annual_tax_rate_on_growth is None:
                tax = 0.0
                balance = balance * (1 + annual_return_rate) + contribution
            else:
                growth = balance * annual_return_rate
                tax = growth * annual_tax_rate_on_growth
                balance = balance + growth - tax + contribution

            total_tax += tax
            principal += contribution
            rows.append(
                GrowthRow(
                    age=age,
                    principal_start=principal_start,
                    principal_end=principal,
                    balance_start=balance_start,
                    balance_end=balance,
                    tax_paid=tax,
                )
            )

        return GrowthSchedule(
            rows=rows,
            ending_balance=balance,
            total_principal=principal,
            total_growth=balance - principal,
            total_tax_paid=total_tax,
        )


class RothIraCalculator:
    """Roth IRA vs. taxable account comparison."""

    @staticmethod
    def compare(
        inputs: RothIraInputs, limits: Optional[ContributionLimits] = None
    ) -> RothIraComparison:
        """
        Compare a Roth IRA with a taxable account funded identically.

        Args:
            inputs: Comparison inputs (percent rates, ages)
            limits: Contribution limits used when maximizing

        Returns:
            Rounded comparison; an empty result when the ages do not describe
            at least one year before retirement.
        """
        if (
            inputs.current_age >= inputs.retirement_age
            or inputs.current_age < 0
            or inputs.retirement_age > 120
        ):
            return RothIraComparison()

        years = inputs.retirement_age - inputs.current_age
        return_rate = inputs.expected_return / 100
        common = dict(
            start_balance=inputs.current_balance,
            annual_contribution=inputs.annual_contribution,
            annual_return_rate=return_rate,
            years=years,
            start_age=inputs.current_age,
            maximize_contributions=inputs.maximize_contributions,
            limits=limits,
        )
        roth = GrowthProjector.project(**common)
        taxable = GrowthProjector.project(
            annual_tax_rate_on_growth=inputs.marginal_tax_rate / 100, **common
        )

        schedule = [
            RothIraYear(
                age=roth_row.age,
                principal_start=round(roth_row.principal_start),
                principal_end=round(roth_row.principal_end),
                roth_start=round(roth_row.balance_start),
                roth_end=round(roth_row.balance_end),
                taxable_start=round(taxable_row.balance_start),
                taxable_end=round(taxable_row.balance_end),
            )
            for roth_row, taxable_row in zip(roth.rows, taxable.rows)
        ]

        roth_balance = round(roth.ending_balance)
        taxable_balance = round(taxable.ending_balance)
        principal = round(roth.total_principal)
        total_tax = round(taxable.total_tax_paid)

        return RothIraComparison(
            roth_balance=roth_balance,
            taxable_balance=taxable_balance,
            total_principal=principal,
            roth_interest=roth_balance - principal,
            taxable_interest=taxable_balance + total_tax - principal,
            total_tax=total_tax,
            difference=roth_balance - taxable_balance,
            schedule=schedule,
        )
