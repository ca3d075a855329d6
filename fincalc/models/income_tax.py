"""
Federal income tax estimation.

Computes AGI, the better of standard and itemized deductions, progressive
bracket tax, a simplified set of credits and the resulting refund or balance
due. Credits only offset liability: refundable portions (such as the
refundable part of the child tax credit) are not modelled and the final
liability is floored at zero.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .tax_tables import (
    BracketTable,
    CreditParameters,
    FilingStatus,
    TaxYearTables,
    load_tax_tables,
)

logger = logging.getLogger(__name__)


class BracketTaxResult(BaseModel):
    """Tax due from a bracket table and the rate of the top bracket reached."""

    tax: float = Field(..., ge=0, description="Tax before credits")
    marginal_rate: float = Field(..., ge=0, le=1, description="Marginal rate (0-1)")


class TaxProfile(BaseModel):
    """A household's income, deductions, dependents and withholdings."""

    filing_status: FilingStatus = Field(default="single", description="Filing status")
    tax_year: int = Field(default=2024, ge=1900, le=2100, description="Tax year")

    # Income
    wages: float = Field(default=0, ge=0)
    interest_income: float = Field(default=0, ge=0)
    ordinary_dividends: float = Field(default=0, ge=0)
    qualified_dividends: float = Field(default=0, ge=0)
    passive_income: float = Field(default=0, ge=0)
    short_term_capital_gain: float = Field(default=0, ge=0)
    long_term_capital_gain: float = Field(default=0, ge=0)
    other_income: float = Field(default=0, ge=0)

    # Above-the-line deductions
    ira_contributions: float = Field(default=0, ge=0)
    student_loan_interest: float = Field(default=0, ge=0)

    # Itemized deductions
    real_estate_tax: float = Field(default=0, ge=0)
    mortgage_interest: float = Field(default=0, ge=0)
    charitable_donations: float = Field(default=0, ge=0)
    child_care_expense: float = Field(default=0, ge=0)
    education_expenses: List[float] = Field(
        default_factory=list, max_length=4, description="Up to four education expenses"
    )
    other_deductibles: float = Field(default=0, ge=0)

    # Dependents
    young_dependents: int = Field(default=0, ge=0, le=20, description="Children under 17")
    other_dependents: int = Field(default=0, ge=0, le=20)

    # Withholdings
    federal_withheld: float = Field(default=0, ge=0)
    state_withheld: float = Field(default=0, ge=0)
    local_withheld: float = Field(default=0, ge=0)

    @property
    def total_income(self) -> float:
        return (
            self.wages
            + self.interest_income
            + self.ordinary_dividends
            + self.qualified_dividends
            + self.passive_income
            + self.short_term_capital_gain
            + self.long_term_capital_gain
            + self.other_income
        )

    @property
    def total_education_expenses(self) -> float:
        return sum(max(0.0, expense) for expense in self.education_expenses)

    @property
    def itemized_deductions(self) -> float:
        return (
            self.real_estate_tax
            + self.mortgage_interest
            + self.charitable_donations
            + self.child_care_expense
            + self.total_education_expenses
            + self.other_deductibles
        )

    @property
    def total_withholdings(self) -> float:
        return self.federal_withheld + self.state_withheld + self.local_withheld

    def above_line_deductions(self, credits: CreditParameters) -> float:
        """IRA contributions plus student loan interest up to the annual limit."""
        return self.ira_contributions + min(
            self.student_loan_interest, credits.student_loan_interest_limit
        )


class TaxBreakdown(BaseModel):
    """Summary figures for display."""

    wages: float
    total_other_income: float
    total_deductions: float
    total_withholdings: float


class TaxResult(BaseModel):
    """Complete federal tax estimate."""

    total_income: float = Field(..., description="Gross income from all sources")
    adjusted_gross_income: float = Field(..., description="Income less above-line deductions")
    taxable_income: float = Field(..., ge=0, description="AGI less the used deduction")
    federal_tax_before_credits: float = Field(..., ge=0)
    federal_tax_owed: float = Field(..., ge=0, description="Liability after credits")
    effective_tax_rate: float = Field(..., description="Liability / AGI in percent")
    marginal_tax_rate: float = Field(..., description="Top bracket rate in percent")
    standard_deduction: float
    itemized_deductions: float
    used_deduction: float
    total_credits: float = Field(..., ge=0)
    refund_or_owed: float = Field(..., description="Positive = refund, negative = owed")
    breakdown: TaxBreakdown


class ProgressiveTaxEngine:
    """Bracket arithmetic, deduction selection and credits."""

    @staticmethod
    def compute_tax(taxable_income: float, table: BracketTable) -> BracketTaxResult:
        """
        Compute progressive tax on taxable income.

        Args:
            taxable_income: Income subject to the brackets
            table: Bracket table for the filing status and year

        Returns:
            Tax and the marginal rate (0 when no bracket is reached)
        """
        tax = 0.0
        marginal_rate = 0.0

        for bracket in table.brackets:
            if taxable_income > bracket.lower_bound:
                upper = (
                    bracket.upper_bound
                    if bracket.upper_bound is not None
                    else float("inf")
                )
                tax += (min(taxable_income, upper) - bracket.lower_bound) * bracket.rate
                marginal_rate = bracket.rate

        return BracketTaxResult(tax=tax, marginal_rate=marginal_rate)

    @staticmethod
    def select_deduction(standard_deduction: float, itemized_deductions: float) -> float:
        """Use the larger of the standard and itemized deductions."""
        return max(standard_deduction, itemized_deductions)

    @staticmethod
    def compute_credits(
        young_dependents: int,
        child_care_expense: float,
        education_expenses: float,
        credits: CreditParameters,
    ) -> float:
        """
        Sum the child tax, dependent care and education credits.

        Args:
            young_dependents: Number of children under 17
            child_care_expense: Dependent care expenses paid
            education_expenses: Qualified education expenses paid
            credits: Credit parameters for the tax year

        Returns:
            Total nonrefundable credits
        """
        child_tax_credit = young_dependents * credits.child_tax_credit
        dependent_care_credit = min(
            child_care_expense * credits.dependent_care_rate,
            young_dependents
            * credits.dependent_care_expense_limit
            * credits.dependent_care_rate,
        )
        education_credit = min(
            education_expenses * credits.education_credit_rate,
            credits.education_credit_limit,
        )
        return child_tax_credit + dependent_care_credit + education_credit


class IncomeTaxCalculator:
    """Full federal tax estimate from a tax profile."""

    @staticmethod
    def calculate(
        profile: TaxProfile, tables: Optional[Dict[int, TaxYearTables]] = None
    ) -> Optional[TaxResult]:
        """
        Estimate federal income tax for a profile.

        Args:
            profile: Household tax profile
            tables: Tax tables keyed by year (defaults to the bundled tables)

        Returns:
            Tax estimate, or None when the tax year is not in the tables
        """
        tables = tables if tables is not None else load_tax_tables()
        year_tables = tables.get(profile.tax_year)
        if year_tables is None:
            logger.debug(f"No tax tables for year {profile.tax_year}")
            return None

        credits = year_tables.credits
        total_income = profile.total_income
        above_line = profile.above_line_deductions(credits)
        adjusted_gross_income = total_income - above_line

        standard_deduction = year_tables.standard_deduction[profile.filing_status]
        itemized_deductions = profile.itemized_deductions
        used_deduction = ProgressiveTaxEngine.select_deduction(
            standard_deduction, itemized_deductions
        )
        taxable_income = max(0.0, adjusted_gross_income - used_deduction)

        bracket_tax = ProgressiveTaxEngine.compute_tax(
            taxable_income, year_tables.brackets[profile.filing_status]
        )
        total_credits = ProgressiveTaxEngine.compute_credits(
            profile.young_dependents,
            profile.child_care_expense,
            profile.total_education_expenses,
            credits,
        )
        final_tax = max(0.0, bracket_tax.tax - total_credits)

        total_withholdings = profile.total_withholdings
        effective_rate = (
            final_tax / adjusted_gross_income * 100 if adjusted_gross_income > 0 else 0.0
        )

        return TaxResult(
            total_income=total_income,
            adjusted_gross_income=adjusted_gross_income,
            taxable_income=taxable_income,
            federal_tax_before_credits=bracket_tax.tax,
            federal_tax_owed=final_tax,
            effective_tax_rate=effective_rate,
            marginal_tax_rate=bracket_tax.marginal_rate * 100,
            standard_deduction=standard_deduction,
            itemized_deductions=itemized_deductions,
            used_deduction=used_deduction,
            total_credits=total_credits,
            refund_or_owed=total_withholdings - final_tax,
            breakdown=TaxBreakdown(
                wages=profile.wages,
                total_other_income=total_income - profile.wages,
                total_deductions=used_deduction + above_line,
                total_withholdings=total_withholdings,
            ),
        )
