"""
Loan amortization calculations.

This module builds month-by-month amortization schedules (interest/principal
split and remaining balance) and the yearly rollup used for reporting.
"""

from math import ceil
from typing import List

from pydantic import BaseModel, Field


class AmortizationRow(BaseModel):
    """Breakdown of a single monthly payment."""

    month: int = Field(..., ge=1, description="Payment number (1-based)")
    payment: float = Field(..., description="Total payment amount")
    principal_portion: float = Field(..., description="Principal portion of payment")
    interest_portion: float = Field(..., description="Interest portion of payment")
    balance: float = Field(..., ge=0, description="Balance after the payment")
    cumulative_interest: float = Field(..., description="Cumulative interest paid")
    cumulative_principal: float = Field(..., description="Cumulative principal paid")


class YearlyBalance(BaseModel):
    """Balance and cumulative totals at the end of a loan year."""

    year: int = Field(..., ge=0, description="Loan year (0 = origination)")
    balance: float = Field(..., ge=0, description="Balance at end of year")
    cumulative_interest: float = Field(..., description="Interest paid to date")
    cumulative_principal: float = Field(..., description="Principal paid to date")


class AmortizationEngine:
    """Calculator for amortization schedules."""

    @staticmethod
    def calculate_payment(
        principal: float, annual_rate: float, term_months: int
    ) -> float:
        """
        Calculate the level monthly payment using the standard formula.

        Args:
            principal: Loan principal amount
            annual_rate: Annual interest rate (as decimal, e.g., 0.06 for 6%)
            term_months: Loan term in months

        Returns:
            Monthly payment amount (unrounded)
        """
        if principal <= 0 or term_months <= 0:
            return 0.0
        if annual_rate <= 0:
            return principal / term_months

        monthly_rate = annual_rate / 12
        growth = (1 + monthly_rate) ** term_months
        return principal * (monthly_rate * growth) / (growth - 1)

    @staticmethod
    def generate_schedule(
        principal: float, monthly_rate: float, term_months: int, payment: float
    ) -> List[AmortizationRow]:
        """
        Generate a monthly amortization schedule.

        The schedule always has ``term_months`` rows. The balance is floored at
        zero so rounding residue never shows up as a negative balance.

        Args:
            principal: Starting loan balance
            monthly_rate: Monthly interest rate (as decimal)
            term_months: Number of monthly payments
            payment: Level monthly payment

        Returns:
            List of monthly payment breakdowns
        """
        rows = []
        balance = principal
        cumulative_interest = 0.0
        cumulative_principal = 0.0

        for month in range(1, max(0, term_months) + 1):
            interest_portion = balance * monthly_rate
            principal_portion = payment - interest_portion
            balance -= principal_portion

            cumulative_interest += interest_portion
            cumulative_principal += principal_portion

            if balance < 0:
                balance = 0.0

            rows.append(
                AmortizationRow(
                    month=month,
                    payment=payment,
                    principal_portion=principal_portion,
                    interest_portion=interest_portion,
                    balance=balance,
                    cumulative_interest=cumulative_interest,
                    cumulative_principal=cumulative_principal,
                )
            )

        return rows

    @staticmethod
    def group_by_year(
        schedule: List[AmortizationRow], principal: float
    ) -> List[YearlyBalance]:
        """
        Roll a monthly schedule up into yearly balances.

        Year 0 carries the original principal. Every following year reports the
        state after its 12th payment; a partial final year is dropped.

        Args:
            schedule: Monthly amortization rows
            principal: Original loan principal

        Returns:
            Yearly balances starting at year 0
        """
        yearly = [
            YearlyBalance(
                year=0,
                balance=max(0.0, principal),
                cumulative_interest=0.0,
                cumulative_principal=0.0,
            )
        ]

        total_years = ceil(len(schedule) / 12)
        for year in range(1, total_years + 1):
            month_index = year * 12 - 1
            if month_index >= len(schedule):
                break
            row = schedule[month_index]
            yearly.append(
                YearlyBalance(
                    year=year,
                    balance=row.balance,
                    cumulative_interest=row.cumulative_interest,
                    cumulative_principal=row.cumulative_principal,
                )
            )

        return yearly
