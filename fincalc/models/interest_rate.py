"""
Implied interest rate discovery for fixed-payment loans.

Given a principal, a level monthly payment and a term, the annual rate is
recovered by Newton-Raphson iteration on the loan present-value equation

    PV(r) = payment * (1 - (1 + r)^-n) / r

The monthly rate is clamped to [1e-6, 10] each iteration; a rate that collapses
to the floor falls back to a simple-interest approximation.
"""

import logging
import math
from typing import List, Literal

from pydantic import BaseModel, Field

from .amortization import AmortizationEngine, AmortizationRow, YearlyBalance

logger = logging.getLogger(__name__)

RATE_FLOOR = 1e-6
RATE_CEILING = 10.0
INITIAL_RATE_FLOOR = 1e-4
TOLERANCE = 1e-8
MAX_ITERATIONS = 1000

SolveStatus = Literal[
    "converged",
    "linear_fallback",
    "max_iterations",
    "insufficient_payment",
    "invalid_input",
]


class LoanTerms(BaseModel):
    """Known loan terms for which the rate is unknown."""

    principal: float = Field(..., ge=0, description="Loan principal amount")
    payment_amount: float = Field(..., ge=0, description="Monthly payment amount")
    term_years: int = Field(default=0, ge=0, le=100, description="Term in whole years")
    term_months: int = Field(default=0, ge=0, le=1200, description="Additional months")

    @property
    def total_months(self) -> int:
        return self.term_years * 12 + self.term_months


class RateSolution(BaseModel):
    """Outcome of an interest rate solve."""

    annual_rate: float = Field(..., description="Annual rate in percent")
    monthly_rate: float = Field(..., description="Monthly rate as decimal")
    status: SolveStatus = Field(..., description="How the rate was obtained")
    iterations: int = Field(default=0, ge=0, description="Newton iterations run")

    @property
    def converged(self) -> bool:
        return self.status in ("converged", "linear_fallback")

    @property
    def insufficient_payment(self) -> bool:
        return self.status == "insufficient_payment"


class InterestRateAnalysis(BaseModel):
    """Implied rate together with totals and the amortization schedule."""

    solution: RateSolution = Field(..., description="Rate solve outcome")
    annual_rate: float = Field(..., description="Annual rate in percent")
    total_payments: float = Field(..., description="Sum of all payments")
    total_interest: float = Field(..., description="Total interest over the term")
    schedule: List[AmortizationRow] = Field(
        default_factory=list, description="Monthly amortization schedule"
    )
    yearly: List[YearlyBalance] = Field(
        default_factory=list, description="Yearly balance rollup"
    )


def _result(monthly_rate: float, status: SolveStatus, iterations: int) -> RateSolution:
    return RateSolution(
        annual_rate=monthly_rate * 12 * 100,
        monthly_rate=monthly_rate,
        status=status,
        iterations=iterations,
    )


class InterestRateSolver:
    """Newton-Raphson solver for the implied rate of a level-payment loan."""

    @staticmethod
    def present_value(payment: float, monthly_rate: float, term_months: int) -> float:
        """Present value of ``term_months`` level payments at ``monthly_rate``."""
        if monthly_rate == 0:
            return payment * term_months
        return payment * (1 - (1 + monthly_rate) ** -term_months) / monthly_rate

    @staticmethod
    def present_value_derivative(
        payment: float, monthly_rate: float, term_months: int
    ) -> float:
        """Analytic derivative of the present value with respect to the rate."""
        r = monthly_rate
        n = term_months
        discount = (1 + r) ** -n
        return payment * (n * r * discount / (1 + r) - (1 - discount)) / (r * r)

    @staticmethod
    def solve(
        principal: float,
        payment: float,
        term_months: int,
        max_iterations: int = MAX_ITERATIONS,
    ) -> RateSolution:
        """
        Solve for the annual interest rate implied by a loan.

        Args:
            principal: Loan principal amount
            payment: Level monthly payment
            term_months: Number of monthly payments
            max_iterations: Newton iteration cap

        Returns:
            Rate solution with a status describing how it was obtained. An
            insufficient payment is reported as a 0% rate with status
            ``insufficient_payment`` rather than as a valid 0% loan.
        """
        values = (principal, payment, term_months)
        if not all(math.isfinite(v) for v in values) or min(values) <= 0:
            return _result(0.0, "invalid_input", 0)

        n = term_months
        if payment < principal / n:
            logger.debug(
                f"Payment {payment} cannot amortize {principal} over {n} months"
            )
            return _result(0.0, "insufficient_payment", 0)

        total_interest = payment * n - principal
        rough_annual_rate = total_interest / principal / (n / 12)
        rate = max(INITIAL_RATE_FLOOR, rough_annual_rate / 12)

        for iteration in range(1, max_iterations + 1):
            if rate <= RATE_FLOOR:
                # Rate collapsed to zero, use the simple interest approximation
                simple_rate = (total_interest / principal) / (n / 12)
                return RateSolution(
                    annual_rate=simple_rate * 100,
                    monthly_rate=simple_rate / 12,
                    status="linear_fallback",
                    iterations=iteration,
                )

            old_rate = rate
            residual = (
                InterestRateSolver.present_value(payment, rate, n) - principal
            )
            derivative = InterestRateSolver.present_value_derivative(payment, rate, n)
            if derivative == 0 or not math.isfinite(derivative):
                break

            step = residual / derivative
            rate = min(RATE_CEILING, max(RATE_FLOOR, rate - step))
            if rate != old_rate - step:
                # Held at a clamp bound, not a root
                continue

            if abs(step) < TOLERANCE or abs(rate - old_rate) < TOLERANCE:
                return _result(rate, "converged", iteration)

        logger.debug(
            f"Rate solve did not converge for principal={principal} "
            f"payment={payment} months={n}, returning best estimate"
        )
        return _result(rate, "max_iterations", max_iterations)


class InterestRateCalculator:
    """Combines the rate solver with the amortization engine."""

    @staticmethod
    def analyze(terms: LoanTerms) -> InterestRateAnalysis:
        """
        Solve the implied rate for a loan and build its amortization schedule.

        Args:
            terms: Known loan terms

        Returns:
            Rate, totals and schedule; zeroed when the terms are incomplete or
            the payment cannot amortize the principal.
        """
        months = terms.total_months
        solution = InterestRateSolver.solve(
            terms.principal, terms.payment_amount, months
        )
        if solution.status in ("invalid_input", "insufficient_payment"):
            return InterestRateAnalysis(
                solution=solution, annual_rate=0.0, total_payments=0.0, total_interest=0.0
            )

        monthly_rate = solution.annual_rate / 100 / 12
        schedule = AmortizationEngine.generate_schedule(
            terms.principal, monthly_rate, months, terms.payment_amount
        )
        total_payments = terms.payment_amount * months

        return InterestRateAnalysis(
            solution=solution,
            annual_rate=solution.annual_rate,
            total_payments=total_payments,
            total_interest=total_payments - terms.principal,
            schedule=schedule,
            yearly=AmortizationEngine.group_by_year(schedule, terms.principal),
        )
