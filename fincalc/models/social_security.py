"""
Social Security claiming age analysis.

This module finds the financially best age to claim Social Security
retirement benefits between 62 and 70. Benefits claimed before full
retirement age (FRA) are reduced, benefits claimed after FRA earn delayed
retirement credits, and each benefit stream is valued by growing it with a
cost-of-living adjustment (COLA) and discounting it at an investment return.
"""

from datetime import date
from typing import List, Literal, Optional

import numpy as np
from pydantic import BaseModel, Field

EARLIEST_CLAIM_AGE = 62
LATEST_CLAIM_AGE = 70
DELAYED_CREDIT_PER_YEAR = 0.08
AVERAGE_FRA_BENEFIT = 1907.0
BENEFIT_GROWTH_RATE = 0.03


def full_retirement_age(birth_year: int) -> float:
    """
    Full retirement age for a birth year.

    Args:
        birth_year: Year of birth

    Returns:
        FRA in fractional years (e.g. 66.5 for 1957)
    """
    if birth_year <= 1937:
        return 65.0
    if birth_year <= 1942:
        return 65 + (birth_year - 1937) * 2 / 12
    if birth_year <= 1954:
        return 66.0
    if birth_year <= 1959:
        return 66 + (birth_year - 1954) * 2 / 12
    return 67.0


def benefit_multiplier(claim_age: float, fra: float) -> float:
    """
    Fraction of the FRA benefit received when claiming at ``claim_age``.

    Early claiming loses 5/9 of 1% per month for the first 36 months and
    5/12 of 1% per month beyond that. Delayed claiming earns 8% per year,
    with no further credit past age 70.
    """
    if claim_age < fra:
        months_early = (fra - claim_age) * 12
        if months_early <= 36:
            return 1 - months_early * 5 / 9 / 100
        first_reduction = 36 * 5 / 9 / 100
        additional_reduction = (months_early - 36) * 5 / 12 / 100
        return 1 - (first_reduction + additional_reduction)
    if claim_age > fra:
        years_delayed = min(claim_age - fra, LATEST_CLAIM_AGE - fra)
        return 1 + years_delayed * DELAYED_CREDIT_PER_YEAR
    return 1.0


def estimate_fra_benefit(birth_year: int, current_year: Optional[int] = None) -> float:
    """Rough monthly FRA benefit for an average earner, grown 3% per year until 67."""
    if current_year is None:
        current_year = date.today().year
    age = current_year - birth_year
    years_to_retirement = max(0, 67 - age)
    return AVERAGE_FRA_BENEFIT * (1 + BENEFIT_GROWTH_RATE) ** years_to_retirement


def present_value(
    monthly_benefit: float,
    years_receiving: int,
    discount_rate: float,
    cola_rate: float,
    delay_years: int = 0,
) -> float:
    """
    Present value of an annual benefit stream.

    Args:
        monthly_benefit: First-year monthly benefit
        years_receiving: Number of annual payments
        discount_rate: Annual discount rate (decimal)
        cola_rate: Annual COLA (decimal)
        delay_years: Extra years of discounting applied to every payment

    Returns:
        Discounted sum of the COLA-grown annual benefits
    """
    years = np.arange(max(0, years_receiving))
    annual = monthly_benefit * 12 * (1 + cola_rate) ** years
    discount = (1 + discount_rate) ** (years + delay_years)
    return float(np.sum(annual / discount))


def nominal_total(monthly_benefit: float, years_receiving: int, cola_rate: float) -> float:
    """Undiscounted sum of the COLA-grown annual benefits."""
    years = np.arange(max(0, years_receiving))
    return float(np.sum(monthly_benefit * 12 * (1 + cola_rate) ** years))


class ClaimingScenario(BaseModel):
    """A single claiming decision and its valuation assumptions."""

    full_retirement_age: float = Field(..., ge=65, le=67, description="FRA in years")
    claim_age: int = Field(..., ge=0, le=120, description="Age benefits start")
    monthly_benefit_at_fra: float = Field(..., ge=0, description="Monthly benefit at FRA")
    discount_rate: float = Field(default=0.05, description="Annual investment return")
    cola_rate: float = Field(default=0.03, description="Annual COLA")
    life_expectancy: int = Field(..., ge=0, le=120, description="Age at death")

    @property
    def multiplier(self) -> float:
        return benefit_multiplier(self.claim_age, self.full_retirement_age)

    @property
    def monthly_benefit(self) -> float:
        return self.monthly_benefit_at_fra * self.multiplier

    @property
    def years_receiving(self) -> int:
        return max(0, self.life_expectancy - self.claim_age)

    @property
    def present_value(self) -> float:
        return present_value(
            self.monthly_benefit, self.years_receiving, self.discount_rate, self.cola_rate
        )

    @property
    def total_nominal(self) -> float:
        return nominal_total(self.monthly_benefit, self.years_receiving, self.cola_rate)


class ClaimingAgeAnalysis(BaseModel):
    """Valuation of claiming at one age."""

    age: int
    multiplier: float
    monthly_benefit: float
    years_receiving: int
    present_value: float
    total_nominal: float


class OptimalClaimingResult(BaseModel):
    """Best claiming age and the full per-age table."""

    fra: float = Field(..., description="Full retirement age")
    estimated_fra_benefit: float = Field(..., description="Monthly benefit at FRA")
    best_age: Optional[int] = Field(None, description="Age with the highest present value")
    best_monthly_benefit: float = 0.0
    present_value_at_best: float = 0.0
    per_age_table: List[ClaimingAgeAnalysis] = Field(default_factory=list)


class ClaimOption(BaseModel):
    """A claiming age with its known monthly payment."""

    claim_age: int = Field(..., ge=0, le=120)
    monthly_payment: float = Field(..., ge=0)


class ClaimOptionSummary(BaseModel):
    """Valuation of one claim option."""

    claim_age: int
    monthly_payment: float
    years_receiving: int
    present_value: float
    total_nominal: float


class ClaimComparison(BaseModel):
    """Comparison of two claim options."""

    option_a: ClaimOptionSummary
    option_b: ClaimOptionSummary
    difference: float = Field(..., ge=0, description="Absolute present value gap")
    better_option: Literal["A", "B"]
    break_even_age: Optional[int] = Field(
        None, description="First age at which option B's cumulative benefits catch up"
    )
    delay_years: int


class ClaimingAgeOptimizer:
    """Finds the best claiming age and compares claiming options."""

    @staticmethod
    def optimal_age(
        birth_year: int,
        life_expectancy: int,
        discount_rate: float,
        cola_rate: float,
        monthly_benefit_at_fra: Optional[float] = None,
        current_year: Optional[int] = None,
    ) -> OptimalClaimingResult:
        """
        Find the claiming age with the highest present value.

        Ages 62 through 70 are scanned in order, skipping ages past life
        expectancy. Ties keep the earliest age.

        Args:
            birth_year: Year of birth (sets FRA)
            life_expectancy: Age at death
            discount_rate: Annual investment return (decimal)
            cola_rate: Annual COLA (decimal)
            monthly_benefit_at_fra: FRA benefit; estimated from birth year if None
            current_year: Year used for the benefit estimate

        Returns:
            Best age, its benefit and value, and the per-age table. ``best_age``
            is None when no age can be claimed before life expectancy.
        """
        fra = full_retirement_age(birth_year)
        if monthly_benefit_at_fra is None:
            monthly_benefit_at_fra = estimate_fra_benefit(birth_year, current_year)

        table = []
        best = None
        for claim_age in range(EARLIEST_CLAIM_AGE, LATEST_CLAIM_AGE + 1):
            if claim_age > life_expectancy:
                continue
            scenario = ClaimingScenario(
                full_retirement_age=fra,
                claim_age=claim_age,
                monthly_benefit_at_fra=monthly_benefit_at_fra,
                discount_rate=discount_rate,
                cola_rate=cola_rate,
                life_expectancy=life_expectancy,
            )
            row = ClaimingAgeAnalysis(
                age=claim_age,
                multiplier=scenario.multiplier,
                monthly_benefit=scenario.monthly_benefit,
                years_receiving=scenario.years_receiving,
                present_value=scenario.present_value,
                total_nominal=scenario.total_nominal,
            )
            table.append(row)
            if best is None or row.present_value > best.present_value:
                best = row

        if best is None:
            return OptimalClaimingResult(fra=fra, estimated_fra_benefit=monthly_benefit_at_fra)

        return OptimalClaimingResult(
            fra=fra,
            estimated_fra_benefit=monthly_benefit_at_fra,
            best_age=best.age,
            best_monthly_benefit=best.monthly_benefit,
            present_value_at_best=best.present_value,
            per_age_table=table,
        )

    @staticmethod
    def break_even_age(
        option_a: ClaimOption,
        option_b: ClaimOption,
        life_expectancy: int,
        cola_rate: float,
    ) -> Optional[int]:
        """
        First age at which option B's cumulative nominal benefits reach option A's.

        Benefits are counted through the end of each age and grow with COLA.
        The search runs from option B's claim age up to life expectancy.
        """
        ages = np.arange(option_b.claim_age, life_expectancy + 1)
        if ages.size == 0:
            return None

        count_a = np.clip(ages - option_a.claim_age + 1, 0, None)
        count_b = np.clip(ages - option_b.claim_age + 1, 0, None)
        max_count = int(max(count_a.max(), count_b.max()))
        growth = np.concatenate(([0.0], np.cumsum((1 + cola_rate) ** np.arange(max_count))))

        cumulative_a = option_a.monthly_payment * 12 * growth[count_a]
        cumulative_b = option_b.monthly_payment * 12 * growth[count_b]
        caught_up = np.nonzero(cumulative_b >= cumulative_a)[0]
        if caught_up.size == 0:
            return None
        return int(ages[caught_up[0]])

    @staticmethod
    def compare_two(
        option_a: ClaimOption,
        option_b: ClaimOption,
        life_expectancy: int = 85,
        discount_rate: float = 0.05,
        cola_rate: float = 0.03,
    ) -> ClaimComparison:
        """
        Compare claiming at two ages with known monthly payments.

        Each stream is discounted from its own start; option B is additionally
        discounted by the years it is delayed relative to option A.

        Args:
            option_a: Earlier claim option
            option_b: Later claim option
            life_expectancy: Age at death
            discount_rate: Annual investment return (decimal)
            cola_rate: Annual COLA (decimal)

        Returns:
            Present values, the better option and the break-even age
        """
        delay_years = option_b.claim_age - option_a.claim_age
        summaries = []
        for option, delay in ((option_a, 0), (option_b, delay_years)):
            years = max(0, life_expectancy - option.claim_age)
            summaries.append(
                ClaimOptionSummary(
                    claim_age=option.claim_age,
                    monthly_payment=option.monthly_payment,
                    years_receiving=years,
                    present_value=present_value(
                        option.monthly_payment, years, discount_rate, cola_rate, delay
                    ),
                    total_nominal=nominal_total(option.monthly_payment, years, cola_rate),
                )
            )
        summary_a, summary_b = summaries
        difference = summary_b.present_value - summary_a.present_value

        return ClaimComparison(
            option_a=summary_a,
            option_b=summary_b,
            difference=abs(difference),
            better_option="B" if difference > 0 else "A",
            break_even_age=ClaimingAgeOptimizer.break_even_age(
                option_a, option_b, life_expectancy, cola_rate
            ),
            delay_years=delay_years,
        )
