"""Calculation models for the financial calculators."""

from .amortization import AmortizationEngine, AmortizationRow, YearlyBalance
from .currency import (
    ConversionResult,
    CurrencyConverter,
    CurrencyInfo,
    ExchangeRateTable,
    fallback_rate_table,
)
from .debt_to_income import (
    DebtToIncomeCalculator,
    DebtToIncomeInputs,
    DebtToIncomeResult,
    MoneyFlow,
)
from .income_tax import IncomeTaxCalculator, ProgressiveTaxEngine, TaxProfile, TaxResult
from .interest_rate import (
    InterestRateAnalysis,
    InterestRateCalculator,
    InterestRateSolver,
    LoanTerms,
    RateSolution,
)
from .margin import MarginFacts, MarginResolution, MarginResolver, ProfitMarginResult
from .roth_ira import (
    ContributionLimits,
    GrowthProjector,
    GrowthSchedule,
    RothIraCalculator,
    RothIraComparison,
    RothIraInputs,
)
from .social_security import (
    ClaimComparison,
    ClaimingAgeOptimizer,
    ClaimOption,
    OptimalClaimingResult,
    benefit_multiplier,
    full_retirement_age,
)
from .tax_tables import Bracket, BracketTable, TaxYearTables, load_tax_tables

__all__ = [
    "AmortizationEngine",
    "AmortizationRow",
    "YearlyBalance",
    "ConversionResult",
    "CurrencyConverter",
    "CurrencyInfo",
    "ExchangeRateTable",
    "fallback_rate_table",
    "DebtToIncomeCalculator",
    "DebtToIncomeInputs",
    "DebtToIncomeResult",
    "MoneyFlow",
    "IncomeTaxCalculator",
    "ProgressiveTaxEngine",
    "TaxProfile",
    "TaxResult",
    "InterestRateAnalysis",
    "InterestRateCalculator",
    "InterestRateSolver",
    "LoanTerms",
    "RateSolution",
    "MarginFacts",
    "MarginResolution",
    "MarginResolver",
    "ProfitMarginResult",
    "ContributionLimits",
    "GrowthProjector",
    "GrowthSchedule",
    "RothIraCalculator",
    "RothIraComparison",
    "RothIraInputs",
    "ClaimComparison",
    "ClaimingAgeOptimizer",
    "ClaimOption",
    "OptimalClaimingResult",
    "benefit_multiplier",
    "full_retirement_age",
    "Bracket",
    "BracketTable",
    "TaxYearTables",
    "load_tax_tables",
]
