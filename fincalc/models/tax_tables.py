"""
Federal tax bracket tables.

Brackets, standard deductions and credit parameters are configuration data
keyed by tax year and filing status. The bundled tables live in
``fincalc/data/tax_tables.json``; an alternative file with the same schema
can be supplied to add tax years without touching the calculation logic.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_TAX_TABLES_PATH = Path(__file__).resolve().parent.parent / "data" / "tax_tables.json"

FilingStatus = Literal[
    "single",
    "married_joint",
    "married_separate",
    "head_of_household",
]

FILING_STATUSES = ("single", "married_joint", "married_separate", "head_of_household")


class Bracket(BaseModel):
    """A single marginal tax bracket."""

    lower_bound: float = Field(..., ge=0, description="Income where the bracket starts")
    upper_bound: Optional[float] = Field(
        None, description="Income where the bracket ends (None = unbounded)"
    )
    rate: float = Field(..., ge=0, le=1, description="Marginal rate (0-1)")

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ValueError("Bracket upper bound must exceed its lower bound")
        return self


class BracketTable(BaseModel):
    """Ordered brackets covering [0, infinity) without gaps or overlaps."""

    brackets: List[Bracket] = Field(..., min_length=1, description="Brackets")

    @model_validator(mode="after")
    def validate_coverage(self):
        if self.brackets[0].lower_bound != 0:
            raise ValueError("First bracket must start at 0")
        for previous, current in zip(self.brackets, self.brackets[1:]):
            if previous.upper_bound is None:
                raise ValueError("Only the last bracket may be unbounded")
            if current.lower_bound != previous.upper_bound:
                raise ValueError(
                    f"Bracket starting at {current.lower_bound} does not continue "
                    f"from {previous.upper_bound}"
                )
        if self.brackets[-1].upper_bound is not None:
            raise ValueError("Last bracket must be unbounded")
        return self

    @property
    def rates(self) -> List[float]:
        return [bracket.rate for bracket in self.brackets]


class CreditParameters(BaseModel):
    """Parameters of the simplified credit and above-the-line rules."""

    child_tax_credit: float = Field(default=2000, ge=0, description="Per young dependent")
    dependent_care_rate: float = Field(default=0.20, ge=0, le=1)
    dependent_care_expense_limit: float = Field(
        default=3000, ge=0, description="Eligible care expense per young dependent"
    )
    education_credit_rate: float = Field(default=0.25, ge=0, le=1)
    education_credit_limit: float = Field(default=2500, ge=0)
    student_loan_interest_limit: float = Field(default=2500, ge=0)


class TaxYearTables(BaseModel):
    """All tax parameters for a single tax year."""

    year: int = Field(..., ge=1900, le=2100, description="Tax year")
    standard_deduction: Dict[FilingStatus, float] = Field(
        ..., description="Standard deduction by filing status"
    )
    brackets: Dict[FilingStatus, BracketTable] = Field(
        ..., description="Bracket table by filing status"
    )
    credits: CreditParameters = Field(default_factory=CreditParameters)

    @model_validator(mode="after")
    def validate_statuses(self):
        missing = set(FILING_STATUSES) - set(self.brackets)
        if missing:
            raise ValueError(f"Tax year {self.year} is missing brackets for {sorted(missing)}")
        missing = set(FILING_STATUSES) - set(self.standard_deduction)
        if missing:
            raise ValueError(
                f"Tax year {self.year} is missing standard deductions for {sorted(missing)}"
            )
        return self


@lru_cache(maxsize=8)
def _load_tax_tables_cached(path: str) -> Dict[int, TaxYearTables]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    tables = {}
    for year, data in raw.items():
        tables[int(year)] = TaxYearTables(
            year=int(year),
            standard_deduction=data["standard_deduction"],
            brackets={
                status: BracketTable(brackets=rows)
                for status, rows in data["brackets"].items()
            },
            credits=CreditParameters(**data.get("credits", {})),
        )

    logger.info(f"Loaded tax tables for years {sorted(tables)} from {path}")
    return tables


def load_tax_tables(path: Optional[str] = None) -> Dict[int, TaxYearTables]:
    """
    Load tax tables keyed by year.

    Args:
        path: JSON file with the tables (defaults to the bundled file)

    Returns:
        Mapping of tax year to its tables

    Raises:
        ValueError: If the file content violates the table invariants
    """
    return _load_tax_tables_cached(str(path or DEFAULT_TAX_TABLES_PATH))


def supported_tax_years(path: Optional[str] = None) -> List[int]:
    """Tax years available in the tables."""
    return sorted(load_tax_tables(path))
