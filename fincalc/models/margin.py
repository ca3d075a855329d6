"""
Margin calculations.

The profit margin resolver takes any two of cost, revenue, margin and profit
and derives the other two. Each supported pair has its own closed form; the
pairs are tried in a fixed order so that a form with more than two fields
filled in resolves the same way every time. The module also covers stock
trading margin and forex margin requirements.
"""

from math import isfinite
from typing import Literal, Optional

from pydantic import BaseModel, Field

MarginStatus = Literal["resolved", "insufficient_input", "degenerate", "invalid_input"]


class MarginFacts(BaseModel):
    """Partially known cost/revenue/margin/profit figures."""

    cost: Optional[float] = Field(None, description="Cost of goods")
    revenue: Optional[float] = Field(None, description="Sale price / revenue")
    margin: Optional[float] = Field(None, description="Gross margin in percent (0-100)")
    profit: Optional[float] = Field(None, description="Profit amount")

    @property
    def known_count(self) -> int:
        return sum(
            value is not None
            for value in (self.cost, self.revenue, self.margin, self.profit)
        )


class ProfitMarginResult(BaseModel):
    """Fully resolved margin figures."""

    cost: float
    revenue: float
    margin: float = Field(..., description="Profit / revenue in percent")
    profit: float
    markup: float = Field(..., description="Profit / cost in percent")


class MarginResolution(BaseModel):
    """Outcome of resolving a partial set of margin figures."""

    status: MarginStatus = Field(..., description="Resolution outcome")
    result: Optional[ProfitMarginResult] = Field(
        None, description="Resolved figures when status is 'resolved'"
    )


class StockMarginResult(BaseModel):
    """Funds needed to buy stock on margin."""

    total_cost: float = Field(..., ge=0)
    amount_required: float = Field(..., ge=0, description="Own funds required")
    borrowed_amount: float = Field(..., description="Amount borrowed from the broker")


class CurrencyMarginResult(BaseModel):
    """Funds needed to open a leveraged forex position."""

    total_value: float = Field(..., ge=0)
    amount_required: float = Field(..., ge=0, description="Margin required")
    leverage: float = Field(..., gt=0)


def _resolved(cost: float, revenue: float, margin: float, profit: float) -> MarginResolution:
    markup = profit / cost * 100 if cost > 0 else 0.0
    return MarginResolution(
        status="resolved",
        result=ProfitMarginResult(
            cost=cost, revenue=revenue, margin=margin, profit=profit, markup=markup
        ),
    )


class MarginResolver:
    """Resolves any two known margin figures into all four plus markup."""

    @staticmethod
    def resolve(facts: MarginFacts) -> MarginResolution:
        """
        Derive the missing margin figures.

        Args:
            facts: Partially known figures; at least two must be present

        Returns:
            Resolution with status ``resolved`` and the full figures, or a
            status explaining why no result exists.
        """
        if facts.known_count < 2:
            return MarginResolution(status="insufficient_input")

        cost, revenue, margin, profit = facts.cost, facts.revenue, facts.margin, facts.profit
        if any(v is not None and not isfinite(v) for v in (cost, revenue, margin, profit)):
            return MarginResolution(status="invalid_input")

        # Cost and revenue
        if cost is not None and revenue is not None and cost >= 0 and revenue >= 0:
            profit = revenue - cost
            margin = profit / revenue * 100 if revenue > 0 else 0.0
            return _resolved(cost, revenue, margin, profit)

        # Cost and margin: revenue = cost / (1 - margin / 100)
        if cost is not None and margin is not None and cost >= 0 and margin >= 0:
            if margin >= 100:
                return MarginResolution(status="degenerate")
            revenue = cost / (1 - margin / 100)
            return _resolved(cost, revenue, margin, revenue - cost)

        # Cost and profit
        if cost is not None and profit is not None and cost >= 0:
            revenue = cost + profit
            margin = profit / revenue * 100 if revenue > 0 else 0.0
            return _resolved(cost, revenue, margin, profit)

        # Revenue and margin
        if revenue is not None and margin is not None and revenue >= 0 and margin >= 0:
            profit = margin / 100 * revenue
            return _resolved(revenue - profit, revenue, margin, profit)

        # Revenue and profit
        if revenue is not None and profit is not None and revenue >= 0:
            margin = profit / revenue * 100 if revenue > 0 else 0.0
            return _resolved(revenue - profit, revenue, margin, profit)

        # Margin and profit: revenue = profit / (margin / 100)
        if margin is not None and profit is not None and margin >= 0:
            if margin == 0:
                return MarginResolution(status="degenerate")
            revenue = profit / (margin / 100)
            return _resolved(revenue - profit, revenue, margin, profit)

        return MarginResolution(status="invalid_input")

    @staticmethod
    def stock_margin(
        stock_price: float, number_of_shares: float, margin_requirement: float
    ) -> Optional[StockMarginResult]:
        """
        Calculate the funds needed to buy stock on margin.

        Args:
            stock_price: Price per share
            number_of_shares: Shares purchased
            margin_requirement: Initial margin requirement in percent

        Returns:
            Stock margin figures, or None if any input is not positive
        """
        if stock_price <= 0 or number_of_shares <= 0 or margin_requirement <= 0:
            return None

        total_cost = stock_price * number_of_shares
        amount_required = total_cost * (margin_requirement / 100)
        return StockMarginResult(
            total_cost=total_cost,
            amount_required=amount_required,
            borrowed_amount=total_cost - amount_required,
        )

    @staticmethod
    def currency_margin(
        exchange_rate: float, margin_ratio: float, units: float
    ) -> Optional[CurrencyMarginResult]:
        """
        Calculate the margin needed for a forex position.

        Args:
            exchange_rate: Price of one unit in the account currency
            margin_ratio: Leverage ratio (e.g. 20 for 20:1)
            units: Position size in units

        Returns:
            Forex margin figures, or None if any input is not positive
        """
        if exchange_rate <= 0 or margin_ratio <= 0 or units <= 0:
            return None

        total_value = exchange_rate * units
        return CurrencyMarginResult(
            total_value=total_value,
            amount_required=total_value / margin_ratio,
            leverage=margin_ratio,
        )
