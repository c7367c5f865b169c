"""
Report Models

Outputs of the read-side queries. These are derived values, recomputed
on every call and never persisted.
"""

from datetime import date
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from ewallet.models.wallet import CreditCard, DebitCard, Transaction


class RollupGroup(BaseModel):
    """One group of a category or card rollup."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Category name or card id")
    label: str = Field(..., description="Display label of the group")
    total: float = Field(..., ge=0)
    count: int = Field(..., ge=0)
    transactions: tuple[Transaction, ...] = ()


class DaySummary(BaseModel):
    """Income and expenses of one calendar day."""

    model_config = ConfigDict(frozen=True)

    day: date
    label: str = Field(..., description="Abbreviated weekday name")
    date_string: str = Field(..., description="Display date matched against entries")
    income: float = 0.0
    expenses: float = 0.0


class WeeklySeries(BaseModel):
    """
    Seven days ending today, oldest first.

    net_amount is total_income - total_expenses.
    """

    model_config = ConfigDict(frozen=True)

    days: tuple[DaySummary, ...]
    total_income: float
    total_expenses: float
    net_amount: float

    @property
    def labels(self) -> list[str]:
        return [d.label for d in self.days]

    @property
    def income_data(self) -> list[float]:
        return [d.income for d in self.days]

    @property
    def expense_data(self) -> list[float]:
        return [d.expenses for d in self.days]

    @property
    def max_value(self) -> float:
        """Largest single bar, used to scale a chart; at least 1."""
        return max([1.0, *self.income_data, *self.expense_data])


class FlowOverview(BaseModel):
    """Everything the expenses or income view shows."""

    model_config = ConfigDict(frozen=True)

    total: float
    transactions: tuple[Transaction, ...]
    by_category: tuple[RollupGroup, ...]
    by_card: tuple[RollupGroup, ...]


class CardReport(BaseModel):
    """Summary of one card's fund history, ready to render as text."""

    model_config = ConfigDict(frozen=True)

    card: Union[DebitCard, CreditCard]
    generated: str = Field(..., description="Display date of generation")
    transactions: tuple[Transaction, ...]
    total_income: float
    total_expenses: float
    net_amount: float
    current_balance: float

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)
