"""
Fund Operation Rules

Adding or subtracting money on a card:
- debit cards move their balance
- credit cards move their current spending
- a subtraction never takes either value below zero
"""

from datetime import date
from typing import Any, Union

from ewallet.models.wallet import (
    CARD_FUND,
    CreditCard,
    DebitCard,
    FundOperation,
    Transaction,
)
from ewallet.queries.report import format_currency
from ewallet.validation import parse_amount


def _shift(current: float, operation: FundOperation, amount: float) -> float:
    if operation is FundOperation.ADD:
        return current + amount
    return max(0.0, current - amount)


def apply_fund_operation(
    card: Union[DebitCard, CreditCard],
    operation: Union[FundOperation, str],
    amount: Any,
) -> Union[DebitCard, CreditCard]:
    """
    Return a copy of `card` with the operation applied.

    Raises:
        InvalidAmountError: if amount is not a finite number > 0
        ValueError: if operation is not add/subtract
    """
    value = parse_amount(amount)
    op = FundOperation(operation)

    if isinstance(card, DebitCard):
        return card.model_copy(update={"balance": _shift(card.balance, op, value)})
    return card.model_copy(
        update={"current_spending": _shift(card.current_spending, op, value)}
    )


def default_description(
    operation: Union[FundOperation, str],
    amount: float,
    card_name: str,
    currency_symbol: str = "$",
) -> str:
    """Description used when the caller leaves it blank."""
    verb = "Added" if FundOperation(operation) is FundOperation.ADD else "Subtracted"
    return f"{verb} {format_currency(amount, currency_symbol)} to {card_name}"


def build_fund_transaction(
    card: Union[DebitCard, CreditCard],
    operation: Union[FundOperation, str],
    amount: Any,
    transaction_id: int,
    on: date,
    description: str = "",
    category: str = "",
    date_format: str = "%m/%d/%Y",
    currency_symbol: str = "$",
) -> Transaction:
    """Build the history entry for a fund operation on `card`."""
    value = parse_amount(amount)
    op = FundOperation(operation)
    text = (description or "").strip() or default_description(
        op, value, card.name, currency_symbol
    )

    return Transaction(
        id=transaction_id,
        kind=CARD_FUND,
        operation=op,
        amount=value,
        description=text,
        date=on.strftime(date_format),
        card_id=card.id,
        card_name=card.name,
        category=(category or "").strip(),
    )
