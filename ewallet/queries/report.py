"""
Card History Report

Builds the per-card summary and renders it as the fixed plain-text
report handed to the share sink.
"""

from datetime import date
from typing import Optional, Sequence, Union

from ewallet.models.reports import CardReport
from ewallet.models.wallet import CreditCard, DebitCard, FundOperation, Transaction


REPORT_TITLE = "eWallet Card History Report"
NO_TRANSACTIONS = "No transactions found."


def format_currency(amount: float, symbol: str = "$") -> str:
    """`$` plus the amount fixed to two decimals, no separators."""
    return f"{symbol}{amount:.2f}"


def build_card_report(
    card: Union[DebitCard, CreditCard],
    transactions: Sequence[Transaction],
    generated_on: Optional[date] = None,
    date_format: str = "%m/%d/%Y",
) -> CardReport:
    """Summarize `transactions` (normally card_transactions() of `card`)."""
    total_income = sum(
        (t.amount for t in transactions if t.operation is FundOperation.ADD), 0.0
    )
    total_expenses = sum(
        (t.amount for t in transactions if t.operation is FundOperation.SUBTRACT), 0.0
    )

    return CardReport(
        card=card,
        generated=(generated_on or date.today()).strftime(date_format),
        transactions=tuple(transactions),
        total_income=total_income,
        total_expenses=total_expenses,
        net_amount=total_income - total_expenses,
        current_balance=card.current_amount,
    )


def _transaction_line(transaction: Transaction, symbol: str) -> str:
    sign = "+" if transaction.operation is FundOperation.ADD else "-"
    return " | ".join([
        transaction.date,
        transaction.description,
        transaction.category or "Uncategorized",
        f"{sign}{format_currency(transaction.amount, symbol)}",
    ])


def render_report_text(report: CardReport, currency_symbol: str = "$") -> str:
    """Render the share text. Transactions are listed in stored order."""
    card = report.card
    kind = "Debit" if isinstance(card, DebitCard) else "Credit"

    if report.transactions:
        history = [_transaction_line(t, currency_symbol) for t in report.transactions]
    else:
        history = [NO_TRANSACTIONS]

    lines = [
        REPORT_TITLE,
        "============================",
        "",
        f"Card: {card.name} ({kind})",
        f"Generated: {report.generated}",
        "",
        "SUMMARY:",
        "--------",
        f"Total Income: {format_currency(report.total_income, currency_symbol)}",
        f"Total Expenses: {format_currency(report.total_expenses, currency_symbol)}",
        f"Net Amount: {format_currency(report.net_amount, currency_symbol)}",
        f"Current Balance: {format_currency(report.current_balance, currency_symbol)}",
        f"Total Transactions: {report.transaction_count}",
        "",
        "TRANSACTION HISTORY:",
        "-------------------",
        *history,
    ]
    return "\n".join(lines)
