"""
Aggregation Engine

Pure read-side queries over a Document. Nothing is cached: every call
is a linear scan of the current lists.

Missing joins are tolerated. A transaction without a category is
grouped under "Uncategorized", one without a card under "General".
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from ewallet.models.reports import DaySummary, FlowOverview, RollupGroup, WeeklySeries
from ewallet.models.wallet import (
    CARD_FUND,
    Document,
    FundOperation,
    LedgerEntry,
    Transaction,
)


UNCATEGORIZED = "Uncategorized"
GENERAL_CARD_ID = "General"
GENERAL_CARD_LABELS = {
    FundOperation.ADD: "General Income",
    FundOperation.SUBTRACT: "General Expenses",
}

WEEK_DAYS = 7


def card_transactions(document: Document, card_id: str) -> list[Transaction]:
    """
    Fund transactions of one existing card, in stored order (newest first).

    Rows of a deleted card are not returned.
    """
    if document.find_card(card_id) is None:
        return []
    return [
        t for t in document.transaction_history
        if t.kind == CARD_FUND and t.card_id == card_id
    ]


def transactions_for(
    document: Document,
    operation: Union[FundOperation, str],
) -> list[Transaction]:
    """All history rows of one operation: subtract = expenses, add = income."""
    op = FundOperation(operation)
    return [t for t in document.transaction_history if t.operation is op]


def total_amount(items: Iterable[Union[Transaction, LedgerEntry]]) -> float:
    return sum((item.amount for item in items), 0.0)


def _rollup(groups: dict[str, dict]) -> list[RollupGroup]:
    result = [
        RollupGroup(
            key=key,
            label=group["label"],
            total=total_amount(group["transactions"]),
            count=len(group["transactions"]),
            transactions=tuple(group["transactions"]),
        )
        for key, group in groups.items()
    ]
    # sorted() is stable, so ties keep first-seen order
    return sorted(result, key=lambda g: g.total, reverse=True)


def category_rollup(
    document: Document,
    operation: Union[FundOperation, str],
) -> list[RollupGroup]:
    """Group one operation's transactions by category, largest total first."""
    groups: dict[str, dict] = {}
    for transaction in transactions_for(document, operation):
        category = transaction.category or UNCATEGORIZED
        group = groups.setdefault(category, {"label": category, "transactions": []})
        group["transactions"].append(transaction)
    return _rollup(groups)


def card_rollup(
    document: Document,
    operation: Union[FundOperation, str],
) -> list[RollupGroup]:
    """
    Group one operation's transactions by card, largest total first.

    Labels come from the name snapshot on the first transaction of each
    group, so renamed or deleted cards keep their historical label.
    """
    op = FundOperation(operation)
    groups: dict[str, dict] = {}
    for transaction in transactions_for(document, op):
        card_id = transaction.card_id or GENERAL_CARD_ID
        label = transaction.card_name or GENERAL_CARD_LABELS[op]
        group = groups.setdefault(card_id, {"label": label, "transactions": []})
        group["transactions"].append(transaction)
    return _rollup(groups)


def flow_overview(
    document: Document,
    operation: Union[FundOperation, str],
) -> FlowOverview:
    """Totals and both rollups for the expenses (subtract) or income (add) view."""
    transactions = transactions_for(document, operation)
    return FlowOverview(
        total=total_amount(transactions),
        transactions=tuple(transactions),
        by_category=tuple(category_rollup(document, operation)),
        by_card=tuple(card_rollup(document, operation)),
    )


def entry_day(value: str, date_format: str = "%m/%d/%Y") -> Optional[date]:
    """
    Calendar day of a stored date string, or None if it does not parse.

    strptime accepts unpadded fields, so "1/5/2025" and "01/05/2025"
    are the same day under the default format.
    """
    try:
        return datetime.strptime(value.strip(), date_format).date()
    except ValueError:
        return None


def weekly_series(
    document: Document,
    today: Optional[date] = None,
    date_format: str = "%m/%d/%Y",
    weekday_format: str = "%a",
) -> WeeklySeries:
    """
    Per-day income and expenses for the seven days ending `today`.

    Entry dates are parsed with `date_format` and matched by calendar
    day. A date that does not parse only matches its exact display
    string. Legacy income/expense entries are counted alongside
    add/subtract transactions.
    """
    today = today or date.today()
    window = [today - timedelta(days=offset) for offset in range(WEEK_DAYS - 1, -1, -1)]
    by_string = {day.strftime(date_format): day for day in window}
    income_by_day = {day: 0.0 for day in window}
    expenses_by_day = {day: 0.0 for day in window}

    def bucket(value: str) -> Optional[date]:
        day = entry_day(value, date_format)
        if day is None:
            return by_string.get(value)
        return day if day in income_by_day else None

    flows = [(e, income_by_day) for e in document.income]
    flows += [(e, expenses_by_day) for e in document.expenses]
    for transaction in document.transaction_history:
        totals = (
            income_by_day if transaction.operation is FundOperation.ADD
            else expenses_by_day
        )
        flows.append((transaction, totals))

    for item, totals in flows:
        day = bucket(item.date)
        if day is not None:
            totals[day] += item.amount

    days = [
        DaySummary(
            day=day,
            label=day.strftime(weekday_format),
            date_string=day.strftime(date_format),
            income=income_by_day[day],
            expenses=expenses_by_day[day],
        )
        for day in window
    ]

    total_income = sum((d.income for d in days), 0.0)
    total_expenses = sum((d.expenses for d in days), 0.0)

    return WeeklySeries(
        days=tuple(days),
        total_income=total_income,
        total_expenses=total_expenses,
        net_amount=total_income - total_expenses,
    )
