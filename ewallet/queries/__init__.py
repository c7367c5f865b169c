"""Read-side queries: aggregation, fund rules and reports."""

from ewallet.queries.aggregations import (
    GENERAL_CARD_ID,
    GENERAL_CARD_LABELS,
    UNCATEGORIZED,
    card_rollup,
    card_transactions,
    category_rollup,
    entry_day,
    flow_overview,
    total_amount,
    transactions_for,
    weekly_series,
)
from ewallet.queries.funds import (
    apply_fund_operation,
    build_fund_transaction,
    default_description,
)
from ewallet.queries.report import (
    build_card_report,
    format_currency,
    render_report_text,
)

__all__ = [
    "GENERAL_CARD_ID",
    "GENERAL_CARD_LABELS",
    "UNCATEGORIZED",
    "apply_fund_operation",
    "build_card_report",
    "build_fund_transaction",
    "card_rollup",
    "card_transactions",
    "category_rollup",
    "default_description",
    "entry_day",
    "flow_overview",
    "format_currency",
    "render_report_text",
    "total_amount",
    "transactions_for",
    "weekly_series",
]
