"""
Data Models Package

This package contains all Pydantic models used by eWallet.
All persisted state and every command conforms to these schemas.
"""

from ewallet.models.wallet import (
    CARD_FUND,
    Card,
    CardKind,
    CategoryListType,
    CategorySet,
    CreditCard,
    DebitCard,
    Document,
    FundOperation,
    LedgerEntry,
    Summary,
    Transaction,
    card_adapter,
    default_document,
)
from ewallet.models.commands import (
    AddCard,
    AddCategory,
    AddExpense,
    AddIncome,
    AddTransactionHistory,
    ApplyFundOperation,
    Command,
    DeleteCard,
    DeleteCategory,
    DeleteExpense,
    DeleteIncome,
    DeleteTransaction,
    DeleteTransactionHistory,
    LoadData,
    UpdateCard,
    UpdateCardBalance,
    UpdateCategory,
    UpdateSummary,
)
from ewallet.models.reports import (
    CardReport,
    DaySummary,
    FlowOverview,
    RollupGroup,
    WeeklySeries,
)
from ewallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Domain models
    "CARD_FUND",
    "Card",
    "CardKind",
    "CategoryListType",
    "CategorySet",
    "CreditCard",
    "DebitCard",
    "Document",
    "FundOperation",
    "LedgerEntry",
    "Summary",
    "Transaction",
    "card_adapter",
    "default_document",
    # Commands
    "AddCard",
    "AddCategory",
    "AddExpense",
    "AddIncome",
    "AddTransactionHistory",
    "ApplyFundOperation",
    "Command",
    "DeleteCard",
    "DeleteCategory",
    "DeleteExpense",
    "DeleteIncome",
    "DeleteTransaction",
    "DeleteTransactionHistory",
    "LoadData",
    "UpdateCard",
    "UpdateCardBalance",
    "UpdateCategory",
    "UpdateSummary",
    # Report models
    "CardReport",
    "DaySummary",
    "FlowOverview",
    "RollupGroup",
    "WeeklySeries",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
