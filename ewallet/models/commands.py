"""
Command Models

A Command is a named request to move the Document to a new value.
The set is closed: the reducer knows how to apply each of these and
nothing else.

Commands carry already-built domain values. Pre-flight validation
(non-empty names, parseable amounts, unique categories) is the job of
the caller, see ewallet.validation.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ewallet.models.wallet import (
    Card,
    CategoryListType,
    Document,
    LedgerEntry,
    Transaction,
)


class Command(BaseModel):
    """Base class of all commands."""

    model_config = ConfigDict(frozen=True)

    @property
    def command_name(self) -> str:
        return type(self).__name__

    def entity_id(self) -> Optional[str]:
        """Id of the entity this command is about, for the audit trail."""
        return None


# -----------------------------------------------------------------------------
# Cards
# -----------------------------------------------------------------------------

class AddCard(Command):
    card: Card

    def entity_id(self) -> Optional[str]:
        return self.card.id


class UpdateCard(Command):
    """Shallow-merge `changes` (snake_case or camelCase keys) into a card."""

    card_id: str
    changes: dict[str, Any] = Field(default_factory=dict)

    def entity_id(self) -> Optional[str]:
        return self.card_id


class DeleteCard(Command):
    card_id: str

    def entity_id(self) -> Optional[str]:
        return self.card_id


class UpdateCardBalance(Command):
    card_id: str
    new_balance: float

    def entity_id(self) -> Optional[str]:
        return self.card_id


# -----------------------------------------------------------------------------
# Legacy ledgers
# -----------------------------------------------------------------------------

class AddExpense(Command):
    entry: LedgerEntry

    def entity_id(self) -> Optional[str]:
        return str(self.entry.id)


class DeleteExpense(Command):
    entry_id: Union[int, str]

    def entity_id(self) -> Optional[str]:
        return str(self.entry_id)


class AddIncome(Command):
    entry: LedgerEntry

    def entity_id(self) -> Optional[str]:
        return str(self.entry.id)


class DeleteIncome(Command):
    entry_id: Union[int, str]

    def entity_id(self) -> Optional[str]:
        return str(self.entry_id)


# -----------------------------------------------------------------------------
# Transaction history
# -----------------------------------------------------------------------------

class AddTransactionHistory(Command):
    transaction: Transaction

    def entity_id(self) -> Optional[str]:
        return str(self.transaction.id)


class DeleteTransactionHistory(Command):
    """Replace the whole history, e.g. after purging one card's rows."""

    transactions: tuple[Transaction, ...]


class DeleteTransaction(Command):
    transaction_id: int

    def entity_id(self) -> Optional[str]:
        return str(self.transaction_id)


class ApplyFundOperation(Command):
    """
    Update the card named by `transaction.card_id` and prepend the
    transaction to the history in one transition.
    """

    transaction: Transaction

    def entity_id(self) -> Optional[str]:
        return self.transaction.card_id


# -----------------------------------------------------------------------------
# Summary and categories
# -----------------------------------------------------------------------------

class UpdateSummary(Command):
    changes: dict[str, Any] = Field(default_factory=dict)


class AddCategory(Command):
    list_type: CategoryListType
    name: str

    def entity_id(self) -> Optional[str]:
        return self.name


class UpdateCategory(Command):
    list_type: CategoryListType
    old_name: str
    new_name: str

    def entity_id(self) -> Optional[str]:
        return self.old_name


class DeleteCategory(Command):
    list_type: CategoryListType
    name: str

    def entity_id(self) -> Optional[str]:
        return self.name


# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------

class LoadData(Command):
    """Replace the whole Document. Trusted input, no checks applied."""

    document: Document
