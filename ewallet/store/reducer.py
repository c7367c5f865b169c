"""
Document Reducer

apply_command(document, command) -> new Document.

Every handler here is a pure function: it builds a new Document from
the old one and never mutates its input. A handler either returns the
complete new value or raises CommandError, in which case the caller
keeps the old Document.
"""

from typing import Any, Callable, Union

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

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
from ewallet.models.wallet import (
    CreditCard,
    DebitCard,
    Document,
    Summary,
    card_adapter,
)
from ewallet.queries.funds import apply_fund_operation
from ewallet.validation import WalletValidationError


class CommandError(Exception):
    """A command could not be applied; the Document is unchanged."""

    def __init__(self, command: Command, message: str):
        super().__init__(f"{command.command_name}: {message}")
        self.command = command


AnyCard = Union[DebitCard, CreditCard]

# Maps both field names and wire keys of either card kind to the wire key.
_CARD_KEYS: dict[str, str] = {}
for _model in (DebitCard, CreditCard):
    for _field_name, _info in _model.model_fields.items():
        _alias = _info.alias or to_camel(_field_name)
        _CARD_KEYS[_field_name] = _alias
        _CARD_KEYS[_alias] = _alias


def _merge_card(card: AnyCard, changes: dict[str, Any]) -> AnyCard:
    data = card.to_document_dict()
    for key, value in changes.items():
        data[_CARD_KEYS.get(key, key)] = value
    data["id"] = card.id
    return card_adapter.validate_python(data)


def _replace_card(document: Document, updated: AnyCard) -> Document:
    cards = tuple(updated if card.id == updated.id else card for card in document.cards)
    return document.model_copy(update={"cards": cards})


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------

def _add_card(document: Document, command: AddCard) -> Document:
    return document.model_copy(update={"cards": document.cards + (command.card,)})


def _update_card(document: Document, command: UpdateCard) -> Document:
    card = document.find_card(command.card_id)
    if card is None:
        return document
    return _replace_card(document, _merge_card(card, command.changes))


def _delete_card(document: Document, command: DeleteCard) -> Document:
    cards = tuple(card for card in document.cards if card.id != command.card_id)
    return document.model_copy(update={"cards": cards})


def _update_card_balance(document: Document, command: UpdateCardBalance) -> Document:
    card = document.find_card(command.card_id)
    if card is None:
        return document
    if not isinstance(card, DebitCard):
        raise CommandError(command, f"card {card.id} is not a debit card")
    if command.new_balance < 0:
        raise CommandError(command, "balance cannot be negative")
    updated = DebitCard.model_validate(
        {**card.to_document_dict(), "balance": command.new_balance}
    )
    return _replace_card(document, updated)


def _add_expense(document: Document, command: AddExpense) -> Document:
    return document.model_copy(update={"expenses": (command.entry,) + document.expenses})


def _delete_expense(document: Document, command: DeleteExpense) -> Document:
    expenses = tuple(e for e in document.expenses if e.id != command.entry_id)
    return document.model_copy(update={"expenses": expenses})


def _add_income(document: Document, command: AddIncome) -> Document:
    return document.model_copy(update={"income": (command.entry,) + document.income})


def _delete_income(document: Document, command: DeleteIncome) -> Document:
    income = tuple(e for e in document.income if e.id != command.entry_id)
    return document.model_copy(update={"income": income})


def _add_transaction_history(
    document: Document,
    command: AddTransactionHistory,
) -> Document:
    history = (command.transaction,) + document.transaction_history
    return document.model_copy(update={"transaction_history": history})


def _delete_transaction_history(
    document: Document,
    command: DeleteTransactionHistory,
) -> Document:
    return document.model_copy(
        update={"transaction_history": tuple(command.transactions)}
    )


def _delete_transaction(document: Document, command: DeleteTransaction) -> Document:
    history = tuple(
        t for t in document.transaction_history if t.id != command.transaction_id
    )
    return document.model_copy(update={"transaction_history": history})


def _apply_fund_operation(document: Document, command: ApplyFundOperation) -> Document:
    transaction = command.transaction
    card = document.find_card(transaction.card_id) if transaction.card_id else None
    if card is None:
        raise CommandError(command, f"card not found: {transaction.card_id}")

    try:
        updated = apply_fund_operation(card, transaction.operation, transaction.amount)
    except WalletValidationError as e:
        raise CommandError(command, str(e)) from e

    document = _replace_card(document, updated)
    history = (transaction,) + document.transaction_history
    return document.model_copy(update={"transaction_history": history})


def _update_summary(document: Document, command: UpdateSummary) -> Document:
    data = document.summary.to_document_dict()
    for key, value in command.changes.items():
        field = Summary.model_fields.get(key)
        data[(field.alias or to_camel(key)) if field is not None else key] = value
    return document.model_copy(update={"summary": Summary.model_validate(data)})


def _add_category(document: Document, command: AddCategory) -> Document:
    names = document.categories.names(command.list_type) + (command.name,)
    categories = document.categories.with_names(command.list_type, names)
    return document.model_copy(update={"categories": categories})


def _update_category(document: Document, command: UpdateCategory) -> Document:
    names = list(document.categories.names(command.list_type))
    if command.old_name not in names:
        return document
    names[names.index(command.old_name)] = command.new_name
    categories = document.categories.with_names(command.list_type, tuple(names))
    return document.model_copy(update={"categories": categories})


def _delete_category(document: Document, command: DeleteCategory) -> Document:
    names = tuple(
        name for name in document.categories.names(command.list_type)
        if name != command.name
    )
    categories = document.categories.with_names(command.list_type, names)
    return document.model_copy(update={"categories": categories})


def _load_data(document: Document, command: LoadData) -> Document:
    return command.document


_HANDLERS: dict[type, Callable[[Document, Any], Document]] = {
    AddCard: _add_card,
    UpdateCard: _update_card,
    DeleteCard: _delete_card,
    UpdateCardBalance: _update_card_balance,
    AddExpense: _add_expense,
    DeleteExpense: _delete_expense,
    AddIncome: _add_income,
    DeleteIncome: _delete_income,
    AddTransactionHistory: _add_transaction_history,
    DeleteTransactionHistory: _delete_transaction_history,
    DeleteTransaction: _delete_transaction,
    ApplyFundOperation: _apply_fund_operation,
    UpdateSummary: _update_summary,
    AddCategory: _add_category,
    UpdateCategory: _update_category,
    DeleteCategory: _delete_category,
    LoadData: _load_data,
}


def apply_command(document: Document, command: Command) -> Document:
    """
    Apply one command and return the resulting Document.

    Raises:
        CommandError: if the command is unknown or produces an invalid value
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise CommandError(command, "unknown command")

    try:
        return handler(document, command)
    except ValidationError as e:
        raise CommandError(command, f"invalid result: {e.error_count()} errors") from e
