"""
Core Data Models for eWallet

These models define the shape of the single persisted Document and
every entity inside it: cards, fund transactions, category lists, the
legacy expense/income ledgers and the summary bag.

DESIGN DECISION: Every model is frozen. A new Document is produced for
every state change (copy-on-write) and the old one is never touched,
so any Document a caller holds stays valid forever.

Field names are snake_case in Python and camelCase on the wire; the
card/transaction kind is stored under the key "type".
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class FundOperation(str, Enum):
    """Direction of a fund operation against a card."""
    ADD = "add"
    SUBTRACT = "subtract"


class CategoryListType(str, Enum):
    """
    Selector for one of the two category lists.

    The values double as the Document keys of the lists.
    """
    ADD_FUND = "addFundCategories"
    SUBTRACT_FUND = "subtractFundCategories"

    @classmethod
    def for_operation(cls, operation: FundOperation) -> "CategoryListType":
        if FundOperation(operation) is FundOperation.ADD:
            return cls.ADD_FUND
        return cls.SUBTRACT_FUND


CARD_FUND = "card_fund"

CardKind = Literal["debit", "credit"]


class WalletModel(BaseModel):
    """Base for all persisted models: frozen, camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document_dict(self) -> dict[str, Any]:
        """Serialize exactly as the value is persisted."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# CARDS
# =============================================================================

class DebitCard(WalletModel):
    """
    A debit card carries a balance.

    Fund operations and validated input never push the balance below
    zero, but a stored value is accepted as it is.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    kind: Literal["debit"] = Field(default="debit", alias="type")
    expiry_date: str = Field(default="", description="Display text, e.g. 09/26")
    balance: float = 0.0

    @property
    def current_amount(self) -> float:
        """Amount shown as the card's current balance in reports."""
        return self.balance


class CreditCard(WalletModel):
    """A credit card tracks spending against a limit."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    kind: Literal["credit"] = Field(default="credit", alias="type")
    expiry_date: str = Field(default="", description="Display text, e.g. 12/28")
    credit_limit: float = 0.0
    current_spending: float = 0.0
    payment_date: str = Field(default="", description="Display text, e.g. 1st of each month")

    @property
    def current_amount(self) -> float:
        return self.current_spending


Card = Annotated[Union[DebitCard, CreditCard], Field(discriminator="kind")]

card_adapter: TypeAdapter[Union[DebitCard, CreditCard]] = TypeAdapter(Card)


# =============================================================================
# TRANSACTIONS AND LEDGER ENTRIES
# =============================================================================

class Transaction(WalletModel):
    """
    One entry of the transaction history.

    card_name is a snapshot of the card's name when the entry was
    created; it is not updated when the card is renamed.
    """

    id: int
    kind: str = Field(default=CARD_FUND, alias="type")
    operation: FundOperation
    amount: float = Field(..., gt=0)
    description: str = ""
    date: str = Field(..., description="Calendar-day display string")
    card_id: Optional[str] = None
    card_name: Optional[str] = None
    category: str = ""


class LedgerEntry(WalletModel):
    """Entry of the legacy expenses / income lists."""

    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    amount: float
    date: str
    description: str = ""
    category: str = ""


# =============================================================================
# CATEGORIES AND SUMMARY
# =============================================================================

DEFAULT_ADD_FUND_CATEGORIES = ("Salary", "Transfer", "Allowance")
DEFAULT_SUBTRACT_FUND_CATEGORIES = ("Dining", "Shopping", "Groceries")


class CategorySet(WalletModel):
    """
    The two independent category lists.

    Names are expected to be unique within a list, but that is a
    precondition enforced by callers, not by this model.
    """

    add_fund_categories: tuple[str, ...] = DEFAULT_ADD_FUND_CATEGORIES
    subtract_fund_categories: tuple[str, ...] = DEFAULT_SUBTRACT_FUND_CATEGORIES

    def names(self, list_type: CategoryListType) -> tuple[str, ...]:
        if CategoryListType(list_type) is CategoryListType.ADD_FUND:
            return self.add_fund_categories
        return self.subtract_fund_categories

    def with_names(
        self,
        list_type: CategoryListType,
        names: tuple[str, ...],
    ) -> "CategorySet":
        """Return a copy with one list replaced."""
        if CategoryListType(list_type) is CategoryListType.ADD_FUND:
            return self.model_copy(update={"add_fund_categories": tuple(names)})
        return self.model_copy(update={"subtract_fund_categories": tuple(names)})


class Summary(WalletModel):
    """Legacy aggregate fields, managed entirely by callers."""

    model_config = ConfigDict(extra="allow")

    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    monthly_budget: float = 5000.0


# =============================================================================
# DOCUMENT
# =============================================================================

class Document(WalletModel):
    """The root aggregate holding all persisted application state."""

    cards: tuple[Card, ...] = ()
    expenses: tuple[LedgerEntry, ...] = ()
    income: tuple[LedgerEntry, ...] = ()
    transaction_history: tuple[Transaction, ...] = ()
    categories: CategorySet = Field(default_factory=CategorySet)
    summary: Summary = Field(default_factory=Summary)

    def find_card(self, card_id: str) -> Optional[Union[DebitCard, CreditCard]]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None


def default_document() -> Document:
    """
    Seed state used on first run and whenever the stored value is
    missing or unreadable.
    """
    return Document(
        cards=(
            DebitCard(
                id="1",
                name="Main Debit Card",
                balance=2500.00,
                expiry_date="09/26",
            ),
        ),
    )
