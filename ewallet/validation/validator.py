"""
Pre-flight Validation

DESIGN DECISION: The store trusts its input. Everything a user can get
wrong (blank names, non-numeric or non-positive amounts, duplicate
category names, unknown cards) is checked here, before a Command is
built. A failed check raises a WalletValidationError and nothing is
dispatched, so the Document is never touched.

Validation NEVER silently fixes values beyond trimming whitespace.
"""

import math
from typing import Any, Iterable, Optional, Union

from ewallet.models.wallet import CreditCard, DebitCard, Document


class WalletValidationError(ValueError):
    """Base exception for user input that is rejected before dispatch."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidNameError(WalletValidationError):
    """A card or category name is empty."""
    pass


class InvalidAmountError(WalletValidationError):
    """An amount is not a finite number in the accepted range."""
    pass


class DuplicateCategoryError(WalletValidationError):
    """The category name already exists in the selected list."""
    pass


class CardNotFoundError(WalletValidationError):
    """No card with the requested id exists."""
    pass


def _to_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError("booleans are not amounts")
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        return float(raw.strip())
    raise ValueError(f"unsupported amount type: {type(raw).__name__}")


def parse_amount(raw: Any) -> float:
    """
    Parse a fund-operation amount.

    Accepts numbers or numeric strings. The result must be finite and
    strictly positive.

    Raises:
        InvalidAmountError: for anything else
    """
    try:
        amount = _to_float(raw)
    except ValueError:
        raise InvalidAmountError("Please enter a valid amount", field="amount")

    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmountError("Please enter a valid amount", field="amount")
    return amount


class WalletValidator:
    """Checks caller input against the current Document."""

    def card_name(self, name: Optional[str]) -> str:
        """Return the trimmed card name or raise InvalidNameError."""
        trimmed = (name or "").strip()
        if not trimmed:
            raise InvalidNameError("Please enter a card name", field="name")
        return trimmed

    def category_name(self, name: Optional[str]) -> str:
        trimmed = (name or "").strip()
        if not trimmed:
            raise InvalidNameError("Please enter a category name", field="name")
        return trimmed

    def opening_amount(self, raw: Any, field: str) -> float:
        """
        Parse a card's opening balance or credit limit.

        Blank input means zero; negative or non-finite values are rejected.
        """
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return 0.0
        try:
            amount = _to_float(raw)
        except ValueError:
            raise InvalidAmountError(f"Please enter a valid {field}", field=field)
        if not math.isfinite(amount) or amount < 0:
            raise InvalidAmountError(f"Please enter a valid {field}", field=field)
        return amount

    def new_category(self, name: Optional[str], existing: Iterable[str]) -> str:
        """Trimmed name that is not yet in `existing` (exact, case-sensitive)."""
        trimmed = self.category_name(name)
        if trimmed in tuple(existing):
            raise DuplicateCategoryError("This category already exists", field="name")
        return trimmed

    def renamed_category(
        self,
        old_name: str,
        new_name: Optional[str],
        existing: Iterable[str],
    ) -> str:
        """Trimmed new name; renaming onto another existing entry is rejected."""
        trimmed = self.category_name(new_name)
        if trimmed != old_name and trimmed in tuple(existing):
            raise DuplicateCategoryError("This category already exists", field="name")
        return trimmed

    def existing_card(
        self,
        document: Document,
        card_id: str,
    ) -> Union[DebitCard, CreditCard]:
        card = document.find_card(card_id)
        if card is None:
            raise CardNotFoundError(f"Card not found: {card_id}", field="card_id")
        return card
