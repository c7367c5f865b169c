"""Pre-flight validation package."""

from ewallet.validation.validator import (
    CardNotFoundError,
    DuplicateCategoryError,
    InvalidAmountError,
    InvalidNameError,
    WalletValidationError,
    WalletValidator,
    parse_amount,
)

__all__ = [
    "CardNotFoundError",
    "DuplicateCategoryError",
    "InvalidAmountError",
    "InvalidNameError",
    "WalletValidationError",
    "WalletValidator",
    "parse_amount",
]
