"""State store package."""

from ewallet.store.reducer import CommandError, apply_command
from ewallet.store.store import WalletStore

__all__ = ["CommandError", "WalletStore", "apply_command"]
