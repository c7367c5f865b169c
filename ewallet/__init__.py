"""
eWallet - Source Package

The state and transaction engine of a personal-finance tracker:
payment cards, manual fund operations, category tagging, transaction
history and weekly reporting over one locally persisted document.

DESIGN PRINCIPLES:
1. Validate input before a command is issued
2. A command fully succeeds or leaves the document untouched
3. Applying a command is pure; persisting it is an injected port
4. Storage failures are logged, never shown
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "eWallet Team"
