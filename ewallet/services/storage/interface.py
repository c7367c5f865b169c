"""
Abstract Storage Interface

DESIGN DECISION: The core only ever needs a key-value store of string
values (the same contract as a device's async key-value storage).
This allows us to:
1. Keep the document on a local JSON file
2. Use in-memory storage for testing
3. Swap in any other backend without touching the store

The interface is intentionally tiny. Document (de)serialization lives
in DocumentGateway, not in the backends.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value storage.

    Any backend must implement these methods.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read or held unparseable data."""
    pass


class StorageWriteError(StorageError):
    """The backend rejected a write."""
    pass
