"""
Storage Services Package

Provides the key-value storage interface, its backends and the
gateway that persists the Document through them.
"""

from ewallet.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from ewallet.services.storage.gateway import DocumentGateway
from ewallet.services.storage.json_file import JsonFileStorage
from ewallet.services.storage.memory import InMemoryStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "DocumentGateway",
    "InMemoryStorage",
    "JsonFileStorage",
]
