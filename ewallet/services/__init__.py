"""Services package."""

from ewallet.services.share import (
    FileShareSink,
    ShareError,
    ShareSinkInterface,
)
from ewallet.services.storage import (
    DocumentGateway,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Share sinks
    "FileShareSink",
    "ShareError",
    "ShareSinkInterface",
    # Storage services
    "DocumentGateway",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
