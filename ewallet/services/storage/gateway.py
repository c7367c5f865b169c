"""
Document Gateway

Loads and saves the whole Document as one JSON string under a single
fixed key of a key-value backend.

Failures never escape: load() answers None and save() answers False,
and the cause is logged. The in-memory Document stays authoritative
for the running session.
"""

import json
from typing import Optional

import structlog
from pydantic import ValidationError

from ewallet.config import DEFAULT_DOCUMENT_KEY
from ewallet.models.wallet import Document
from ewallet.services.storage.interface import KeyValueStorageInterface, StorageError


class DocumentGateway:
    """Persistence port of the store."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_DOCUMENT_KEY,
    ):
        self._storage = storage
        self._key = key
        self._logger = structlog.get_logger("ewallet.storage")

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> Optional[Document]:
        """
        Read the stored Document.

        Returns None when nothing is stored or the stored value cannot
        be read, parsed or validated.
        """
        try:
            raw = await self._storage.get_item(self._key)
        except StorageError as e:
            self._logger.error("document_load_failed", key=self._key, error=str(e))
            return None

        if raw is None:
            self._logger.info("document_absent", key=self._key)
            return None

        try:
            return Document.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            self._logger.error("document_invalid", key=self._key, error=str(e))
            return None

    async def save(self, document: Document) -> bool:
        """Write the full Document. Returns False on failure; never retries."""
        try:
            payload = json.dumps(document.to_document_dict())
            await self._storage.set_item(self._key, payload)
        except StorageError as e:
            self._logger.error("document_save_failed", key=self._key, error=str(e))
            return False

        self._logger.debug("document_saved", key=self._key)
        return True
