"""
JSON File Storage Implementation

All keys live in one JSON object on disk: {"<key>": "<string value>"}.

TRADEOFFS:
- Every write rewrites the whole file (fine for one small document)
- Writes go to a temp file first and are moved into place, so a crash
  mid-write leaves the previous file intact
"""

import asyncio
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from ewallet.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by a single JSON file.

    File I/O runs in a worker thread; a lock serializes access so that
    concurrent writes from overlapping tasks never interleave.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Corrupt storage file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageReadError(f"Storage file {self._path} is not a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e

    def _get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if value is None or isinstance(value, str) else json.dumps(value)

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageReadError:
                # corrupt contents are overwritten
                data = {}
            data[key] = value
            self._write_all(data)

    def _remove(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)
