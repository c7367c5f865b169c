"""Share sink that writes each report to a text file in a directory."""

import asyncio
import re
from pathlib import Path
from typing import Optional

from ewallet.services.share.interface import ShareError, ShareSinkInterface


def _slug(title: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", title).strip("-").lower()
    return slug or "report"


class FileShareSink(ShareSinkInterface):
    """
    Writes each shared report to `<directory>/<slugged title>.txt`.

    A report with the same title replaces the previous file.
    """

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        self.last_path: Optional[Path] = None

    def _write(self, title: str, message: str) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / f"{_slug(title)}.txt"
        path.write_text(message + "\n", encoding="utf-8")
        return path

    async def share(self, title: str, message: str) -> bool:
        try:
            self.last_path = await asyncio.to_thread(self._write, title, message)
        except OSError as e:
            raise ShareError(f"Cannot write report: {e}") from e
        return True
