"""Share sink package."""

from ewallet.services.share.file_sink import FileShareSink
from ewallet.services.share.interface import ShareError, ShareSinkInterface

__all__ = [
    "FileShareSink",
    "ShareError",
    "ShareSinkInterface",
]
