"""
Share Sink Interface

The platform share/export integration is an external collaborator.
The core hands it a title and the plain-text report, nothing more.
"""

from abc import ABC, abstractmethod


class ShareSinkInterface(ABC):
    """Anything that can receive a text report for sharing."""

    @abstractmethod
    async def share(self, title: str, message: str) -> bool:
        """
        Hand the text over.

        Returns:
            True if the text was accepted

        Raises:
            ShareError: If the sink failed
        """
        pass


class ShareError(Exception):
    """The share sink could not accept the report."""
    pass
