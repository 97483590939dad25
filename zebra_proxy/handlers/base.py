"""
Base Handler
============

Abstract base class for printer backends.
"""

from abc import ABC, abstractmethod
from typing import Union

from ..models import PrinterConfig, PrintOutcome


class BaseHandler(ABC):
    """Abstract base class for printer backends."""

    kind: str = ''

    def __init__(self, config: PrinterConfig):
        """Initialize handler with printer configuration."""
        self.config = config

    @abstractmethod
    def send(self, payload: bytes) -> PrintOutcome:
        """
        Deliver a raw print payload.

        Args:
            payload: Command stream (ZPL or similar), passed through untouched

        Returns:
            PrintOutcome describing what the printer reported

        Raises:
            PrintProxyError: the payload could not be delivered
        """

    def print(self, data: Union[bytes, str]) -> PrintOutcome:
        """Send text or bytes; text is encoded as UTF-8."""
        if isinstance(data, str):
            data = data.encode('utf-8')
        return self.send(data)

    def supports_labels(self) -> bool:
        """Check if handler keeps rendered label files."""
        return False
