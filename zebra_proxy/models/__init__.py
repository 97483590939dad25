"""
Zebra Proxy Models
"""

from .printer import PrinterKind, PrinterConfig, VirtualSettings
from .job import PrintOutcome
from .label import SavedLabel

__all__ = ['PrinterKind', 'PrinterConfig', 'VirtualSettings', 'PrintOutcome', 'SavedLabel']
