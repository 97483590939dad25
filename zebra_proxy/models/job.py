"""
Print Outcome Model
===================

Result of sending one payload to the active printer.
"""

from datetime import datetime
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class PrintOutcome:
    """What a backend reports after a successful send."""

    backend: str  # tcp, usb, virtual
    message: str

    # Raw printers
    response: Optional[str] = None  # reply text, if the printer answered
    timed_out: bool = False
    bytes_sent: int = 0

    # Virtual printer
    label_count: Optional[int] = None
    output_format: Optional[str] = None
    data_size: Optional[int] = None
    filename: Optional[str] = None
    filepath: Optional[str] = None
    saved_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if self.saved_at:
            data['saved_at'] = self.saved_at.isoformat()
        return data
