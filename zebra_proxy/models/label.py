"""
Saved Label Model
=================

A rendered label file in the virtual printer's save directory.
"""

from datetime import datetime
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any

from ..config import OUTPUT_FORMATS


@dataclass(frozen=True)
class SavedLabel:
    """Metadata of one saved label file."""

    filename: str
    filepath: str
    size: int
    created: datetime
    modified: datetime
    extension: str  # png, pdf, json

    @property
    def kind(self) -> str:
        """Artifact kind: image, document or structured-data."""
        return OUTPUT_FORMATS[self.extension]['kind']

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data['created'] = self.created.isoformat()
        data['modified'] = self.modified.isoformat()
        data['kind'] = self.kind
        return data

    @classmethod
    def from_path(cls, path: Path) -> 'SavedLabel':
        """Read label metadata from the filesystem."""
        stats = path.stat()
        # Birth time is not exposed on every platform
        created = getattr(stats, 'st_birthtime', None) or stats.st_ctime
        return cls(
            filename=path.name,
            filepath=str(path),
            size=stats.st_size,
            created=datetime.fromtimestamp(created),
            modified=datetime.fromtimestamp(stats.st_mtime),
            extension=path.suffix.lower().lstrip('.'),
        )
