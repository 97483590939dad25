"""
Label Storage
=============

Saved label files of the virtual printer. All access goes through the
store so a filename can never escape the save directory.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from .config import OUTPUT_FORMATS, GENERIC_CONTENT_TYPE
from .exceptions import NotFoundError, PathTraversalError, StorageError
from .models import SavedLabel

logger = logging.getLogger(__name__)


def generate_filename(extension: str, now: datetime = None) -> str:
    """
    Build a timestamped label filename.

    Example: label_2026-10-17T08-15-30-123Z.png
    """
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec='milliseconds')
    stamp = stamp.replace('+00:00', 'Z').replace(':', '-').replace('.', '-')
    return f'label_{stamp}.{extension}'


def content_type_for(filename: str) -> str:
    """Content type used when serving a saved label."""
    extension = os.path.splitext(filename)[1].lower().lstrip('.')
    fmt = OUTPUT_FORMATS.get(extension)
    return fmt['accept'] if fmt else GENERIC_CONTENT_TYPE


class LabelStore:
    """Filesystem store for rendered labels."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self._root = Path(os.path.abspath(self.directory))
        self._ensure_directory()

    def _ensure_directory(self):
        if self.directory.is_dir():
            return
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f'Cannot create save directory {self.directory}: {e}', cause=e) from e
        logger.info(f"Created directory: {self.directory}")

    def resolve(self, filename: str) -> Path:
        """
        Map a filename to its path inside the save directory.

        Only path arithmetic happens here; nothing on disk is touched.

        Raises:
            PathTraversalError: filename points outside the save directory
        """
        candidate = Path(os.path.abspath(os.path.join(self._root, filename)))
        if not filename or candidate.parent != self._root:
            logger.warning(f"Rejected label path outside save directory: {filename!r}")
            raise PathTraversalError('Access denied: Invalid file path')
        return candidate

    def _contains(self, path: Path) -> bool:
        """True when the real path (symlinks followed) sits directly in the save directory."""
        real_root = os.path.realpath(self._root)
        return os.path.dirname(os.path.realpath(path)) == real_root

    def _resolve_real(self, filename: str) -> Path:
        path = self.resolve(filename)
        if not self._contains(path):
            logger.warning(f"Rejected label symlink outside save directory: {filename!r}")
            raise PathTraversalError('Access denied: Invalid file path')
        return path

    def path_for(self, filename: str) -> Path:
        """Resolve an existing label file or raise NotFoundError."""
        path = self._resolve_real(filename)
        if not path.is_file():
            raise NotFoundError(f'File not found: {filename}')
        return path

    def save(self, filename: str, data: Union[bytes, str]) -> Path:
        """Write a label. Text is stored as UTF-8, bytes as-is."""
        path = self._resolve_real(filename)
        try:
            if isinstance(data, str):
                path.write_text(data, encoding='utf-8')
            else:
                path.write_bytes(data)
        except OSError as e:
            raise StorageError(f'Failed to save file: {e}', cause=e) from e

        logger.info(f"Label saved to: {path}")
        return path

    def read(self, filename: str) -> bytes:
        return self.path_for(filename).read_bytes()

    def list(self) -> List[SavedLabel]:
        """Saved labels of a known output format, newest first."""
        if not self.directory.is_dir():
            return []

        try:
            labels = [
                SavedLabel.from_path(entry)
                for entry in self.directory.iterdir()
                if entry.is_file()
                and entry.suffix.lower().lstrip('.') in OUTPUT_FORMATS
                and self._contains(entry)
            ]
        except OSError as e:
            raise StorageError(f'Failed to list saved labels: {e}', cause=e) from e

        labels.sort(key=lambda label: (label.created, label.modified), reverse=True)
        return labels

    def delete(self, filename: str):
        """Remove a saved label."""
        path = self.path_for(filename)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f'File not found: {filename}', cause=e) from e
        except OSError as e:
            raise StorageError(f'Failed to delete file: {e}', cause=e) from e

        logger.info(f"Deleted label file: {path}")
