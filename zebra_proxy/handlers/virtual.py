"""
Virtual Printer Handler
=======================

Renders payloads through the Labelary API instead of a physical printer and
keeps every rendered label in the save directory, so output can be
inspected without hardware.
"""

import logging
from datetime import datetime, timezone
from typing import List

import requests

from .base import BaseHandler
from ..config import TEST_LABEL_ZPL
from ..exceptions import RenderServiceError, RenderTimeoutError, TransportError
from ..models import PrinterConfig, PrintOutcome, SavedLabel
from ..storage import LabelStore, generate_filename

logger = logging.getLogger(__name__)


class VirtualHandler(BaseHandler):
    """Handler for the Labelary-backed virtual printer."""

    kind = 'virtual'

    def __init__(self, config: PrinterConfig):
        super().__init__(config)
        self.settings = config.virtual
        self.store = LabelStore(self.settings.save_directory)

    def _headers(self) -> dict:
        return {
            'Content-Type': 'application/x-www-form-urlencoded',
            'Accept': self.settings.format_info['accept'],
        }

    def send(self, payload: bytes) -> PrintOutcome:
        """
        Render the payload and save the result.

        Raises:
            RenderServiceError: Labelary answered with an error status
            RenderTimeoutError: no answer within the render timeout
            TransportError: network failure
            StorageError: the rendered label could not be written
        """
        settings = self.settings
        url = settings.endpoint

        logger.info(f"Sending ZPL to Labelary API: {url}")
        logger.debug(
            f"Label size: {settings.label_width}x{settings.label_height} mm at {settings.dpmm}, "
            f"output format: {settings.output_format}"
        )

        try:
            response = requests.post(
                url, data=payload, headers=self._headers(), timeout=settings.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Labelary request timed out after {settings.timeout}s")
            raise RenderTimeoutError('Request timeout', cause=e) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Labelary request error: {e}")
            raise TransportError(f'Network error: {e}', cause=e) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Labelary API error ({response.status_code}): {response.text}")
            raise RenderServiceError(response.status_code, response.text)

        try:
            label_count = int(response.headers.get('X-Total-Count', 1))
        except ValueError:
            label_count = 1
        logger.info(f"Labelary API success: Generated {label_count} label(s)")

        filename = generate_filename(settings.format_info['extension'])
        body = response.text if settings.output_format == 'json' else response.content
        path = self.store.save(filename, body)

        return PrintOutcome(
            backend=self.kind,
            message='Label processed and saved successfully',
            bytes_sent=len(payload),
            label_count=label_count,
            output_format=settings.output_format,
            data_size=len(response.content),
            filename=filename,
            filepath=str(path),
            saved_at=datetime.now(timezone.utc),
        )

    def test_connection(self) -> PrintOutcome:
        """Render the built-in sample label end to end."""
        outcome = self.print(TEST_LABEL_ZPL)
        logger.info(f"Virtual printer test successful: {outcome.filename}")
        return outcome

    def supports_labels(self) -> bool:
        return True

    def list_labels(self) -> List[SavedLabel]:
        """Saved labels, newest first."""
        return self.store.list()

    def delete_label(self, filename: str):
        """Delete a saved label."""
        self.store.delete(filename)
