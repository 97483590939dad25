"""
TCP Handler
===========

Handler for network printers that accept raw jobs on a TCP port (9100).
"""

import logging
import socket

from .base import BaseHandler
from ..config import TCP_CONNECT_TIMEOUT, TCP_RECV_SIZE
from ..exceptions import TransportError
from ..models import PrinterConfig, PrintOutcome

logger = logging.getLogger(__name__)


class TCPHandler(BaseHandler):
    """Handler for raw TCP printers (Zebra, CAB, and any port 9100 device)."""

    kind = 'tcp'

    def __init__(self, config: PrinterConfig):
        super().__init__(config)
        self.host = config.host
        self.port = config.port
        self.timeout = config.timeout

    def send(self, payload: bytes) -> PrintOutcome:
        """
        Write the payload and wait briefly for a reply.

        The first of these decides the outcome:
            - the printer answers: the reply text is returned
            - the printer closes the connection: plain success
            - the timeout elapses: success flagged as timed out, since the
              bytes are already on the wire
        """
        host, port = self.host, self.port

        try:
            sock = socket.create_connection((host, port), timeout=TCP_CONNECT_TIMEOUT)
        except OSError as e:
            logger.error(f"TCP connection error to {host}:{port}: {e}")
            raise TransportError(f'Connection to {host}:{port} failed: {e}', cause=e) from e

        try:
            logger.info(f"Connected to printer at {host}:{port}")
            sock.sendall(payload)

            sock.settimeout(self.timeout)
            try:
                response = sock.recv(TCP_RECV_SIZE)
            except socket.timeout:
                logger.info(f"No reply from {host}:{port} within {self.timeout}s")
                return PrintOutcome(
                    backend=self.kind,
                    message='Print job sent (timeout)',
                    timed_out=True,
                    bytes_sent=len(payload),
                )

            if not response:
                logger.info("Connection closed by printer")
                return PrintOutcome(
                    backend=self.kind,
                    message='Print job sent successfully',
                    bytes_sent=len(payload),
                )

            text = response.decode('ascii', errors='replace')
            logger.info(f"Printer response: {text}")
            return PrintOutcome(
                backend=self.kind,
                message='Printer responded',
                response=text,
                bytes_sent=len(payload),
            )

        except OSError as e:
            logger.error(f"TCP connection error to {host}:{port}: {e}")
            raise TransportError(f'Connection to {host}:{port} failed: {e}', cause=e) from e
        finally:
            sock.close()
