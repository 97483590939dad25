"""
USB Handler
===========

Handler for locally attached printers, driven through pyusb bulk transfers.
"""

import logging
from contextlib import contextmanager

import usb.core
import usb.util

from .base import BaseHandler
from ..config import USB_WRITE_TIMEOUT_MS
from ..exceptions import (
    DeviceNotFoundError, NoOutputEndpointError, TransferError, TransportError,
)
from ..models import PrinterConfig, PrintOutcome

logger = logging.getLogger(__name__)

INTERFACE_NUMBER = 0


def _is_out_endpoint(endpoint) -> bool:
    return usb.util.endpoint_direction(endpoint.bEndpointAddress) == usb.util.ENDPOINT_OUT


class USBHandler(BaseHandler):
    """Handler for USB printers identified by vendor/product id."""

    kind = 'usb'

    def __init__(self, config: PrinterConfig):
        super().__init__(config)
        self.vendor_id = config.vendor_id
        self.product_id = config.product_id

    def _ids(self) -> str:
        if self.product_id is None:
            return f'0x{self.vendor_id:04x}:*'
        return f'0x{self.vendor_id:04x}:0x{self.product_id:04x}'

    def find_device(self):
        """
        Locate the printer.

        With a product id only an exact vendor+product match is accepted,
        otherwise the first device of the vendor is used.

        Raises:
            DeviceNotFoundError: nothing attached matches
        """
        try:
            if self.product_id is not None:
                device = usb.core.find(idVendor=self.vendor_id, idProduct=self.product_id)
            else:
                device = usb.core.find(idVendor=self.vendor_id)
        except usb.core.NoBackendError as e:
            raise TransportError(f'No USB backend available: {e}', cause=e) from e

        if device is None:
            raise DeviceNotFoundError(f'USB printer {self._ids()} not found')

        logger.info(f"Found USB printer: 0x{device.idVendor:04x}:0x{device.idProduct:04x}")
        return device

    @staticmethod
    def _detach_kernel_driver(device):
        try:
            if device.is_kernel_driver_active(INTERFACE_NUMBER):
                logger.debug("Detaching kernel driver from interface 0")
                device.detach_kernel_driver(INTERFACE_NUMBER)
        except NotImplementedError:
            # Not supported by the libusb backend on this platform
            pass

    @contextmanager
    def claimed_interface(self, device):
        """
        Claim the first interface for the duration of the block.

        Device resources are released on every exit path, including a
        failed claim or a failed transfer.
        """
        try:
            try:
                self._detach_kernel_driver(device)

                try:
                    configuration = device.get_active_configuration()
                except usb.core.USBError:
                    device.set_configuration()
                    configuration = device.get_active_configuration()

                interface = configuration[(INTERFACE_NUMBER, 0)]
                usb.util.claim_interface(device, interface)
            except usb.core.USBError as e:
                raise TransportError(f'Could not claim USB interface: {e}', cause=e) from e

            yield interface
        finally:
            usb.util.dispose_resources(device)
            logger.debug("USB device released")

    def send(self, payload: bytes) -> PrintOutcome:
        """Write the payload to the first OUT endpoint in one bulk transfer."""
        device = self.find_device()

        with self.claimed_interface(device) as interface:
            endpoint = usb.util.find_descriptor(interface, custom_match=_is_out_endpoint)
            if endpoint is None:
                raise NoOutputEndpointError('No OUT endpoint found on USB device')

            try:
                written = endpoint.write(payload, USB_WRITE_TIMEOUT_MS)
            except usb.core.USBError as e:
                logger.error(f"USB transfer error: {e}")
                raise TransferError(f'USB transfer failed: {e}', cause=e) from e

            if written != len(payload):
                raise TransferError(f'USB transfer incomplete: {written} of {len(payload)} bytes')

        logger.info("USB print job sent successfully")
        return PrintOutcome(
            backend=self.kind,
            message='Print job sent successfully via USB',
            bytes_sent=written,
        )
