"""
Zebra Proxy Handlers
====================

One handler per printer backend, and the factory that picks the configured one.
"""

from .base import BaseHandler
from .tcp import TCPHandler
from .usb_bulk import USBHandler
from .virtual import VirtualHandler
from ..exceptions import ConfigurationError, UnsupportedKindError, MissingFieldError
from ..models import PrinterConfig, PrinterKind

__all__ = ['BaseHandler', 'TCPHandler', 'USBHandler', 'VirtualHandler', 'HANDLERS', 'create_printer']

# Handler registry
HANDLERS = {
    PrinterKind.TCP: TCPHandler,
    PrinterKind.USB: USBHandler,
    PrinterKind.VIRTUAL: VirtualHandler,
}


def create_printer(config: PrinterConfig) -> BaseHandler:
    """
    Build the handler for the configured printer type.

    Raises:
        UnsupportedKindError: type is not tcp, usb or virtual
        MissingFieldError: a tcp printer without host or port
        ConfigurationError: a tcp printer with a non-positive timeout
    """
    try:
        kind = PrinterKind((config.kind or '').strip().lower())
    except ValueError:
        raise UnsupportedKindError(config.kind) from None

    if kind is PrinterKind.TCP:
        missing = [name for name in ('host', 'port') if not getattr(config, name)]
        if missing:
            raise MissingFieldError(kind.value, missing)
        if not config.timeout > 0:
            raise ConfigurationError(f'tcp timeout must be positive, got {config.timeout!r}')

    return HANDLERS[kind](config)
