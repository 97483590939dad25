"""
Printer Configuration Model
===========================

Immutable description of the single printer this process talks to.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Mapping

from ..config import (
    DEFAULT_PRINTER_TYPE, DEFAULT_TCP_PORT, DEFAULT_TCP_TIMEOUT,
    DEFAULT_USB_VENDOR_ID, LABELARY_URL, DEFAULT_DPMM,
    DEFAULT_LABEL_WIDTH_MM, DEFAULT_LABEL_HEIGHT_MM, DEFAULT_LABEL_INDEX,
    DEFAULT_OUTPUT_FORMAT, DEFAULT_SAVE_DIRECTORY, RENDER_TIMEOUT,
    MM_PER_INCH, OUTPUT_FORMATS,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PrinterKind(str, Enum):
    """Supported printer backends."""

    TCP = 'tcp'
    USB = 'usb'
    VIRTUAL = 'virtual'


def _inches(millimeters: float) -> str:
    """Format a millimeter length as inches for the Labelary URL."""
    return f'{round(millimeters / MM_PER_INCH, 4):g}'


@dataclass(frozen=True)
class VirtualSettings:
    """Render settings for the virtual (Labelary) printer."""

    dpmm: str = DEFAULT_DPMM
    label_width: float = DEFAULT_LABEL_WIDTH_MM  # mm
    label_height: float = DEFAULT_LABEL_HEIGHT_MM  # mm
    label_index: int = DEFAULT_LABEL_INDEX
    output_format: str = DEFAULT_OUTPUT_FORMAT  # png, pdf, json
    save_directory: str = DEFAULT_SAVE_DIRECTORY
    base_url: str = LABELARY_URL
    timeout: float = RENDER_TIMEOUT

    def __post_init__(self):
        fmt = (self.output_format or DEFAULT_OUTPUT_FORMAT).lower()
        if fmt not in OUTPUT_FORMATS:
            logger.warning(f"Unknown output format '{self.output_format}', using png")
            fmt = DEFAULT_OUTPUT_FORMAT
        object.__setattr__(self, 'output_format', fmt)
        object.__setattr__(self, 'base_url', self.base_url.rstrip('/'))

    @property
    def format_info(self) -> Dict[str, str]:
        """Accept header, extension and artifact kind of the output format."""
        return OUTPUT_FORMATS[self.output_format]

    @property
    def label_size(self) -> str:
        """Label size in inches, as Labelary expects it (e.g. '4x6')."""
        return f'{_inches(self.label_width)}x{_inches(self.label_height)}'

    @property
    def endpoint(self) -> str:
        """Full Labelary render URL."""
        return f'{self.base_url}/{self.dpmm}/labels/{self.label_size}/{self.label_index}/'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dpmm': self.dpmm,
            'labelSize': f'{self.label_size} inches',
            'labelIndex': self.label_index,
            'outputFormat': self.output_format,
            'saveDirectory': self.save_directory,
            'apiEndpoint': self.endpoint,
        }


@dataclass(frozen=True)
class PrinterConfig:
    """Printer configuration, loaded once at startup."""

    kind: str = DEFAULT_PRINTER_TYPE  # tcp, usb, virtual

    # Network printers
    host: Optional[str] = None
    port: Optional[int] = DEFAULT_TCP_PORT
    timeout: float = DEFAULT_TCP_TIMEOUT

    # USB printers
    vendor_id: int = DEFAULT_USB_VENDOR_ID
    product_id: Optional[int] = None

    # Virtual printer
    virtual: VirtualSettings = field(default_factory=VirtualSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Kind-specific view for the printer info endpoint."""
        data: Dict[str, Any] = {'type': self.kind}
        kind = self.kind.lower()
        if kind == PrinterKind.TCP.value:
            data.update(host=self.host, port=self.port, timeout=self.timeout)
        elif kind == PrinterKind.USB.value:
            data['vendorId'] = f'0x{self.vendor_id:04x}'
            data['productId'] = (
                f'0x{self.product_id:04x}' if self.product_id is not None else 'auto-detect'
            )
        elif kind == PrinterKind.VIRTUAL.value:
            data['virtual'] = self.virtual.to_dict()
        return data

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'PrinterConfig':
        """Build the configuration from environment variables."""
        env = os.environ if environ is None else environ

        virtual = VirtualSettings(
            dpmm=env.get('VIRTUAL_DPMM', DEFAULT_DPMM),
            label_width=_positive(env, 'VIRTUAL_LABEL_WIDTH', DEFAULT_LABEL_WIDTH_MM),
            label_height=_positive(env, 'VIRTUAL_LABEL_HEIGHT', DEFAULT_LABEL_HEIGHT_MM),
            label_index=_integer(env, 'VIRTUAL_LABEL_INDEX', DEFAULT_LABEL_INDEX),
            output_format=env.get('VIRTUAL_OUTPUT_FORMAT', DEFAULT_OUTPUT_FORMAT),
            save_directory=env.get('VIRTUAL_SAVE_DIRECTORY', DEFAULT_SAVE_DIRECTORY),
            base_url=env.get('VIRTUAL_BASE_URL', LABELARY_URL),
        )

        return cls(
            kind=env.get('PRINTER_TYPE', DEFAULT_PRINTER_TYPE).strip().lower(),
            host=env.get('PRINTER_HOST') or None,
            port=_integer(env, 'PRINTER_PORT', DEFAULT_TCP_PORT),
            timeout=_positive(env, 'PRINTER_TIMEOUT', DEFAULT_TCP_TIMEOUT),
            vendor_id=_integer(env, 'USB_VENDOR_ID', DEFAULT_USB_VENDOR_ID, base=16),
            product_id=_integer(env, 'USB_PRODUCT_ID', None, base=16),
            virtual=virtual,
        )


def _integer(env: Mapping[str, str], name: str, default, base: int = 10):
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip(), base)
    except ValueError as e:
        raise ConfigurationError(f'{name} must be an integer, got {value!r}', cause=e) from e


def _number(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f'{name} must be a number, got {value!r}', cause=e) from e


def _positive(env: Mapping[str, str], name: str, default: float) -> float:
    number = _number(env, name, default)
    # nan fails this comparison too
    if not number > 0:
        raise ConfigurationError(f'{name} must be positive, got {env.get(name)!r}')
    return number
