import pytest
import usb.core
import usb.util

from zebra_proxy.exceptions import (
    DeviceNotFoundError, NoOutputEndpointError, TransferError, TransportError,
)
from zebra_proxy.handlers import USBHandler
from zebra_proxy.models import PrinterConfig

ZEBRA = 0x0A5F
PAYLOAD = b'^XA^FDUSB^FS^XZ'


class FakeEndpoint:
    def __init__(self, address, error=None):
        self.bEndpointAddress = address
        self.error = error
        self.writes = []

    def write(self, data, timeout=None):
        if self.error is not None:
            raise self.error
        self.writes.append(bytes(data))
        return len(data)


class FakeInterface(list):
    bInterfaceNumber = 0


class FakeConfiguration:
    def __init__(self, interface):
        self.interface = interface

    def __getitem__(self, key):
        assert key == (0, 0)
        return self.interface


class FakeDevice:
    def __init__(self, endpoints, product_id=0x0085, kernel_driver=True):
        self.idVendor = ZEBRA
        self.idProduct = product_id
        self.interface = FakeInterface(endpoints)
        self.kernel_driver = kernel_driver
        self.detached = []
        self.configured = False

    def is_kernel_driver_active(self, number):
        return self.kernel_driver

    def detach_kernel_driver(self, number):
        self.detached.append(number)
        self.kernel_driver = False

    def get_active_configuration(self):
        if not self.configured:
            raise usb.core.USBError('Configuration not set')
        return FakeConfiguration(self.interface)

    def set_configuration(self):
        self.configured = True


@pytest.fixture
def usb_calls(monkeypatch):
    """Record interface claims and device releases."""
    calls = {'claimed': [], 'disposed': []}
    monkeypatch.setattr(usb.util, 'claim_interface',
                        lambda device, interface: calls['claimed'].append(interface))
    monkeypatch.setattr(usb.util, 'dispose_resources',
                        lambda device: calls['disposed'].append(device))
    return calls


def _install_devices(monkeypatch, *devices):
    searches = []

    def find(**kwargs):
        searches.append(kwargs)
        for device in devices:
            if all(getattr(device, key) == value for key, value in kwargs.items()):
                return device
        return None

    monkeypatch.setattr(usb.core, 'find', find)
    return searches


def _handler(product_id=None) -> USBHandler:
    return USBHandler(PrinterConfig(kind='usb', vendor_id=ZEBRA, product_id=product_id))


def test_no_matching_device_raises_without_opening(monkeypatch, usb_calls) -> None:
    _install_devices(monkeypatch)

    with pytest.raises(DeviceNotFoundError):
        _handler().send(PAYLOAD)

    assert usb_calls['claimed'] == []
    assert usb_calls['disposed'] == []


def test_product_id_requires_exact_match(monkeypatch, usb_calls) -> None:
    other = FakeDevice([FakeEndpoint(0x01)], product_id=0x0001)
    searches = _install_devices(monkeypatch, other)

    with pytest.raises(DeviceNotFoundError):
        _handler(product_id=0x0085).send(PAYLOAD)

    assert searches == [{'idVendor': ZEBRA, 'idProduct': 0x0085}]


def test_vendor_only_takes_first_device(monkeypatch, usb_calls) -> None:
    endpoint = FakeEndpoint(0x01)
    device = FakeDevice([endpoint], product_id=0x0123)
    searches = _install_devices(monkeypatch, device)

    outcome = _handler().send(PAYLOAD)

    assert searches == [{'idVendor': ZEBRA}]
    assert endpoint.writes == [PAYLOAD]
    assert outcome.bytes_sent == len(PAYLOAD)
    assert outcome.backend == 'usb'


def test_successful_transfer_detaches_claims_and_releases(monkeypatch, usb_calls) -> None:
    in_endpoint = FakeEndpoint(0x81)
    out_endpoint = FakeEndpoint(0x01)
    device = FakeDevice([in_endpoint, out_endpoint])
    _install_devices(monkeypatch, device)

    _handler(product_id=0x0085).send(PAYLOAD)

    assert device.detached == [0]
    assert device.configured is True
    assert usb_calls['claimed'] == [device.interface]
    assert usb_calls['disposed'] == [device]
    assert out_endpoint.writes == [PAYLOAD]
    assert in_endpoint.writes == []


def test_transfer_error_still_releases_device(monkeypatch, usb_calls) -> None:
    endpoint = FakeEndpoint(0x01, error=usb.core.USBError('Pipe error'))
    device = FakeDevice([endpoint])
    _install_devices(monkeypatch, device)

    with pytest.raises(TransferError) as exc_info:
        _handler().send(PAYLOAD)

    assert isinstance(exc_info.value.cause, usb.core.USBError)
    assert usb_calls['disposed'] == [device]


def test_missing_out_endpoint(monkeypatch, usb_calls) -> None:
    device = FakeDevice([FakeEndpoint(0x81)])
    _install_devices(monkeypatch, device)

    with pytest.raises(NoOutputEndpointError):
        _handler().send(PAYLOAD)

    assert usb_calls['disposed'] == [device]


def test_short_write_is_a_transfer_error(monkeypatch, usb_calls) -> None:
    class ShortEndpoint(FakeEndpoint):
        def write(self, data, timeout=None):
            return len(data) - 1

    device = FakeDevice([ShortEndpoint(0x01)])
    _install_devices(monkeypatch, device)

    with pytest.raises(TransferError):
        _handler().send(PAYLOAD)

    assert usb_calls['disposed'] == [device]


def test_claim_failure_releases_device(monkeypatch, usb_calls) -> None:
    device = FakeDevice([FakeEndpoint(0x01)])
    _install_devices(monkeypatch, device)

    def busy(device, interface):
        raise usb.core.USBError('Resource busy')

    monkeypatch.setattr(usb.util, 'claim_interface', busy)

    with pytest.raises(TransportError):
        _handler().send(PAYLOAD)

    assert usb_calls['disposed'] == [device]


def test_kernel_driver_detach_unsupported_is_ignored(monkeypatch, usb_calls) -> None:
    class NoKernelDriverDevice(FakeDevice):
        def is_kernel_driver_active(self, number):
            raise NotImplementedError

    endpoint = FakeEndpoint(0x01)
    device = NoKernelDriverDevice([endpoint])
    _install_devices(monkeypatch, device)

    _handler().send(PAYLOAD)

    assert endpoint.writes == [PAYLOAD]
