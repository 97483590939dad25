"""Shared fixtures for the Zebra Proxy test suite."""

import socket
import threading

import pytest

from zebra_proxy.models import PrinterConfig, VirtualSettings


class FakeResponse:
    """Just enough of requests.Response for the virtual printer."""

    def __init__(self, status_code=200, content=b'', headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    @property
    def text(self):
        return self.content.decode('utf-8')


class RecordingPost:
    """Stand-in for requests.post that records calls and replays a response."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(content=b'\x89PNG rendered')
        self.error = error
        self.calls = []

    def __call__(self, url, data=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'data': data, 'headers': headers, 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_post(monkeypatch):
    """Replace requests.post inside the virtual handler."""
    post = RecordingPost()
    monkeypatch.setattr('zebra_proxy.handlers.virtual.requests.post', post)
    return post


@pytest.fixture
def save_dir(tmp_path):
    return tmp_path / 'labels'


@pytest.fixture
def virtual_config(save_dir):
    return PrinterConfig(
        kind='virtual',
        virtual=VirtualSettings(
            save_directory=str(save_dir),
            base_url='http://labelary.test/v1/printers',
        ),
    )


@pytest.fixture
def tcp_server():
    """
    Start single-connection TCP stubs on localhost.

    Call the fixture with a function taking the accepted connection; it
    returns the port to connect to.
    """
    servers = []
    threads = []
    release = threading.Event()

    def start(handle):
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind(('127.0.0.1', 0))
        server.listen(1)
        servers.append(server)

        def run():
            conn, _ = server.accept()
            with conn:
                handle(conn, release)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        threads.append(thread)
        return server.getsockname()[1]

    yield start

    release.set()
    for thread in threads:
        thread.join(timeout=2)
    for server in servers:
        server.close()


@pytest.fixture
def closed_port():
    """A localhost port nothing listens on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
